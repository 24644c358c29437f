# ceprace/race/api.py
import asyncio
import inspect
from typing import Any, Optional, Sequence

from ceprace.events import ListenerFactoryT
from ceprace.race.events import _RACE_LISTENERS, RaceListener
from ceprace.race.manager import RaceManager
from ceprace.race.typing import ContendersT, FuncT, RaceResult


class _CompositeListener(RaceListener):
    """
    Await listeners inline; no background tasks.
    Process-wide listeners are looked up on every event, so late registrations
    are picked up; each registered factory is built once per manager.
    """

    def __init__(self, listeners: Optional[Sequence[RaceListener]] = None) -> None:
        self._listeners = tuple(listeners or ())
        self._built: dict[ListenerFactoryT, RaceListener] = {}
        self._build_lock = asyncio.Lock()

    async def _all(self, race: "RaceManager") -> tuple[RaceListener, ...]:
        async with self._build_lock:
            registered = await _RACE_LISTENERS.build(race, self._built)
        return self._listeners + tuple(registered)

    async def on_race_won(self, race: "RaceManager", contender: str, result: Any) -> None:
        for l in await self._all(race):
            await l.on_race_won(race, contender, result)

    async def on_contender_failure(self, race: "RaceManager", contender: str, exception: Exception) -> None:
        for l in await self._all(race):
            await l.on_contender_failure(race, contender, exception)

    async def on_race_timeout(self, race: "RaceManager") -> None:
        for l in await self._all(race):
            await l.on_race_timeout(race)

    async def on_race_all_failed(self, race: "RaceManager") -> None:
        for l in await self._all(race):
            await l.on_race_all_failed(race)


class _WrappedRace:
    """
    Awaitable wrapper racing a fixed set of async functions against each other.
    Every call passes the same arguments to each contender.
    """

    def __init__(self, contenders: dict[str, FuncT], manager: RaceManager) -> None:
        self._contenders = contenders
        self._manager = manager

    @property
    def manager(self) -> RaceManager:
        return self._manager

    @property
    def contenders(self) -> tuple[str, ...]:
        return tuple(self._contenders)

    async def __call__(self, *args: Any, **kwargs: Any) -> RaceResult:
        return await self._manager(
            {name: func(*args, **kwargs) for name, func in self._contenders.items()}
        )

    async def __aenter__(self):
        return await self._manager.__aenter__()

    async def __aexit__(self, exc_type, exc, tb):
        return await self._manager.__aexit__(exc_type, exc, tb)


class _RaceFactory:
    """
    Binds named async functions into a race, runs ready-made awaitables,
    or acts as an async context manager bounding a block by the deadline.
    All three share a single RaceManager.
    """

    def __init__(
        self,
        *,
        timeout: Optional[float],
        skip_failures: bool,
        name: Optional[str],
        listeners: Optional[Sequence[RaceListener]],
    ) -> None:
        self._manager = RaceManager(
            timeout=timeout,
            skip_failures=skip_failures,
            event_dispatcher=_CompositeListener(listeners),
            name=name,
        )

    @property
    def manager(self) -> RaceManager:
        return self._manager

    def __call__(self, **contenders: FuncT) -> _WrappedRace:
        if not contenders:
            raise ValueError("race requires at least one contender")
        for contender, func in contenders.items():
            if not inspect.iscoroutinefunction(func):
                raise TypeError(f"race contender {contender!r} must be an async function")
        return _WrappedRace(dict(contenders), self._manager)

    async def run(self, contenders: ContendersT) -> RaceResult:
        return await self._manager(contenders)

    async def __aenter__(self):
        return await self._manager.__aenter__()

    async def __aexit__(self, exc_type, exc, tb):
        return await self._manager.__aexit__(exc_type, exc, tb)


def race(
    *,
    timeout: Optional[float] = 1.0,
    skip_failures: bool = False,
    name: Optional[str] = None,
    listeners: Optional[Sequence[RaceListener]] = None,
) -> _RaceFactory:
    """
    The race pattern starts several operations at once and keeps the answer
    of whichever finishes first. Slower operations are left to finish in the
    background and their answers are discarded.

    **Parameters:**
        * **timeout** - Deadline for the whole race in seconds (None waits forever)
        * **skip_failures** - Let failed contenders drop out instead of winning with None
        * **name** - Optional name for the race component
        * **listeners** - Optional sequence of RaceListener for event handling
    """
    if timeout is not None and timeout <= 0:
        raise ValueError("timeout must be > 0 when provided")

    return _RaceFactory(
        timeout=timeout,
        skip_failures=skip_failures,
        name=name,
        listeners=listeners,
    )
