# ceprace/race/manager.py
import asyncio
import logging
from contextvars import ContextVar
from typing import Any, Awaitable, Optional

from ceprace.race.events import RaceListener
from ceprace.race.exceptions import RaceAllFailed, RaceTimeout
from ceprace.race.typing import ContendersT, RaceResult

_logger = logging.getLogger(__name__)

_Outcome = tuple[str, Any, Optional[Exception]]

# deadlines of the `async with` blocks open in the current task, innermost last
_BLOCK_DEADLINES: ContextVar[tuple[tuple["RaceManager", asyncio.Timeout], ...]] = ContextVar(
    "ceprace_block_deadlines", default=()
)


class RaceManager:
    """
    Run named contenders concurrently; the first one to finish wins.
    A deadline can bound the overall wait.

    Losing contenders are abandoned in place: they keep running until they
    finish on their own and their results are dropped. Nothing is cancelled
    when a winner is picked or when the deadline fires.

    A contender that raises finishes with a None result. Unless
    ``skip_failures`` is set, such a contender still wins when it is the
    first to finish.
    """

    def __init__(
        self,
        timeout: Optional[float] = 1.0,
        skip_failures: bool = False,
        event_dispatcher: Optional[RaceListener] = None,
        name: Optional[str] = None,
    ) -> None:
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be > 0 when provided")

        self._timeout = timeout
        self._skip_failures = skip_failures
        self._event_dispatcher = event_dispatcher
        self._name = name

        self._abandoned: set[asyncio.Task] = set()

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def abandoned(self) -> frozenset[asyncio.Task]:
        return frozenset(self._abandoned)

    async def __call__(self, contenders: ContendersT) -> RaceResult:
        if not contenders:
            raise ValueError("at least one contender is required")

        tasks = [
            asyncio.create_task(self._run(contender, awaitable), name=f"race:{self._name}:{contender}")
            for contender, awaitable in contenders.items()
        ]

        try:
            if self._timeout is None:
                return await self._await_first(tasks)
            async with asyncio.timeout(self._timeout):
                return await self._await_first(tasks)
        except TimeoutError:
            _logger.warning(f"Timeout reached while fetching data (race={self._name}, timeout={self._timeout}s)")
            if self._event_dispatcher:
                await self._event_dispatcher.on_race_timeout(self)
            raise RaceTimeout(f"no contender finished within {self._timeout}s") from None
        finally:
            self._abandon(tasks)

    async def wait_abandoned(self) -> None:
        """Wait for contenders that lost a race to finish on their own."""
        while self._abandoned:
            await asyncio.gather(*self._abandoned, return_exceptions=True)

    @staticmethod
    async def _run(contender: str, awaitable: Awaitable[Any]) -> _Outcome:
        try:
            return contender, await awaitable, None
        except Exception as e:
            return contender, None, e

    async def _await_first(self, tasks: list[asyncio.Task]) -> RaceResult:
        for t in asyncio.as_completed(tasks):
            contender, result, error = await t

            if error is not None:
                _logger.error(f"Contender {contender} failed: {error!r}")
                if self._event_dispatcher:
                    await self._event_dispatcher.on_contender_failure(self, contender, error)

            if result is None and self._skip_failures:
                continue

            if self._event_dispatcher:
                await self._event_dispatcher.on_race_won(self, contender, result)
            return RaceResult(contender=contender, payload=result)

        # only reachable with skip_failures: everybody finished empty-handed
        if self._event_dispatcher:
            await self._event_dispatcher.on_race_all_failed(self)
        raise RaceAllFailed("every contender failed")

    def _abandon(self, tasks: list[asyncio.Task]) -> None:
        for t in tasks:
            if not t.done():
                self._abandoned.add(t)
                t.add_done_callback(self._abandoned.discard)

    # ---- async context manager to apply the deadline over a code block ----

    async def __aenter__(self):
        if self._timeout is None:
            return self
        deadline = asyncio.timeout(self._timeout)
        await deadline.__aenter__()
        _BLOCK_DEADLINES.set(_BLOCK_DEADLINES.get() + ((self, deadline),))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # one manager may guard blocks in several tasks at once
        stack = _BLOCK_DEADLINES.get()
        for i in range(len(stack) - 1, -1, -1):
            if stack[i][0] is self:
                deadline = stack[i][1]
                _BLOCK_DEADLINES.set(stack[:i] + stack[i + 1 :])
                break
        else:
            return False

        try:
            return await deadline.__aexit__(exc_type, exc_val, exc_tb)
        except TimeoutError:
            if self._event_dispatcher:
                await self._event_dispatcher.on_race_timeout(self)
            raise RaceTimeout(f"block did not finish within {self._timeout}s") from None
