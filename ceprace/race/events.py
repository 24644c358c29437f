from typing import TYPE_CHECKING, Any, Union
from ceprace.events import ListenerFactoryT, ListenerRegistry

if TYPE_CHECKING:
    from ceprace.race.manager import RaceManager

_RACE_LISTENERS: ListenerRegistry["RaceManager", "RaceListener"] = ListenerRegistry()


class RaceListener:
    async def on_race_won(self, race: "RaceManager", contender: str, result: Any) -> None:
        ...

    async def on_contender_failure(self, race: "RaceManager", contender: str, exception: Exception) -> None:
        ...

    async def on_race_timeout(self, race: "RaceManager") -> None:
        ...

    async def on_race_all_failed(self, race: "RaceManager") -> None:
        ...


def register_race_listener(listener: Union["RaceListener", ListenerFactoryT]) -> None:
    global _RACE_LISTENERS
    _RACE_LISTENERS.register(listener)
