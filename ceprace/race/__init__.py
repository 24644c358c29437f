from ceprace.race.api import race
from ceprace.race.events import RaceListener, register_race_listener
from ceprace.race.manager import RaceManager
from ceprace.race.exceptions import RaceAllFailed, RaceTimeout
from ceprace.race.typing import RaceResult

__all__ = (
    "race",
    "RaceListener",
    "register_race_listener",
    "RaceManager",
    "RaceAllFailed",
    "RaceTimeout",
    "RaceResult",
)
