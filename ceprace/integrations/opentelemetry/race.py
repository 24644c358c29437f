# integrations/opentelemetry/race.py
from typing import Any

from ceprace.race.events import RaceListener
from ceprace.race.manager import RaceManager

from opentelemetry.metrics import get_meter
from ceprace.integrations.opentelemetry.__version__ import __version__


class RaceMetricListener(RaceListener):
    def __init__(self, component: RaceManager, namespace: str, meter=None, meter_provider=None) -> None:
        if meter is None:
            meter = get_meter(__name__, __version__, meter_provider)

        self._meter = meter
        prefix = f"{namespace}.{component.name}.race" if component.name else f"{namespace}.race"

        self._won = meter.create_counter(name=f"{prefix}.won")
        self._failure = meter.create_counter(name=f"{prefix}.contender_failure")
        self._timeout = meter.create_counter(name=f"{prefix}.timeout")
        self._all_failed = meter.create_counter(name=f"{prefix}.all_failed")

    async def on_race_won(self, race: "RaceManager", contender: str, result: Any) -> None:
        self._won.add(1, {"contender": contender, "empty": result is None})

    async def on_contender_failure(self, race: "RaceManager", contender: str, exception: Exception) -> None:
        self._failure.add(1, {"contender": contender})

    async def on_race_timeout(self, race: "RaceManager") -> None:
        self._timeout.add(1)

    async def on_race_all_failed(self, race: "RaceManager") -> None:
        self._all_failed.add(1)
