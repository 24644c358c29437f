from typing import Optional, Generic, Type, TypeVar

from opentelemetry.metrics import Meter, MeterProvider

from ceprace.race import register_race_listener
from ceprace.race.manager import RaceManager
from ceprace.integrations.opentelemetry.race import RaceMetricListener

ComponentT = TypeVar("ComponentT")
ListenerT = TypeVar("ListenerT")


class Factory(Generic[ComponentT, ListenerT]):
    def __init__(self, listener_class: Type[ListenerT], *args, **kwargs) -> None:
        self.listener_class = listener_class
        self.args = args
        self.kwargs = kwargs

    async def __call__(self, component: ComponentT) -> ListenerT:
        return self.listener_class(component, *self.args, **self.kwargs)


class CepRaceOtelInstrumentor:
    def instrument(
        self,
        *,
        namespace: str = "ceprace.service",
        meter: Optional[Meter] = None,
        meter_provider: Optional[MeterProvider] = None,
    ) -> None:

        register_race_listener(
            Factory[RaceManager, RaceMetricListener](
                RaceMetricListener,
                namespace=namespace,
                meter=meter,
                meter_provider=meter_provider,
            )
        )
