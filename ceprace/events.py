from typing import Any, Awaitable, Callable, Generic, MutableMapping, Optional, TypeVar, Union

ComponentT = TypeVar("ComponentT")
ListenerT = TypeVar("ListenerT")

ListenerFactoryT = Callable[[Any], Awaitable[Any]]


class ListenerRegistry(Generic[ComponentT, ListenerT]):
    """
    Process-wide listeners for one component type.

    Entries are either ready listener instances or async factories that build
    a listener for a given component (see the OpenTelemetry integration).
    """

    def __init__(self) -> None:
        self._listeners: list[ListenerT] = []
        self._factories: list[ListenerFactoryT] = []

    def register(self, listener: Union[ListenerT, ListenerFactoryT]) -> None:
        if callable(listener):
            self._factories.append(listener)
        else:
            self._listeners.append(listener)

    def clear(self) -> None:
        self._listeners.clear()
        self._factories.clear()

    async def build(
        self,
        component: ComponentT,
        built: Optional[MutableMapping[ListenerFactoryT, ListenerT]] = None,
    ) -> list[ListenerT]:
        """
        Current listeners for ``component``. Factories already present in
        ``built`` are reused instead of being called again.
        """
        listeners = list(self._listeners)
        for factory in self._factories:
            if built is not None and factory in built:
                listeners.append(built[factory])
                continue
            listener = await factory(component)
            if built is not None:
                built[factory] = listener
            listeners.append(listener)
        return listeners
