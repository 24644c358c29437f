from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Coroutine, Generic, Mapping, Optional, TypeVar

FuncT = TypeVar("FuncT", bound=Callable[..., Coroutine[Any, Any, Any]])
ContendersT = Mapping[str, Awaitable[Any]]

ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class RaceResult(Generic[ResultT]):
    """
    Outcome of a race: which contender finished first and what it produced.
    ``payload`` is None when the winning contender failed.
    """

    contender: str
    payload: Optional[ResultT]

    @property
    def failed(self) -> bool:
        return self.payload is None
