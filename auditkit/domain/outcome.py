"""Result of running a unit of work: either its value or the exception it raised."""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Ok when error is None, Err otherwise. unwrap() returns the value or
    re-raises the captured exception object itself.
    """

    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def capture(cls, func: Callable[..., T], *args: Any, **kwargs: Any) -> "Outcome[T]":
        try:
            return cls(value=func(*args, **kwargs))
        except Exception as e:
            return cls(error=e)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
