"""Around-style callback chains per lifecycle event."""

from typing import Any, Callable, Dict, Iterable, List, Tuple

from auditkit.domain.exceptions import ContinuationError, UnknownCallbackEventError

Continuation = Callable[[], Any]
Wrapper = Callable[[Any, Continuation], Any]


class _Proceed:
    """The rest of the chain. May be invoked at most once."""

    def __init__(self, event: str, rest: Continuation) -> None:
        self._event = event
        self._rest = rest
        self.called = False

    def __call__(self) -> Any:
        if self.called:
            raise ContinuationError(f"{self._event} callback invoked its continuation twice")
        self.called = True
        return self._rest()


class CallbackChain:
    """
    Ordered around-wrappers per event. Registration order is execution order,
    outermost first. A wrapper is called as ``wrapper(target, proceed)`` and
    either calls ``proceed()`` once or skips it to short-circuit. Errors pass
    through the chain untouched.
    """

    def __init__(self, events: Iterable[str] = ()) -> None:
        self._wrappers: Dict[str, List[Wrapper]] = {event: [] for event in events}

    def define(self, *events: str) -> None:
        for event in events:
            self._wrappers.setdefault(event, [])

    @property
    def events(self) -> Tuple[str, ...]:
        return tuple(self._wrappers)

    def _check(self, event: str) -> List[Wrapper]:
        if event not in self._wrappers:
            raise UnknownCallbackEventError(
                f"No callback event {event!r} (defined: {', '.join(self._wrappers) or 'none'})"
            )
        return self._wrappers[event]

    def register(self, event: str, wrapper: Wrapper) -> Wrapper:
        self._check(event).append(wrapper)
        return wrapper

    def wrappers(self, event: str) -> Tuple[Wrapper, ...]:
        return tuple(self._check(event))

    def copy(self) -> "CallbackChain":
        chain = CallbackChain()
        chain._wrappers = {event: list(wrappers) for event, wrappers in self._wrappers.items()}
        return chain

    def run(self, event: str, target: Any, block: Continuation) -> Any:
        """Run block inside every wrapper for event. Returns what block returns."""
        wrappers = self.wrappers(event)

        def call(index: int) -> Any:
            if index == len(wrappers):
                return block()
            return wrappers[index](target, _Proceed(event, lambda: call(index + 1)))

        return call(0)
