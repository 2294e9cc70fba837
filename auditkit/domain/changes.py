"""Attribute dirty tracking: which attributes changed since the last committed state."""

from typing import Any, Callable, Dict, List, Optional

_MISSING = object()


class ChangeTracker:
    """Holds ``{attribute: [old, new]}`` for every attribute that differs from its committed value."""

    def __init__(self) -> None:
        self._diff: Dict[str, List[Any]] = {}

    def record(self, name: str, old: Any, new: Any) -> None:
        if name in self._diff:
            original = self._diff[name][0]
            if new == original:
                del self._diff[name]
            else:
                self._diff[name] = [original, new]
        elif old != new:
            self._diff[name] = [old, new]

    def changed(self) -> bool:
        return bool(self._diff)

    def changes(self) -> Dict[str, List[Any]]:
        return {name: list(pair) for name, pair in self._diff.items()}

    def commit(self) -> None:
        """Changes applied: the current values become the committed state."""
        self._diff.clear()


class Attribute:
    """
    Tracked entity attribute. Assignment is recorded in the owning
    instance's ChangeTracker (``instance._changes``).
    """

    def __init__(self, default: Any = None, *, default_factory: Optional[Callable[[], Any]] = None) -> None:
        self.default = default
        self.default_factory = default_factory
        self.name = ""

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        value = instance.__dict__.get(self.name, _MISSING)
        if value is _MISSING:
            value = self.default_factory() if self.default_factory else self.default
            instance.__dict__[self.name] = value
        return value

    def __set__(self, instance, value: Any) -> None:
        old = self.__get__(instance)
        instance.__dict__[self.name] = value
        instance._changes.record(self.name, old, value)
