"""Wraps entity methods so each invocation is audited exactly once."""

import functools
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from auditkit.domain.outcome import Outcome

_AUDITED = "__audited__"


@contextmanager
def outermost_call(instance: Any, key: tuple) -> Iterator[bool]:
    """True only for the outermost audited call of key on this instance."""
    active = instance.__dict__.setdefault("_active_audits", set())
    if key in active:
        yield False
        return
    active.add(key)
    try:
        yield True
    finally:
        active.discard(key)


def _is_audited(func: Callable) -> bool:
    return getattr(func, _AUDITED, None) is not None


def audited_action(func: Optional[Callable] = None, *, name: Optional[str] = None):
    """
    Log a named action: one success record on return, or one failure record
    carrying the error before the identical error is re-raised. No diff.

    Usable as ``@audited_action``, ``@audited_action(name="approve")`` or
    ``audited_action(method)``. Wrapping an audited method returns it unchanged.
    """

    def decorate(fn: Callable) -> Callable:
        if _is_audited(fn):
            return fn
        action = name or fn.__name__

        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            with outermost_call(self, ("action", action)) as outermost:
                if not outermost:
                    return fn(self, *args, **kwargs)
                outcome = Outcome.capture(fn, self, *args, **kwargs)
                self.log_action(action, error=outcome.error)
                return outcome.unwrap()

        setattr(wrapper, _AUDITED, ("action", action))
        return wrapper

    if func is not None:
        return decorate(func)
    return decorate


def audited_mutation(func: Optional[Callable] = None):
    """
    Run the method under the entity's update chain and commit the change set
    afterwards, the same as ``entity.audit(lambda: method(...))``.
    """

    def decorate(fn: Callable) -> Callable:
        if _is_audited(fn):
            return fn

        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            with outermost_call(self, ("mutation", fn.__name__)) as outermost:
                if not outermost:
                    return fn(self, *args, **kwargs)
                return self.audit(lambda: fn(self, *args, **kwargs))

        setattr(wrapper, _AUDITED, ("mutation", fn.__name__))
        return wrapper

    if func is not None:
        return decorate(func)
    return decorate


def apply_interceptors(cls: type) -> None:
    """Wrap the methods named in cls.audit_actions and cls.audit_mutations, once each."""
    for attr, decorator in (("audit_actions", audited_action), ("audit_mutations", audited_mutation)):
        for method_name in getattr(cls, attr, ()):
            method = getattr(cls, method_name, None)
            if not callable(method):
                raise AttributeError(
                    f"{cls.__name__}.{attr} names {method_name!r}, which is not a method of {cls.__name__}"
                )
            wrapped = decorator(method)
            if wrapped is not method:
                setattr(cls, method_name, wrapped)
