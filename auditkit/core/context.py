# auditkit/core/context.py

import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional

correlation_id_ctx = contextvars.ContextVar("correlation_id", default=None)
actor_ctx = contextvars.ContextVar("actor", default=None)


@contextmanager
def acting_as(actor: Optional[str]) -> Iterator[None]:
    """Attribute audit records written inside the block to actor."""
    token = actor_ctx.set(actor)
    try:
        yield
    finally:
        actor_ctx.reset(token)
