"""
Audited entity facade. Persistence goes through a backend client; every
update, destroy and named action leaves one audit record behind.
"""

import json
from typing import Any, Callable, ClassVar, Dict, Optional, Sequence, Tuple, Type

from auditkit.audit.models import AuditRecord
from auditkit.audit.registry import StoreRegistry
from auditkit.audit.writer import AuditWriter, WriteResult
from auditkit.config.settings import AuditSettings, get_settings
from auditkit.domain.callbacks import CallbackChain, Wrapper
from auditkit.domain.changes import Attribute, ChangeTracker
from auditkit.domain.exceptions import NoSuchBackendError, UnknownAttributeError
from auditkit.domain.interceptor import apply_interceptors, outermost_call
from auditkit.domain.outcome import Outcome
from auditkit.infrastructure.http.backend import Backend, find_backend
from auditkit.observability.metrics import MetricsCollector


CALLBACK_EVENTS = ("update", "destroy")


def _pluralize(name: str) -> str:
    if name.endswith("y") and name[-2:-1] not in "aeiou":
        return name[:-1] + "ies"
    if name.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"


def log_update(entity: "AuditedEntity", proceed: Callable[[], Any]) -> Any:
    """Record an update: the diff on success (skipped when nothing changed), the error on failure."""
    outcome = Outcome.capture(proceed)
    if not outcome.ok:
        entity.log_action("update", error=outcome.error)
    elif entity.changed():
        entity.log_action("update", metadata=entity.changes())
    return outcome.unwrap()


def log_destroy(entity: "AuditedEntity", proceed: Callable[[], Any]) -> Any:
    """Record a delete, whether or not anything changed."""
    outcome = Outcome.capture(proceed)
    entity.log_action("delete", error=outcome.error)
    return outcome.unwrap()


class AuditedEntity:
    """
    Base class for audited domain entities.

    Subclasses declare tracked fields with ``Attribute`` and are persisted
    through a ``Backend`` subclass: ``backend_class`` if set, otherwise the
    backend named ``<Entity>sClient`` (``UserProfilesClient`` for
    ``UserProfile``). ``audit_actions`` and ``audit_mutations`` name methods
    to wrap; see auditkit.domain.interceptor.
    """

    primary_key: ClassVar[str] = "uid"
    audit_name: ClassVar[Optional[str]] = None
    backend_class: ClassVar[Optional[Type[Backend]]] = None
    excluded_attributes: ClassVar[Tuple[str, ...]] = ()
    audit_actions: ClassVar[Tuple[str, ...]] = ()
    audit_mutations: ClassVar[Tuple[str, ...]] = ()

    callbacks: ClassVar[CallbackChain] = CallbackChain(CALLBACK_EVENTS)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Own copy so subclass registrations do not leak into the parent
        cls.callbacks = cls.callbacks.copy()
        apply_interceptors(cls)

    def __init__(
        self,
        *,
        settings: Optional[AuditSettings] = None,
        registry: Optional[StoreRegistry] = None,
        metrics: Optional[MetricsCollector] = None,
        **attributes: Any,
    ) -> None:
        self._changes = ChangeTracker()
        self._settings = settings or get_settings()
        self.assign_attributes(attributes)
        self.changes_applied()

        self._writer = AuditWriter(settings=self._settings, registry=registry, metrics=metrics)
        self.backend = self.backend_for()(settings=self._settings)
        self.backend.register_model(self)

    # --- Class-level configuration ---

    @classmethod
    def model_name(cls) -> str:
        return cls.audit_name or cls.__name__

    @classmethod
    def attribute_names(cls) -> Tuple[str, ...]:
        names: Dict[str, None] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Attribute):
                    names[name] = None
        return tuple(names)

    @classmethod
    def register_callback(cls, event: str, wrapper: Wrapper) -> Wrapper:
        """Append an around-wrapper for event on this entity type (innermost so far)."""
        return cls.callbacks.register(event, wrapper)

    @classmethod
    def backend_for(cls) -> Type[Backend]:
        if cls.backend_class is not None:
            return cls.backend_class
        client_name = f"{_pluralize(cls.model_name())}Client"
        backend = find_backend(client_name)
        if backend is None:
            raise NoSuchBackendError(
                f"Model {cls.model_name()} is looking for an API client that doesn't exist!\n\n"
                "Either a) implement the new client:\n\n"
                f"    class {client_name}(Backend):\n"
                '        base_url = "https://example.com/some/path"\n\n'
                "Or b) use a different client instead:\n\n"
                "    backend_class = OtherClient\n"
            )
        return backend

    # --- Attributes and change tracking ---

    @property
    def pk(self) -> Any:
        return getattr(self, self.primary_key)

    @property
    def subject_id(self) -> Optional[str]:
        pk = self.pk
        return None if pk is None else str(pk)

    def check_attributes(self, attributes: Dict[str, Any]) -> None:
        unknown = [name for name in attributes if name not in self.attribute_names()]
        if unknown:
            raise UnknownAttributeError(
                f"unknown attribute(s) {', '.join(map(repr, unknown))} for {self.model_name()}"
            )

    def assign_attributes(self, attributes: Dict[str, Any]) -> None:
        self.check_attributes(attributes)
        for name, value in attributes.items():
            setattr(self, name, value)

    def changed(self) -> bool:
        return self._changes.changed()

    def changes(self) -> Dict[str, list]:
        return self._changes.changes()

    def changes_applied(self) -> None:
        self._changes.commit()

    @property
    def attributes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.attribute_names()}

    def to_payload(self) -> Dict[str, Any]:
        return {k: v for k, v in self.attributes.items() if k not in self.excluded_attributes}

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), default=str)

    # --- Audited operations ---

    def update(self, attributes: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        """Assign attributes and persist them; returns the backend's response payload."""
        attrs = {**(attributes or {}), **kwargs}
        self.check_attributes(attrs)

        def persist() -> Any:
            self.assign_attributes(attrs)
            return self.backend.update()

        return self._run_update_chain(persist)

    def destroy(self) -> None:
        with outermost_call(self, ("callbacks", "destroy")) as outermost:
            if not outermost:
                self.backend.destroy()
                return
            self.callbacks.run("destroy", self, self.backend.destroy)

    def audit(self, block: Callable[[], Any]) -> Any:
        """Run block under the update chain, then commit whatever it changed."""
        return self._run_update_chain(block)

    def _run_update_chain(self, block: Callable[[], Any]) -> Any:
        """
        Only the outermost update chain on this instance logs and commits;
        nested runs (update inside audit, say) just run their block.
        """
        with outermost_call(self, ("callbacks", "update")) as outermost:
            if not outermost:
                return block()
            result = self.callbacks.run("update", self, block)
        self.changes_applied()
        return result

    def close(self) -> None:
        """Release the backend's HTTP connection pool."""
        self.backend.close()

    def __enter__(self) -> "AuditedEntity":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def audit_logs(self) -> Sequence[AuditRecord]:
        """Every audit record for this entity, newest first."""
        return self._writer.query(self.model_name(), self.subject_id)

    def log_action(
        self,
        action: str,
        metadata: Optional[Dict[str, Any]] = None,
        error: Optional[BaseException] = None,
    ) -> WriteResult:
        return self._writer.write(
            action=action,
            subject_type=self.model_name(),
            subject_id=self.subject_id,
            metadata=metadata,
            error=error,
        )

    def __repr__(self) -> str:
        return f"<{self.model_name()} {self.primary_key}={self.pk!r}>"


AuditedEntity.callbacks.register("update", log_update)
AuditedEntity.callbacks.register("destroy", log_destroy)
