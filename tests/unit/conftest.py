"""Shared fixtures: isolated store registry, settings, metrics, and a sample audited entity."""

import pytest

from auditkit.audit.memory_store import InMemoryAuditStore
from auditkit.audit.registry import StoreRegistry
from auditkit.config.settings import AuditSettings
from auditkit.domain.changes import Attribute
from auditkit.domain.entity import AuditedEntity
from auditkit.infrastructure.http.backend import Backend
from auditkit.observability.metrics import MetricsCollector


class RecordingBackend(Backend):
    """Backend that never touches the network. Set fail_with to make calls raise."""

    base_url = "https://api.test/widgets"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: list[tuple] = []
        self.fail_with: Exception | None = None
        self.response = {"status": "ok"}

    def update(self):
        self.calls.append(("update", self.model.changes()))
        if self.fail_with is not None:
            raise self.fail_with
        return self.response

    def destroy(self):
        self.calls.append(("destroy", None))
        if self.fail_with is not None:
            raise self.fail_with


class WidgetsClient(RecordingBackend):
    """Resolved for Widget by naming convention."""


class Widget(AuditedEntity):
    audit_actions = ("approve",)

    uid = Attribute()
    name = Attribute()
    age = Attribute()

    def approve(self, fail_with: Exception | None = None):
        if fail_with is not None:
            raise fail_with
        return "approved"


class FailingStore:
    """Audit store whose writes always fail."""

    def __init__(self):
        self.attempts = 0

    def create(self, record):
        self.attempts += 1
        raise ConnectionError("audit store unavailable")

    def query(self, subject_type, subject_id):
        return []


@pytest.fixture
def audit_store():
    return InMemoryAuditStore()


@pytest.fixture
def registry(audit_store):
    reg = StoreRegistry()
    reg.register("memory", audit_store)
    return reg


@pytest.fixture
def settings():
    return AuditSettings(current_user="alice", audit_with="memory")


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def make_widget(settings, registry, metrics):
    def _make(cls=Widget, **attributes):
        attributes.setdefault("uid", "w-1")
        return cls(settings=settings, registry=registry, metrics=metrics, **attributes)

    return _make


@pytest.fixture
def widget(make_widget):
    return make_widget(name="a", age=5)


@pytest.fixture
def widget_cls():
    return Widget


@pytest.fixture
def backend_cls():
    return RecordingBackend


@pytest.fixture
def failing_registry():
    reg = StoreRegistry()
    reg.register("memory", FailingStore())
    return reg
