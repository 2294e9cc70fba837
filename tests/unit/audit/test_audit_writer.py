"""AuditWriter: immutable records, actor resolution, failure isolation."""

import dataclasses
import logging

import pytest

from auditkit.audit.exceptions import AuditStoreNotConfiguredError
from auditkit.audit.models import AuditRecord, WriteError
from auditkit.audit.registry import StoreRegistry
from auditkit.audit.writer import AuditWriter
from auditkit.core.context import acting_as


@pytest.fixture
def writer(settings, registry, metrics):
    return AuditWriter(settings=settings, registry=registry, metrics=metrics)


def test_write_persists_record(writer, audit_store, metrics):
    record = writer.write(
        action="update",
        subject_type="Widget",
        subject_id="w-1",
        metadata={"name": ["a", "b"]},
    )
    assert isinstance(record, AuditRecord)
    assert record.actor == "alice"
    assert record.success is True
    assert record.error is None
    assert record.created_at.tzinfo is not None
    assert audit_store.all() == [record]
    assert metrics.get("audit_records_written", category="update") == 1


def test_record_is_immutable(writer):
    record = writer.write(action="approve", subject_type="Widget", subject_id="w-1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.action = "other"  # type: ignore[misc]


def test_error_marks_failure(writer):
    record = writer.write(
        action="approve",
        subject_type="Widget",
        subject_id="w-1",
        error=ValueError("denied"),
    )
    assert record.success is False
    assert record.error == "ValueError: denied"


def test_context_actor_overrides_configured_user(writer):
    with acting_as("bob"):
        record = writer.write(action="approve", subject_type="Widget", subject_id="w-1")
    assert record.actor == "bob"
    assert writer.current_actor() == "alice"


def test_no_actor_configured(registry, settings):
    anonymous = AuditWriter(settings=settings.model_copy(update={"current_user": None}), registry=registry)
    record = anonymous.write(action="approve", subject_type="Widget", subject_id=None)
    assert record.actor is None
    assert record.subject_id is None


def test_store_failure_returns_write_error(settings, failing_registry, metrics, caplog):
    writer = AuditWriter(settings=settings, registry=failing_registry, metrics=metrics)

    result = writer.write(action="delete", subject_type="Widget", subject_id="w-1")

    assert isinstance(result, WriteError)
    assert isinstance(result.error, ConnectionError)
    assert result.record.action == "delete"
    assert metrics.get("audit_write_failures", category="delete") == 1
    [log] = [r for r in caplog.records if r.message == "audit_write_failed"]
    assert log.levelno == logging.ERROR
    assert log.subject_id == "w-1"
    assert log.exc_info is not None


def test_success_is_logged(writer, caplog):
    caplog.set_level(logging.INFO, logger="auditkit.audit.writer")
    writer.write(action="update", subject_type="Widget", subject_id="w-1")
    assert [r.message for r in caplog.records] == ["audit_record_written"]


def test_query_returns_newest_first(writer):
    first = writer.write(action="update", subject_type="Widget", subject_id="w-1")
    second = writer.write(action="delete", subject_type="Widget", subject_id="w-1")
    assert writer.query("Widget", "w-1") == [second, first]


def test_unknown_store_fails_fast(settings):
    registry = StoreRegistry()
    registry.register("memory", lambda _settings: None)
    with pytest.raises(AuditStoreNotConfiguredError) as exc_info:
        AuditWriter(settings=settings.model_copy(update={"audit_with": "ledger"}), registry=registry)
    assert "ledger" in exc_info.value.message
    assert "memory" in exc_info.value.message


def test_registry_builds_factory_store_once(settings):
    built = []

    def factory(s):
        built.append(s)
        from auditkit.audit.memory_store import InMemoryAuditStore

        return InMemoryAuditStore()

    registry = StoreRegistry()
    registry.register("Ledger", factory)
    first = registry.resolve("ledger", settings)
    assert registry.resolve("LEDGER", settings) is first
    assert built == [settings]
