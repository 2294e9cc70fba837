"""SqlAuditStore against in-memory SQLite."""

import pytest

from auditkit.audit.models import AuditRecordInput
from auditkit.config.settings import AuditSettings
from auditkit.infrastructure.database.audit_store_db import SqlAuditStore


def _input(action="update", subject_id="w-1", **overrides):
    values = dict(
        action=action,
        subject_type="Widget",
        subject_id=subject_id,
        actor="alice",
        metadata={"name": ["a", "b"]},
        success=True,
        error=None,
    )
    values.update(overrides)
    return AuditRecordInput(**values)


@pytest.fixture
def store():
    return SqlAuditStore.from_settings(AuditSettings(database_url="sqlite://"))


def test_create_assigns_id_and_timestamp(store):
    record = store.create(_input())
    assert record.id
    assert record.created_at.tzinfo is not None
    assert record.metadata == {"name": ["a", "b"]}
    assert record.actor == "alice"


def test_query_newest_first(store):
    first = store.create(_input("update"))
    second = store.create(_input("approve", metadata=None))
    third = store.create(_input("delete", metadata=None, success=False, error="RuntimeError: gone"))
    assert [r.id for r in store.query("Widget", "w-1")] == [third.id, second.id, first.id]
    assert store.query("Widget", "w-1")[0].error == "RuntimeError: gone"


def test_query_filters_by_subject(store):
    store.create(_input(subject_id="w-1"))
    store.create(_input(subject_id="w-2"))
    store.create(_input(subject_id=None))
    assert len(store.query("Widget", "w-2")) == 1
    assert len(store.query("Widget", None)) == 1
    assert store.query("Gadget", "w-1") == []
