"""RedisAuditStore against an in-memory fake client."""

import pytest

from auditkit.audit.models import AuditRecordInput
from auditkit.infrastructure.cache.audit_store_redis import RedisAuditStore


class FakeRedis:
    """In-memory Redis for unit tests."""

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._lists: dict[str, list[str]] = {}

    def incr(self, key: str) -> int:
        self._counters[key] = self._counters.get(key, 0) + 1
        return self._counters[key]

    def lpush(self, key: str, value: str) -> int:
        self._lists.setdefault(key, []).insert(0, value)
        return len(self._lists[key])

    def lrange(self, key: str, start: int, end: int) -> list[str]:
        items = self._lists.get(key, [])
        return items[start:] if end == -1 else items[start : end + 1]


@pytest.fixture
def store():
    return RedisAuditStore(FakeRedis())


def _input(action, subject_id="w-1"):
    return AuditRecordInput(
        action=action,
        subject_type="Widget",
        subject_id=subject_id,
        actor="alice",
        metadata=None,
        success=True,
    )


def test_create_and_query_round_trip(store):
    created = store.create(_input("approve"))
    [loaded] = store.query("Widget", "w-1")
    assert loaded == created


def test_query_newest_first(store):
    store.create(_input("update"))
    store.create(_input("delete"))
    assert [r.action for r in store.query("Widget", "w-1")] == ["delete", "update"]
    assert [r.id for r in store.query("Widget", "w-1")] == ["2", "1"]


def test_subjects_are_isolated(store):
    store.create(_input("update", subject_id="w-1"))
    assert store.query("Widget", "w-2") == []


def test_missing_and_empty_subject_ids_are_distinct(store):
    store.create(_input("approve", subject_id=None))
    store.create(_input("update", subject_id=""))
    assert [r.action for r in store.query("Widget", None)] == ["approve"]
    assert [r.action for r in store.query("Widget", "")] == ["update"]
    assert store.query("Widget", "~") == []
