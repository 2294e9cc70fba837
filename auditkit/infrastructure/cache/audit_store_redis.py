# auditkit/infrastructure/cache/audit_store_redis.py

import json
from datetime import datetime, timezone
from typing import List, Optional

import redis

from auditkit.audit.models import AuditRecord, AuditRecordInput
from auditkit.config.settings import AuditSettings

KEY_PREFIX = "audit:"
SEQUENCE_KEY = "audit:seq"
NO_SUBJECT_ID = "~"


def _subject_key(subject_type: str, subject_id: Optional[str]) -> str:
    if subject_id is None:
        return f"{KEY_PREFIX}{subject_type}:{NO_SUBJECT_ID}"
    return f"{KEY_PREFIX}{subject_type}:id={subject_id}"


class RedisAuditStore:
    """One Redis list per subject; LPUSH keeps the newest record at the head."""

    def __init__(self, client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: AuditSettings) -> "RedisAuditStore":
        return cls(redis.Redis.from_url(settings.redis_url, decode_responses=True))

    def create(self, record: AuditRecordInput) -> AuditRecord:
        stored = AuditRecord.from_input(
            record,
            id=str(self.client.incr(SEQUENCE_KEY)),
            created_at=datetime.now(timezone.utc),
        )
        self.client.lpush(
            _subject_key(record.subject_type, record.subject_id),
            json.dumps(stored.to_dict(), default=str),
        )
        return stored

    def query(self, subject_type: str, subject_id: Optional[str]) -> List[AuditRecord]:
        raw = self.client.lrange(_subject_key(subject_type, subject_id), 0, -1)
        return [AuditRecord.from_dict(json.loads(item)) for item in raw]
