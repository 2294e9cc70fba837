"""In-memory audit store. For tests or single-process use."""

import itertools
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from auditkit.audit.models import AuditRecord, AuditRecordInput


class InMemoryAuditStore:
    """Keeps records per subject in insertion order; query returns newest first."""

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, Optional[str]], List[AuditRecord]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, record: AuditRecordInput) -> AuditRecord:
        with self._lock:
            stored = AuditRecord.from_input(
                record,
                id=str(next(self._ids)),
                created_at=datetime.now(timezone.utc),
            )
            self._records.setdefault((record.subject_type, record.subject_id), []).append(stored)
            return stored

    def query(self, subject_type: str, subject_id: Optional[str]) -> List[AuditRecord]:
        with self._lock:
            return list(reversed(self._records.get((subject_type, subject_id), [])))

    def all(self) -> List[AuditRecord]:
        """Every stored record, oldest first."""
        with self._lock:
            records = [r for per_subject in self._records.values() for r in per_subject]
        return sorted(records, key=lambda r: int(r.id))
