"""Audit store protocol. The audit layer depends on this; infrastructure implements it."""

from typing import Optional, Protocol, Sequence

from auditkit.audit.models import AuditRecord, AuditRecordInput


class AuditStore(Protocol):
    """Protocol for persisting and reading immutable audit records."""

    def create(self, record: AuditRecordInput) -> AuditRecord:
        """Persist a record, assigning id and created_at. Records are never updated."""
        ...

    def query(self, subject_type: str, subject_id: Optional[str]) -> Sequence[AuditRecord]:
        """Return all records for the subject, newest first."""
        ...
