"""Immutable audit record models. Domain-level immutability."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional


def describe_error(error: Optional[BaseException]) -> Optional[str]:
    """Stable textual description of a captured error, e.g. ``ValueError: boom``."""
    if error is None:
        return None
    return f"{type(error).__name__}: {error}"


@dataclass(frozen=True)
class AuditRecordInput:
    """What the writer hands to a store. The store assigns id and created_at."""

    action: str
    subject_type: str
    subject_id: Optional[str]
    actor: Optional[str]
    metadata: Optional[Dict[str, Any]]
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class AuditRecord:
    """
    Immutable audit record: what was attempted, on which subject, by whom,
    what changed, and whether it succeeded.
    """

    id: str
    action: str
    subject_type: str
    subject_id: Optional[str]
    actor: Optional[str]
    metadata: Optional[Dict[str, Any]]
    success: bool
    error: Optional[str]
    created_at: datetime

    @classmethod
    def from_input(cls, record: AuditRecordInput, *, id: str, created_at: datetime) -> "AuditRecord":
        return cls(id=id, created_at=created_at, **asdict(record))

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON storage and logging."""
        return {
            "id": self.id,
            "action": self.action,
            "subject_type": self.subject_type,
            "subject_id": self.subject_id,
            "actor": self.actor,
            "metadata": self.metadata,
            "success": self.success,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuditRecord":
        return cls(
            id=data["id"],
            action=data["action"],
            subject_type=data["subject_type"],
            subject_id=data["subject_id"],
            actor=data["actor"],
            metadata=data["metadata"],
            success=data["success"],
            error=data["error"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass(frozen=True)
class WriteError:
    """Returned by AuditWriter.write when the store rejected the record."""

    record: AuditRecordInput
    error: Exception
