"""DB-backed audit store. Persists audit records to the audit_logs table."""

from datetime import timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from auditkit.audit.models import AuditRecord, AuditRecordInput
from auditkit.config.settings import AuditSettings
from auditkit.infrastructure.database.models import AuditLog
from auditkit.infrastructure.database.session import Base, build_engine, build_session_factory


def _to_record(orm: AuditLog) -> AuditRecord:
    created_at = orm.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return AuditRecord(
        id=str(orm.id),
        action=orm.action,
        subject_type=orm.auditable_type,
        subject_id=orm.auditable_id,
        actor=orm.actor,
        metadata=orm.metadata_,
        success=orm.success,
        error=orm.error,
        created_at=created_at,
    )


class SqlAuditStore:
    """Implements the AuditStore protocol on SQLAlchemy. Insert-only."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_settings(cls, settings: AuditSettings) -> "SqlAuditStore":
        """Build engine from database_url and create the audit_logs table if missing."""
        engine = build_engine(settings.database_url)
        Base.metadata.create_all(engine)
        return cls(build_session_factory(engine))

    def create(self, record: AuditRecordInput) -> AuditRecord:
        orm = AuditLog(
            action=record.action,
            auditable_type=record.subject_type,
            auditable_id=record.subject_id,
            actor=record.actor,
            metadata_=record.metadata,
            success=record.success,
            error=record.error,
        )
        with self._session_factory() as session:
            session.add(orm)
            session.commit()
            session.refresh(orm)
        return _to_record(orm)

    def query(self, subject_type: str, subject_id: Optional[str]) -> List[AuditRecord]:
        """Newest first; rows sharing a timestamp fall back to insertion order."""
        id_clause = (
            AuditLog.auditable_id.is_(None)
            if subject_id is None
            else AuditLog.auditable_id == subject_id
        )
        stmt = (
            select(AuditLog)
            .where(AuditLog.auditable_type == subject_type, id_clause)
            .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        )
        with self._session_factory() as session:
            return [_to_record(orm) for orm in session.execute(stmt).scalars()]
