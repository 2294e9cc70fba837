# auditkit/infrastructure/database/models.py

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from auditkit.infrastructure.database.session import Base


class AuditLog(Base):
    """ORM model for audit records. Rows are inserted, never updated."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String, nullable=False)
    auditable_type = Column(String, nullable=False, index=True)
    auditable_id = Column(String, nullable=True, index=True)
    actor = Column(String, nullable=True)
    metadata_ = Column("metadata", JSON, nullable=True)
    success = Column(Boolean, nullable=False)
    error = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
