"""Audit records, stores and the writer that persists them. No HTTP."""

from auditkit.audit.memory_store import InMemoryAuditStore
from auditkit.audit.models import AuditRecord, AuditRecordInput, WriteError
from auditkit.audit.registry import StoreRegistry
from auditkit.audit.writer import AuditWriter

__all__ = [
    "AuditRecord",
    "AuditRecordInput",
    "AuditWriter",
    "InMemoryAuditStore",
    "StoreRegistry",
    "WriteError",
]
