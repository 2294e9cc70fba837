"""Change auditing for entities persisted through a remote API backend."""

from auditkit.audit.models import AuditRecord, AuditRecordInput, WriteError
from auditkit.audit.registry import StoreRegistry
from auditkit.audit.writer import AuditWriter
from auditkit.config.settings import AuditSettings, get_settings
from auditkit.domain.changes import Attribute
from auditkit.domain.entity import AuditedEntity
from auditkit.domain.interceptor import audited_action, audited_mutation
from auditkit.infrastructure.http.backend import Backend

__all__ = [
    "AuditRecord",
    "AuditRecordInput",
    "AuditSettings",
    "AuditWriter",
    "AuditedEntity",
    "Attribute",
    "Backend",
    "StoreRegistry",
    "WriteError",
    "audited_action",
    "audited_mutation",
    "get_settings",
]
