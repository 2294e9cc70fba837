"""Persists one audit record per audited operation. Failure to write never masks the operation."""

import logging
from typing import Optional, Sequence, Union

from auditkit.audit.models import AuditRecord, AuditRecordInput, WriteError, describe_error
from auditkit.audit.registry import StoreRegistry
from auditkit.audit.registry import registry as default_store_registry
from auditkit.config.settings import AuditSettings, get_settings
from auditkit.core.context import actor_ctx
from auditkit.observability.metrics import MetricsCollector
from auditkit.observability.metrics import metrics as default_metrics

logger = logging.getLogger(__name__)

WriteResult = Union[AuditRecord, WriteError]


class AuditWriter:
    """
    Writes immutable audit records to the store named by settings.audit_with.

    The store is resolved when the writer is built, so an unknown store fails
    fast. A failing store.create is logged, counted, and returned as a
    WriteError value; it is never raised to the audited operation's caller.
    """

    def __init__(
        self,
        settings: Optional[AuditSettings] = None,
        registry: Optional[StoreRegistry] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._registry = registry or default_store_registry
        self._metrics = metrics or default_metrics
        self._store = self._registry.resolve(self._settings.audit_with, self._settings)

    @property
    def store(self):
        return self._store

    def current_actor(self) -> Optional[str]:
        """Per-request actor from context, falling back to the configured user."""
        return actor_ctx.get() or self._settings.current_user

    def write(
        self,
        *,
        action: str,
        subject_type: str,
        subject_id: Optional[str],
        metadata: Optional[dict] = None,
        error: Optional[BaseException] = None,
    ) -> WriteResult:
        """Write one record. success is derived from error being None."""
        record = AuditRecordInput(
            action=action,
            subject_type=subject_type,
            subject_id=subject_id,
            actor=self.current_actor(),
            metadata=metadata,
            success=error is None,
            error=describe_error(error),
        )
        log_extra = {
            "action": action,
            "subject_type": subject_type,
            "subject_id": subject_id,
            "success": record.success,
        }
        try:
            stored = self._store.create(record)
        except Exception as e:
            logger.exception("audit_write_failed", extra={**log_extra, "error": str(e)})
            self._metrics.increment("audit_write_failures", category=action)
            return WriteError(record=record, error=e)
        self._metrics.increment("audit_records_written", category=action)
        logger.info("audit_record_written", extra=log_extra)
        return stored

    def query(self, subject_type: str, subject_id: Optional[str]) -> Sequence[AuditRecord]:
        """All records for the subject, newest first."""
        return self._store.query(subject_type, subject_id)
