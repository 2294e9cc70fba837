"""Audit-layer exceptions. Typed, no HTTP."""


class AuditError(Exception):
    """Base for all audit-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuditStoreNotConfiguredError(AuditError):
    """Raised when audit_with names a store that was never registered."""
