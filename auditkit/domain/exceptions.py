"""Domain-specific exceptions. Raised for misconfiguration and hook misuse, never for operation failures."""


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NoSuchBackendError(DomainError):
    """Raised when an entity type has no backend client to persist through."""


class UnknownAttributeError(DomainError):
    """Raised when assigning an attribute the entity does not declare."""


class UnknownCallbackEventError(DomainError):
    """Raised when registering or running a callback for an undeclared event."""


class ContinuationError(DomainError):
    """Raised when an around-wrapper invokes its continuation more than once."""
