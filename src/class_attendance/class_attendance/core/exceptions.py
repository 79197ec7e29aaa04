class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class SessionBusyError(DomainError):
    """Raised when a save is requested while another one is still in flight."""


class GatewayError(Exception):
    """Raised when the storage API cannot be reached or answers with an error."""


class MalformedResponseError(GatewayError):
    """Raised when the storage API answers with a payload we cannot normalize."""
