"""
exceptions.py — Error Taxonomy of the Relay

Every error the relay reports to its caller derives from `RelayError`, which
knows its HTTP status and JSON body. The FastAPI exception handlers in
`main.py` only have to call `to_body()`.
"""

from typing import Any, Dict, Optional

DEFAULT_UPSTREAM_STATUS = 502
DEFAULT_DETAILS = "Unexpected error"


class RelayError(Exception):
    """Base class for errors surfaced to the caller as JSON."""

    status_code = 500
    error = "Internal server error"

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error}


class AuthError(RelayError):
    """The `x-internal-token` header is missing or does not match the configured secret."""

    status_code = 403
    error = "Forbidden"


class ValidationError(RelayError):
    """Inbound body rejected before any network I/O."""

    status_code = 400

    def __init__(self, reason: Optional[str] = None):
        super().__init__(reason or self.error)
        self.error = reason or self.error


class MissingFieldsError(ValidationError):
    error = "Missing required fields"


class InvalidNumericError(ValidationError):
    error = "Invalid numeric values"


class OrderCreationError(RelayError):
    """
    The order could not be created upstream.

    Attributes:
        message (str): Human-readable detail returned to the caller.
        status (int | None): Status to report, if one is known.
    """

    error = "Failed to create order"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def status_code(self) -> int:
        status = self.status if self.status is not None else 500
        return status if 400 <= status < 600 else 500

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.message or DEFAULT_DETAILS}


class ConfigurationError(OrderCreationError):
    """A required configuration value is absent at call time."""


class UpstreamError(OrderCreationError):
    """
    The commerce API answered with an error or could not be reached.

    A missing upstream status is reported as 502.
    """

    def __init__(self, message: str, status: Optional[int] = None, attempts: int = 1):
        super().__init__(message, status if status is not None else DEFAULT_UPSTREAM_STATUS)
        self.upstream_status = status
        self.attempts = attempts


class TransientUpstreamError(UpstreamError):
    """5xx response that persisted through every retry."""


class PermanentUpstreamError(UpstreamError):
    """Non-5xx response or transport failure; never retried."""
