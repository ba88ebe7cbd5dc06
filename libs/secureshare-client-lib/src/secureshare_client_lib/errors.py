"""Exceptions raised by the SecureShare client."""


class SecureShareError(Exception):
    """Base class for all client errors."""


class NoCredentialError(SecureShareError):
    """Raised when an authenticated call is attempted without a stored credential."""


class MalformedCredentialError(SecureShareError):
    """Raised when a credential's claims segment cannot be decoded."""


class UnauthorizedError(SecureShareError, PermissionError):
    """Raised when the backend answers with 401 or 403."""

    def __init__(self, message: str = "Unauthorized", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProtocolError(SecureShareError):
    """Raised when a response does not match the ``{success, data, message}`` envelope."""


class NetworkFailureError(SecureShareError):
    """Raised on connection errors and timeouts."""


class RequestRejectedError(SecureShareError):
    """Raised when the backend reports ``success: false``."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ShareValidationError(SecureShareError, ValueError):
    """Raised when a share request is rejected before any network call."""


class ShareInProgressError(SecureShareError):
    """Raised when a share is submitted while another one is still in flight."""
