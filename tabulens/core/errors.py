"""
Error taxonomy for the Tabulens client.

Auth errors are handled by the HTTP adapter; every other ApiError propagates
through the gateways unchanged. The dataset store turns refresh failures into
its `error` field, pages wrap direct user actions themselves.
"""
from typing import Dict, List, Optional


class TabulensError(Exception):
    """Base exception for the dashboard client."""
    pass


class ApiError(TabulensError):
    """A failed exchange with the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthExpiredError(ApiError):
    """401 that survived the one refresh-and-retry."""
    pass


class AuthFailedError(ApiError):
    """Session refresh itself failed; the user must log in again."""
    pass


class NotFoundError(ApiError):
    pass


class ServerError(ApiError):
    pass


class UploadError(ApiError):
    pass


class NetworkError(ApiError):
    """Transport failure, no HTTP response was received."""
    pass


class FormValidationError(TabulensError):
    """Client-side form rejection. Never reaches the network."""

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        summary = "; ".join(f"{k}: {', '.join(v)}" for k, v in field_errors.items())
        super().__init__(summary or "Invalid form data")


class UploadRejectedError(TabulensError):
    """File refused before upload (type or size)."""
    pass
