"""Errors raised by the admin API client and the editor controllers."""


class ValidationError(Exception):
    """Local, pre-network validation failure. ``errors`` maps field -> message."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))


class ApiError(Exception):
    """A remote call failed or answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None, body=None):
        self.message = message
        self.status = status
        self.body = body
        super().__init__(message)


class NotFoundError(ApiError):
    """The target record vanished server-side."""


class PermissionDeniedError(ApiError):
    """The server refused the action, e.g. on a protected account."""


class NetworkError(ApiError):
    """The request never produced a response."""
