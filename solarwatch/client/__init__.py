from solarwatch.client.api import (
    AdminApiClient,
    FilePayload,
    LoginFailed,
    LoginResult,
    LoginSucceeded,
    SecurityAnswerRequired,
)
from solarwatch.client.errors import (
    ApiError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    "AdminApiClient",
    "FilePayload",
    "LoginFailed",
    "LoginResult",
    "LoginSucceeded",
    "SecurityAnswerRequired",
    "ApiError",
    "NetworkError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
]
