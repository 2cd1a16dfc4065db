"""
Application error taxonomy.

Handlers raise these and the exception handler registered in ``main`` turns
them into ``{"code": ..., "detail": ...}`` JSON responses.
"""


class AppError(Exception):
    code = "internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "detail": self.message}


class Unauthenticated(AppError):
    code = "unauthenticated"
    status_code = 401


class InvalidArgument(AppError):
    code = "invalid_argument"
    status_code = 400


class AlreadyExists(AppError):
    code = "already_exists"
    status_code = 409


class NotFound(AppError):
    code = "not_found"
    status_code = 404


class Internal(AppError):
    code = "internal"
    status_code = 500


class UpstreamAuthError(Internal):
    """PayPal rejected the client-credentials exchange."""

    code = "upstream_auth_error"


class UpstreamError(Internal):
    """A PayPal resource endpoint answered with a non-success status."""

    code = "upstream_error"


class CorruptPayload(Internal):
    """An encrypted credential could not be decrypted."""

    code = "corrupt_payload"
