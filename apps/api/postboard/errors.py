"""Application exception types."""

from postboard.schemas.envelope import ErrorEnvelope, ErrorObject, ResponseStatus, to_error_envelope


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    default_status_code = 500
    default_code = "internal_error"

    def __init__(
        self,
        status_code: int | None = None,
        code: str | None = None,
        message: str = "Internal server error",
        details: dict | None = None,
    ) -> None:
        self.status_code = status_code or self.default_status_code
        self.payload = ErrorObject(
            status=str(self.status_code),
            code=code or self.default_code,
            message=message,
            details=details,
        )
        super().__init__(message)

    @property
    def status(self) -> ResponseStatus:
        return ResponseStatus.from_status_code(self.status_code)

    def envelope(self) -> ErrorEnvelope:
        return to_error_envelope(self.payload)


class AuthenticationError(ApiError):
    """Missing, invalid or expired credential on a gated operation."""

    default_status_code = 401
    default_code = "unauthorized"

    def __init__(self, message: str = "Authentication required", *, reason: str) -> None:
        super().__init__(message=message, details={"reason": reason})


class AuthorizationError(ApiError):
    """Verified principal that is still not permitted to proceed."""

    default_status_code = 403
    default_code = "forbidden"

    def __init__(self, message: str = "Operation not permitted", *, reason: str) -> None:
        super().__init__(message=message, details={"reason": reason})


class ValidationError(ApiError):
    default_status_code = 400
    default_code = "validation_failed"

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message=message, details=details)


class NotFoundError(ApiError):
    default_status_code = 404
    default_code = "not_found"

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message=message)


class StoreError(ApiError):
    """Storage collaborator failure; callers may retry."""

    default_status_code = 503
    default_code = "store_unavailable"

    def __init__(self, message: str = "Post store is unavailable") -> None:
        super().__init__(message=message, details={"retryable": True})


__all__ = [
    "ApiError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
]
