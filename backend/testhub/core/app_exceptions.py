"""Application-specific exceptions for consistent error handling."""

from typing import Any

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Application error with standardized error code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | list[Any] | None = None,
    ):
        """Initialize application error."""
        super().__init__(
            status_code=status_code,
            detail={
                "code": code,
                "message": message,
                "details": details,
            },
        )
        self.code = code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class SubmissionValidationError(AppError):
    """A submission (or other request) failed a domain validation rule."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details)


class NotFoundError(AppError):
    """A referenced test, user, solution or subscription does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            status.HTTP_404_NOT_FOUND,
            "NOT_FOUND",
            f"{entity} not found",
            {"entity": entity, "id": str(entity_id)},
        )
        self.entity = entity
        self.entity_id = entity_id


class GatewayError(AppError):
    """The payment gateway rejected a request or answered with something unusable."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        code: str = "GATEWAY_ERROR",
    ):
        super().__init__(status_code, code, message, details)


class GatewayTimeoutError(GatewayError):
    """The payment gateway did not answer within the configured timeout.

    The caller may retry; the core never does.
    """

    def __init__(self, message: str = "Payment gateway timed out", details: dict[str, Any] | None = None):
        super().__init__(
            message,
            {**(details or {}), "retryable": True},
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            code="GATEWAY_TIMEOUT",
        )


def raise_app_error(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | list[Any] | None = None,
) -> None:
    """Raise an application error with standardized format."""
    raise AppError(status_code=status_code, code=code, message=message, details=details)
