from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    context: dict[str, Any] | None = None


class AppError(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = context
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class InvalidLeaveType(AppError):
    def __init__(self, leave_type: str) -> None:
        super().__init__(
            "Invalid leave type. Must be: annual, sick, or casual",
            status_code=status.HTTP_400_BAD_REQUEST,
            context={"leave_type": leave_type},
        )


class InvalidDateFormat(AppError):
    def __init__(self, value: str) -> None:
        super().__init__(
            "Invalid date format. Use YYYY-MM-DD",
            status_code=status.HTTP_400_BAD_REQUEST,
            context={"value": value},
        )


class HalfDayRangeViolation(AppError):
    def __init__(self) -> None:
        super().__init__("Half-day leave must be for a single day only", status_code=status.HTTP_400_BAD_REQUEST)


class DateOrderViolation(AppError):
    def __init__(self) -> None:
        super().__init__(
            "Start date must be before or equal to end date",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


def format_days(days: float) -> str:
    """Render a day quantity the way users read it: ``3 days``, ``1 day``, ``0.5 days``."""
    return f"{days:g} day{'' if days == 1 else 's'}"


class InsufficientBalance(AppError):
    """Requested days exceed the remaining entitlement for the leave type."""

    def __init__(self, leave_type: str, available: float, requested: float) -> None:
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient {leave_type} leaves. Available: {float(available)} days, Requested: {format_days(requested)}",
            status_code=status.HTTP_400_BAD_REQUEST,
            context={"available": available, "requested": requested},
        )


class InvalidDecision(AppError):
    def __init__(self, decision: str) -> None:
        super().__init__(
            'Invalid decision. Must be "approved" or "rejected"',
            status_code=status.HTTP_400_BAD_REQUEST,
            context={"decision": decision},
        )


# ---------------------------------------------------------------------------
# Identity, lookup and authorization errors
# ---------------------------------------------------------------------------


class SessionIdentityMissing(AppError):
    def __init__(self) -> None:
        super().__init__(
            "Unable to verify user session. Please log in again.",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class Forbidden(AppError):
    def __init__(self, message: str = "Not authorized to manage this employee's requests") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class EmployeeNotFound(AppError):
    def __init__(self, employee_id: str) -> None:
        super().__init__(
            "Employee not found",
            status_code=status.HTTP_404_NOT_FOUND,
            context={"employee_id": employee_id},
        )


class NotFound(AppError):
    def __init__(self, message: str = "Leave request not found") -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


# ---------------------------------------------------------------------------
# State and persistence errors
# ---------------------------------------------------------------------------


class AlreadyProcessed(AppError):
    def __init__(self, current_status: str) -> None:
        super().__init__(
            f"Leave request already {current_status}",
            status_code=status.HTTP_409_CONFLICT,
            context={"status": current_status},
        )


class PersistenceFailure(AppError):
    def __init__(self, message: str = "Failed to write to the leave ledger") -> None:
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


class RoutingUnresolved(AppError):
    """No approver could be resolved. Logged by the router, never returned to callers."""

    def __init__(self, category: str) -> None:
        super().__init__(f"No approver could be resolved for category {category}", context={"category": category})


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
            context=exc.context,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
