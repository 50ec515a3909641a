"""
Error handling middleware for API

Converts exceptions raised while serving a request into the standard
ErrorResponse envelope:
- Validation errors (bad request body) → 422
- Domain errors (scope inactive, bad record) → their own status
- Anything else → 500
"""

import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from market_timers.api.schemas.error import ErrorDetail, ErrorResponse, ValidationErrorResponse
from market_timers.errors import TimerError, TimerScopeError
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for domain-specific API errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class InvalidLifecycleRecordError(DomainError):
    """Lifecycle record could not be turned into a snapshot"""
    def __init__(self, reason: str):
        super().__init__(
            code="INVALID_LIFECYCLE_RECORD",
            message=f"Lifecycle record rejected: {reason}",
            details={"reason": reason},
            status_code=422
        )


class SnapshotNotCapturedError(DomainError):
    """No lifecycle record has been received yet"""
    def __init__(self):
        super().__init__(
            code="SNAPSHOT_NOT_CAPTURED",
            message="No lifecycle record has been received yet",
            status_code=404
        )


def _json(status_code: int, body) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request_id = str(uuid.uuid4())
        errors = exc.errors()

        log.warn(f"Validation error ({request_id}): {len(errors)} errors", path=request.url.path)

        validation_errors = []
        for error in errors:
            field = ".".join(str(x) for x in error["loc"][1:])  # skip "body"
            validation_errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"]
            })

        response = ValidationErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"error_count": len(errors)},
            ),
            validation_errors=validation_errors,
            request_id=request_id
        )
        return _json(status.HTTP_422_UNPROCESSABLE_ENTITY, response)

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        request_id = str(uuid.uuid4())
        log.warn(f"Domain error ({request_id}): {exc.code}", detail=exc.message)

        response = ErrorResponse(
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
            request_id=request_id
        )
        return _json(exc.status_code, response)

    @app.exception_handler(TimerScopeError)
    async def scope_exception_handler(request: Request, exc: TimerScopeError):
        request_id = str(uuid.uuid4())
        log.warn(f"Timer scope inactive ({request_id})", path=request.url.path)

        response = ErrorResponse(
            error=ErrorDetail(code="TIMER_SCOPE_INACTIVE", message=str(exc)),
            request_id=request_id
        )
        return _json(status.HTTP_503_SERVICE_UNAVAILABLE, response)

    @app.exception_handler(TimerError)
    async def timer_exception_handler(request: Request, exc: TimerError):
        request_id = str(uuid.uuid4())
        log.error(f"Timer error ({request_id})", exception=exc)

        response = ErrorResponse(
            error=ErrorDetail(code="TIMER_ERROR", message=str(exc)),
            request_id=request_id
        )
        return _json(status.HTTP_400_BAD_REQUEST, response)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        request_id = str(uuid.uuid4())
        log.error(f"Unhandled error ({request_id}) on {request.url.path}", exception=exc)

        response = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"error_type": type(exc).__name__},
            ),
            request_id=request_id
        )
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, response)
