"""
Error schemas - Pydantic models for error responses

Every API error uses the same envelope so the dashboard can handle failures
predictably.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Detailed error information"""
    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional context (field names, valid values, etc.)"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the error occurred"
    )


class ErrorResponse(BaseModel):
    """API error response - standardized format"""
    error: ErrorDetail = Field(description="Error information")
    request_id: Optional[str] = Field(None, description="Request ID for logging/debugging")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": {
                    "code": "TIMER_SCOPE_INACTIVE",
                    "message": "use_market_timer_context must be used within a MarketTimerProvider",
                    "details": {},
                    "timestamp": "2026-01-12T10:30:00Z"
                },
                "request_id": "3f0c2a8e-7d41-4c55-9a8e-0e6b1c2d9f10"
            }
        }
    )


class ValidationErrorResponse(BaseModel):
    """Validation error - when request body is invalid"""
    error: ErrorDetail = Field(description="Error information")
    validation_errors: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="One entry per invalid field"
    )
    request_id: Optional[str] = Field(None, description="Request ID for logging/debugging")
