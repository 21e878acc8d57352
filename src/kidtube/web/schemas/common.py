"""Common schema types: error bodies, OpenAPI error responses and health check."""

from typing import List

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standard error response detail."""

    detail: str = Field(description="Error message")
    error_type: str = Field(description="Error type identifier")


class ValidationErrorDetail(BaseModel):
    """Validation error detail with field locations."""

    loc: List[str] = Field(description="Error location path")
    msg: str = Field(description="Error message")
    type: str = Field(description="Error type")


class ValidationErrorResponse(BaseModel):
    """Validation error response with multiple field errors."""

    detail: str = Field(default="Validation error")
    error_type: str = Field(default="validation_error")
    errors: List[ValidationErrorDetail] = Field(description="List of validation errors")


# ==================== Common Error Responses ====================

# Spread into route decorators: responses={**COMMON_ERROR_RESPONSES, ...}
COMMON_ERROR_RESPONSES = {
    400: {
        "model": ErrorDetail,
        "description": "Bad Request - Invalid input or business rule violation",
    },
    401: {
        "model": ErrorDetail,
        "description": "Unauthorized - Bearer token missing or invalid",
    },
    404: {
        "model": ErrorDetail,
        "description": "Not Found - Resource does not exist",
    },
    409: {
        "model": ErrorDetail,
        "description": "Conflict - Resource already exists",
    },
    500: {
        "model": ErrorDetail,
        "description": "Internal Server Error - Unexpected server error",
    },
    503: {
        "model": ErrorDetail,
        "description": "Service Unavailable - Store or identity provider unreachable",
    },
}

# Subset for routes that don't require authentication
PUBLIC_ERROR_RESPONSES = {
    400: COMMON_ERROR_RESPONSES[400],
    500: COMMON_ERROR_RESPONSES[500],
    503: COMMON_ERROR_RESPONSES[503],
}

# Subset for authenticated routes (includes auth errors)
AUTH_ERROR_RESPONSES = {
    401: COMMON_ERROR_RESPONSES[401],
}


class HealthCheckResponse(BaseModel):
    """Health check endpoint response."""

    status: str = Field(description="Health status ('ok' or 'error')")
    message: str = Field(description="Human-readable status message")
    version: str = Field(description="API version string")
    multi_tenant: bool = Field(description="Whether collections are scoped per owner")
