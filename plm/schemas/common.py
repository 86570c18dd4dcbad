"""Common schemas for API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = Field(default=False)
    error: str = Field(description="Error message")
    error_type: str = Field(description="Error kind (validation, domain_rule, not_found, ...)")
    detail: dict[str, Any] | None = Field(default=None, description="Offending values, e.g. current total")

    model_config = {"extra": "forbid"}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Health status (healthy, degraded)")
    version: str = Field(description="Service version")
    environment: str = Field(description="Environment name")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual health checks")

    model_config = {"extra": "forbid"}


class DeleteResponse(BaseModel):
    success: bool = Field(default=True)
    message: str = Field(description="What was deleted")

    model_config = {"extra": "forbid"}
