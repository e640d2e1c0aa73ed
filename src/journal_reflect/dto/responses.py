"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ReflectionMetadata(BaseModel):
    """Processing metadata attached to every reflection."""

    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(..., description="Model that produced the reflection")
    processed_at: str = Field(
        ...,
        alias="processedAt",
        description="ISO-8601 timestamp when the reflection was produced",
    )
    processing_time_ms: int = Field(
        ...,
        alias="processingTimeMs",
        description="Time spent in the model layer in milliseconds",
        ge=0,
    )


class ReflectionResponse(BaseModel):
    """Response DTO for a successful reflection."""

    summary: str = Field(..., description="Brief summary of the entry", min_length=1)
    pattern: str = Field(..., description="Detected pattern or theme", min_length=1)
    suggestion: str = Field(..., description="Gentle, actionable suggestion", min_length=1)
    metadata: ReflectionMetadata


class ErrorResponse(BaseModel):
    """Response DTO for every failed request."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Error kind from the closed taxonomy")
    message: str = Field(..., description="Human-readable, actionable message")
    retry_after: int | None = Field(
        None,
        alias="retryAfter",
        description="Seconds to wait before retrying",
    )
    details: str | None = Field(None, description="Optional debugging detail")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy'")
    models: dict[str, str] = Field(..., description="Primary and fallback model names")
    cache: dict[str, Any] = Field(..., description="Content cache statistics")
    rate_limit: dict[str, Any] = Field(..., description="Rate limiter statistics")
