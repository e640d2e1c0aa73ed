"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ReflectionRequest(BaseModel):
    """Request DTO for journal reflection.

    Built by the handler after the raw body has passed validation, so the
    route can keep its own error messages for malformed input.
    """

    content: str = Field(..., description="The journal entry text")
    preferences: dict[str, Any] | None = Field(
        None,
        description="Optional reflection preferences (tone, focus areas), passed through untouched",
    )
