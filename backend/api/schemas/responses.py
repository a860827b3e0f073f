"""
Response schemas for the API.

Successful analysis responses are streamed as NDJSON events (see
creator_radar.models.events); only the pre-stream error body and the
health check are plain JSON.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Returned with HTTP 400 when a run cannot start."""
    error: str = Field(..., description="Human-readable reason")


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
