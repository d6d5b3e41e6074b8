"""
API-specific response models.

Check endpoints return the check result models directly; these models cover
service endpoints and error envelopes.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from checkmate.models.check_results import CheckResult


class HealthResponse(BaseModel):
    """Response for the service health endpoint."""

    status: str = Field(description="Service status", examples=["ok"])
    version: str = Field(description="Service version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorResponse(BaseModel):
    """Error envelope returned for failed or rejected checks."""

    error: str = Field(description="Error code", examples=["check_failed", "invalid_check_configuration"])
    message: str = Field(description="Human-readable message")
    result: Optional[CheckResult] = Field(default=None, description="Check result, when a check ran")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
