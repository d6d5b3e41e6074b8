"""
Check result models returned to the host.

A result is produced exactly once per check run. `retry_result` is None when
a fatal configuration error stopped the check before any attempt.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from checkmate.models.diagnostics import Diagnostic
from checkmate.models.enums import CheckType, DiagnosticSeverity
from checkmate.retry.models import RetryResult


class CheckResult(BaseModel):
    """Outcome of one probing session."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Run identifier")
    check_type: CheckType = Field(..., description="Kind of check")
    passed: bool = Field(default=False, description="True if the check passed")
    retry_result: Optional[RetryResult] = Field(
        default=None,
        description="Terminal engine result (None on configuration error)",
    )
    attempts: int = Field(default=0, ge=0, description="Attempts made")
    duration_ms: int = Field(default=0, ge=0, description="Wall-clock duration of the run")
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_error(self) -> bool:
        return any(d.severity == DiagnosticSeverity.ERROR for d in self.diagnostics)

    @property
    def configuration_error(self) -> bool:
        """True if the check was rejected before attempting."""
        return self.retry_result is None and self.has_error


class HTTPCheckResult(CheckResult):
    check_type: CheckType = CheckType.HTTP
    result_body: str = Field(default="", description="Body of the last response with a matching status")


class TCPEchoCheckResult(CheckResult):
    check_type: CheckType = CheckType.TCP_ECHO


class LocalCommandCheckResult(CheckResult):
    check_type: CheckType = CheckType.LOCAL_COMMAND
    stdout: Optional[str] = Field(default=None, description="Standard output of the last attempt")
    stderr: Optional[str] = Field(default=None, description="Standard error of the last attempt")
    create_file_path: Optional[str] = Field(
        default=None,
        description="Absolute path of the file created before the first attempt",
    )
