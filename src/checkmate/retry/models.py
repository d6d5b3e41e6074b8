"""
Retry engine data models.

RetryPolicy is the immutable timing/termination policy for one probing
session. AttemptResult is what an attempt closure hands back to the engine,
AttemptOutcome is the engine's own per-attempt bookkeeping, and RetryReport
is the single terminal value returned per session.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RetryResult(str, Enum):
    """Terminal classification of a probing session."""

    SUCCESS = "success"
    TIMEOUT_EXCEEDED = "timeout_exceeded"
    FAILURE = "failure"  # cancelled before reaching a terminal success


class RetryPolicy(BaseModel):
    """
    Timing and termination policy for one probing session.

    Durations are in milliseconds, matching the units of check
    configuration.
    """
    model_config = ConfigDict(frozen=True)

    timeout_ms: int = Field(..., gt=0, description="Overall deadline measured from session start")
    interval_ms: int = Field(default=200, ge=0, description="Sleep between attempts")
    consecutive_successes: int = Field(
        default=1,
        ge=1,
        description="Back-to-back passing attempts required to succeed",
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000.0


@dataclass(frozen=True)
class AttemptResult:
    """
    Value returned by an attempt closure.

    Attributes:
        passed: Whether this attempt satisfied the success predicate
        payload: Check-specific captured data (response body, command output).
            None means the attempt produced nothing worth reporting.
    """

    passed: bool
    payload: Optional[Any] = None


@dataclass(frozen=True)
class AttemptOutcome:
    """Engine-side record of a single attempt."""

    succeeded: bool
    attempt_index: int
    consecutive_successes: int

    def __post_init__(self) -> None:
        if self.attempt_index < 1:
            raise ValueError("attempt_index must be >= 1")
        if self.consecutive_successes < 0:
            raise ValueError("consecutive_successes must be >= 0")


@dataclass(frozen=True)
class RetryReport:
    """
    Terminal report of a probing session.

    Attributes:
        result: Terminal classification
        attempts: Number of attempts that completed before the session ended
        last_payload: Payload of the most recent attempt that produced one
        elapsed_ms: Wall-clock duration of the session
    """

    result: RetryResult
    attempts: int
    last_payload: Optional[Any] = None
    elapsed_ms: int = 0

    @property
    def succeeded(self) -> bool:
        return self.result == RetryResult.SUCCESS
