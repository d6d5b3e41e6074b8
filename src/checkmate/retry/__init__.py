"""
Bounded polling engine for readiness checks.

A session calls an attempt closure on a fixed interval until a required
number of consecutive successes is reached (SUCCESS), the overall timeout
elapses (TIMEOUT_EXCEEDED), or an external cancellation signal is observed
(FAILURE). Any failed attempt resets the consecutive-success counter.

Main Components:
    - RetryEngine: Runs one session and returns a RetryReport
    - RetryPolicy: Immutable timeout / interval / consecutive-successes
    - AttemptResult: What an attempt closure returns (passed + payload)
    - RetryResult: Terminal classification

Usage:
    >>> from checkmate.retry import RetryEngine, RetryPolicy
    >>> engine = RetryEngine(RetryPolicy(timeout_ms=1000, interval_ms=50))
    >>> report = await engine.run(attempt)
"""

from checkmate.retry.engine import AttemptFn, RetryEngine
from checkmate.retry.models import (
    AttemptOutcome,
    AttemptResult,
    RetryPolicy,
    RetryReport,
    RetryResult,
)

__all__ = [
    "AttemptFn",
    "RetryEngine",
    "RetryPolicy",
    "RetryResult",
    "RetryReport",
    "AttemptResult",
    "AttemptOutcome",
]
