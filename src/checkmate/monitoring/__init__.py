"""Prometheus metrics for check attempts and sessions."""

from checkmate.monitoring.metrics import (
    check_attempts_total,
    check_session_duration_seconds,
    check_sessions_total,
)

__all__ = [
    "check_attempts_total",
    "check_sessions_total",
    "check_session_duration_seconds",
]
