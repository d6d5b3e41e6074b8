"""Custom Prometheus metrics for Checkmate.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- check_sessions_total{result="timeout_exceeded"} (targets not becoming ready)
- check_attempts_total{outcome="failed"} (flapping targets)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

check_attempts_total = Counter(
    "check_attempts_total",
    "Total check attempts by check type and outcome",
    ["check_type", "outcome"],
)
"""
Check attempts counter.

Labels:
- check_type: http, tcp_echo, local_command
- outcome: passed, failed
"""

# === Session Metrics ===

check_sessions_total = Counter(
    "check_sessions_total",
    "Total probing sessions by check type and terminal result",
    ["check_type", "result"],
)
"""
Probing sessions counter.

Labels:
- check_type: http, tcp_echo, local_command
- result: success, timeout_exceeded, failure, invalid_config
"""

check_session_duration_seconds = Histogram(
    "check_session_duration_seconds",
    "Wall-clock duration of probing sessions",
    ["check_type"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0],
)
