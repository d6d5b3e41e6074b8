"""
Checkmate: bounded readiness probing.

Runs HTTP, TCP echo and local command checks on a fixed interval until a
required number of consecutive successes is observed or an overall timeout
elapses, and reports a pass/fail outcome with diagnostics:
- HTTP health (status-code patterns, JSONPath + regex on the body)
- TCP echo (expected reply, expected failure, persistent regex)
- Local command (exit code, captured stdout/stderr)

Architecture: async retry engine + check drivers + FastAPI host service
"""

__version__ = "0.1.0"
