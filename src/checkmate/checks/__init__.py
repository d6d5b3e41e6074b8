"""
Readiness checks.

- http.py: HTTP health check (status-code pattern, optional JSONPath + regex)
- tcp_echo.py: TCP echo check (expected reply, expected failure, persistent regex)
- local_command.py: Local command check (exit code 0, captured output)
- base.py: Shared lifecycle (validate -> session -> retry engine -> result)
- status_codes.py / jsonpath.py: Predicate helpers used by the HTTP check
"""

from checkmate.checks.base import BaseCheck
from checkmate.checks.exceptions import (
    CheckConfigurationError,
    CheckError,
    CheckFailedError,
    JSONPathExpressionError,
    JSONPathNotFound,
    StatusCodePatternError,
)
from checkmate.checks.http import HTTPHealthCheck
from checkmate.checks.jsonpath import KubectlJSONPath
from checkmate.checks.local_command import LocalCommandCheck
from checkmate.checks.status_codes import StatusCodePattern, check_status_code
from checkmate.checks.tcp_echo import TCPEchoCheck

__all__ = [
    "BaseCheck",
    "HTTPHealthCheck",
    "TCPEchoCheck",
    "LocalCommandCheck",
    "StatusCodePattern",
    "check_status_code",
    "KubectlJSONPath",
    "CheckError",
    "CheckConfigurationError",
    "CheckFailedError",
    "StatusCodePatternError",
    "JSONPathExpressionError",
    "JSONPathNotFound",
]
