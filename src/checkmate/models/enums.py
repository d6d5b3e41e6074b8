"""
Enumerations for Checkmate data models.
"""

from enum import Enum


class CheckType(str, Enum):
    """Kind of driver behind by a check."""

    HTTP = "http"
    TCP_ECHO = "tcp_echo"
    LOCAL_COMMAND = "local_command"


class DiagnosticSeverity(str, Enum):
    """
    Severity of a diagnostic reported to the host.

    Warnings describe recoverable problems (a failed attempt, a tolerated
    timeout). Errors mean the host should treat the check as failed.
    """

    WARNING = "warning"
    ERROR = "error"
