"""Check configuration, result and diagnostic models."""

from checkmate.models.check_results import (
    CheckResult,
    HTTPCheckResult,
    LocalCommandCheckResult,
    TCPEchoCheckResult,
)
from checkmate.models.check_specs import (
    CheckSpec,
    CreateFileSpec,
    HTTPCheckSpec,
    LocalCommandSpec,
    TCPEchoSpec,
)
from checkmate.models.diagnostics import Diagnostic, Diagnostics
from checkmate.models.enums import CheckType, DiagnosticSeverity

__all__ = [
    "CheckSpec",
    "HTTPCheckSpec",
    "TCPEchoSpec",
    "LocalCommandSpec",
    "CreateFileSpec",
    "CheckResult",
    "HTTPCheckResult",
    "TCPEchoCheckResult",
    "LocalCommandCheckResult",
    "Diagnostic",
    "Diagnostics",
    "CheckType",
    "DiagnosticSeverity",
]
