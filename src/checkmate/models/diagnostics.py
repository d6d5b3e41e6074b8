"""
Diagnostics reported by a check run.

Every check run owns exactly one Diagnostics collector. Check drivers add
warnings for recoverable per-attempt problems and errors for fatal
configuration problems or non-tolerated failures; the host decides what to
do with them.
"""

from pydantic import BaseModel, ConfigDict, Field

from checkmate.models.enums import DiagnosticSeverity


class Diagnostic(BaseModel):
    """A single diagnostic message."""
    model_config = ConfigDict(frozen=True)

    severity: DiagnosticSeverity = Field(..., description="warning or error")
    summary: str = Field(..., description="Short title, e.g. 'Timeout exceeded'")
    detail: str = Field(default="", description="Human-readable explanation")


class Diagnostics:
    """Ordered collector of diagnostics for one check run."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add_error(self, summary: str, detail: str = "") -> None:
        self._items.append(
            Diagnostic(severity=DiagnosticSeverity.ERROR, summary=summary, detail=detail)
        )

    def add_warning(self, summary: str, detail: str = "") -> None:
        self._items.append(
            Diagnostic(severity=DiagnosticSeverity.WARNING, summary=summary, detail=detail)
        )

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == DiagnosticSeverity.ERROR]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == DiagnosticSeverity.WARNING]

    def to_list(self) -> list[Diagnostic]:
        return list(self._items)

    def __repr__(self) -> str:
        return f"Diagnostics(errors={len(self.errors)}, warnings={len(self.warnings)})"
