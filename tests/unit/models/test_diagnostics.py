"""
Unit tests for diagnostics and check result models.
"""

import pytest
from pydantic import ValidationError

from checkmate.models import (
    CheckType,
    Diagnostic,
    DiagnosticSeverity,
    Diagnostics,
    HTTPCheckResult,
    LocalCommandCheckResult,
)
from checkmate.retry.models import RetryResult


class TestDiagnostics:
    """Tests for the Diagnostics collector."""

    def test_empty(self):
        diagnostics = Diagnostics()

        assert diagnostics.to_list() == []
        assert diagnostics.errors == []
        assert diagnostics.warnings == []

    def test_preserves_order_and_severity(self):
        diagnostics = Diagnostics()
        diagnostics.add_warning("Timeout exceeded", "Timeout of 5000 milliseconds exceeded")
        diagnostics.add_error("Check failed")

        items = diagnostics.to_list()
        assert [d.summary for d in items] == ["Timeout exceeded", "Check failed"]
        assert [d.severity for d in items] == [DiagnosticSeverity.WARNING, DiagnosticSeverity.ERROR]
        assert len(diagnostics.errors) == 1
        assert len(diagnostics.warnings) == 1

    def test_to_list_is_a_copy(self):
        diagnostics = Diagnostics()
        diagnostics.add_warning("one")

        snapshot = diagnostics.to_list()
        diagnostics.add_warning("two")

        assert len(snapshot) == 1

    def test_diagnostic_is_frozen(self):
        diagnostic = Diagnostic(severity=DiagnosticSeverity.ERROR, summary="Check failed")

        with pytest.raises(ValidationError):
            diagnostic.summary = "changed"

    def test_repr(self):
        diagnostics = Diagnostics()
        diagnostics.add_error("x")

        assert repr(diagnostics) == "Diagnostics(errors=1, warnings=0)"


class TestCheckResult:
    """Tests for result properties."""

    def test_configuration_error(self):
        result = HTTPCheckResult(
            diagnostics=[Diagnostic(severity=DiagnosticSeverity.ERROR, summary="Client Error")],
        )

        assert result.check_type == CheckType.HTTP
        assert result.has_error
        assert result.configuration_error

    def test_failed_check_is_not_configuration_error(self):
        result = HTTPCheckResult(
            retry_result=RetryResult.TIMEOUT_EXCEEDED,
            attempts=3,
            diagnostics=[Diagnostic(severity=DiagnosticSeverity.ERROR, summary="Check failed")],
        )

        assert result.has_error
        assert not result.configuration_error

    def test_warnings_only(self):
        result = LocalCommandCheckResult(
            retry_result=RetryResult.TIMEOUT_EXCEEDED,
            diagnostics=[Diagnostic(severity=DiagnosticSeverity.WARNING, summary="Timeout exceeded")],
        )

        assert not result.has_error
        assert result.stdout is None

    def test_json_dump(self):
        result = HTTPCheckResult(passed=True, retry_result=RetryResult.SUCCESS, result_body="ok")

        data = result.model_dump(mode="json")

        assert data["check_type"] == "http"
        assert data["retry_result"] == "success"
        assert data["result_body"] == "ok"
