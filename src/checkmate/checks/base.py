"""
Abstract base class for readiness checks.

Defines the lifecycle shared by HTTP, TCP echo and local command checks:

1. validate(): reject bad configuration before the retry budget is touched
2. session(): open per-session resources and yield the attempt closure
3. RetryEngine.run(): drive attempts until SUCCESS / TIMEOUT / FAILURE
4. Interpret the terminal result into `passed` plus diagnostics

Configuration problems raise CheckConfigurationError from steps 1-2 and
become an error diagnostic; the result then has no retry_result and no
attempt is ever made.
"""

import asyncio
import time
import uuid
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any, Generic, Optional, TypeVar

import structlog

from checkmate.checks.exceptions import CheckConfigurationError
from checkmate.models.check_results import CheckResult
from checkmate.models.check_specs import CheckSpec
from checkmate.models.diagnostics import Diagnostics
from checkmate.models.enums import CheckType
from checkmate.monitoring.metrics import check_session_duration_seconds, check_sessions_total
from checkmate.retry.engine import AttemptFn, RetryEngine
from checkmate.retry.models import RetryReport, RetryResult

logger = structlog.get_logger(__name__)

SpecT = TypeVar("SpecT", bound=CheckSpec)
ResultT = TypeVar("ResultT", bound=CheckResult)


class BaseCheck(ABC, Generic[SpecT, ResultT]):
    """
    Abstract base class for checks.

    A check instance runs exactly one probing session. Concrete checks
    set `check_type` and `result_class` and implement validate(),
    session() and result_fields().

    Responsibilities:
    - Validate configuration (fatal errors)
    - Perform single attempts, converting driver errors into failed attempts
    - Report captured output from the last attempt

    Does NOT handle:
    - Scheduling, deadlines, consecutive-success counting (RetryEngine)
    - Deciding whether a failed check aborts anything (the host's job)
    """

    check_type: CheckType
    result_class: type[ResultT]

    def __init__(self, spec: SpecT, cancel_event: Optional[asyncio.Event] = None):
        """
        Initialize check.

        Args:
            spec: Check configuration for this session
            cancel_event: Optional external cancellation signal
        """
        self.spec = spec
        self.cancel_event = cancel_event
        self.run_id = str(uuid.uuid4())
        self.log = logger.bind(check_type=self.check_type.value, run_id=self.run_id)

    @abstractmethod
    def validate(self) -> None:
        """
        Check configuration before any attempt.

        Raises:
            CheckConfigurationError: If the configuration is unusable
        """

    @abstractmethod
    def session(self, diagnostics: Diagnostics) -> AbstractAsyncContextManager[AttemptFn]:
        """
        Open per-session resources and yield the attempt closure.

        Raises:
            CheckConfigurationError: If session setup fails (e.g. file creation)
        """

    def result_fields(self, report: Optional[RetryReport]) -> dict[str, Any]:
        """Check-specific result fields (body, stdout, ...)."""
        return {}

    async def run(self) -> ResultT:
        """
        Run one probing session.

        Returns:
            Check result with `passed`, captured output and diagnostics
        """
        diagnostics = Diagnostics()
        start = time.monotonic()

        try:
            self.validate()
            async with self.session(diagnostics) as attempt:
                engine = RetryEngine(self.spec.retry_policy(), check_type=self.check_type.value)
                report = await engine.run(attempt, self.cancel_event)
        except CheckConfigurationError as e:
            self.log.error(
                "Invalid check configuration",
                summary=e.summary,
                error=e.message,
                details=e.details,
            )
            diagnostics.add_error(e.summary, e.message)
            check_sessions_total.labels(
                check_type=self.check_type.value, result="invalid_config"
            ).inc()
            return self._build_result(None, diagnostics, start)

        self._interpret(report, diagnostics)
        self.log.debug(
            "Check finished",
            result=report.result.value,
            errors=len(diagnostics.errors),
            warnings=len(diagnostics.warnings),
        )
        check_sessions_total.labels(
            check_type=self.check_type.value, result=report.result.value
        ).inc()
        check_session_duration_seconds.labels(check_type=self.check_type.value).observe(
            report.elapsed_ms / 1000.0
        )
        return self._build_result(report, diagnostics, start)

    def _interpret(self, report: RetryReport, diagnostics: Diagnostics) -> None:
        if report.result == RetryResult.SUCCESS:
            self.log.info("Check passed", attempts=report.attempts)
            return

        if report.result == RetryResult.TIMEOUT_EXCEEDED:
            diagnostics.add_warning(
                "Timeout exceeded",
                f"Timeout of {self.spec.timeout_ms} milliseconds exceeded",
            )
        else:
            diagnostics.add_warning(
                "Check cancelled",
                "The check was cancelled before it passed",
            )

        if self.spec.create_anyway_on_check_failure:
            self.log.warning(
                "Check did not pass, continuing anyway",
                result=report.result.value,
                attempts=report.attempts,
            )
            return

        self.log.warning(
            "Check failed",
            result=report.result.value,
            attempts=report.attempts,
        )
        diagnostics.add_error(
            "Check failed",
            "The check did not pass and create_anyway_on_check_failure is false",
        )

    def _build_result(
        self,
        report: Optional[RetryReport],
        diagnostics: Diagnostics,
        start: float,
    ) -> ResultT:
        return self.result_class(
            id=self.run_id,
            passed=report is not None and report.succeeded,
            retry_result=report.result if report else None,
            attempts=report.attempts if report else 0,
            duration_ms=int((time.monotonic() - start) * 1000),
            diagnostics=diagnostics.to_list(),
            **self.result_fields(report),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(run_id={self.run_id})"
