"""
Bounded polling engine.

The engine calls an attempt closure on a fixed interval until the required
number of consecutive successes is reached, the overall deadline elapses,
or an external cancellation signal is observed:

    Idle -> Attempting -> {AttemptSucceeded, AttemptFailed} -> (loop)
         -> {SUCCESS, TIMEOUT_EXCEEDED, FAILURE}

The attempt loop runs as its own asyncio task; the caller waits for the
first of "loop finished" or "deadline elapsed". On deadline the loop task is
cancelled and awaited, so an in-flight attempt gets to release its socket or
process before the session returns.

Usage:
    engine = RetryEngine(RetryPolicy(timeout_ms=5000, consecutive_successes=2))
    report = await engine.run(attempt)
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional, Union

import structlog

from checkmate.monitoring.metrics import check_attempts_total
from checkmate.retry.models import (
    AttemptOutcome,
    AttemptResult,
    RetryPolicy,
    RetryReport,
    RetryResult,
)

logger = structlog.get_logger(__name__)

# attempt(attempt_index, consecutive_successes_so_far)
AttemptFn = Callable[[int, int], Awaitable[Union[bool, AttemptResult]]]


class _SessionState:
    """Counters shared between the caller and the attempt loop task."""

    __slots__ = ("attempts", "last_payload")

    def __init__(self) -> None:
        self.attempts = 0
        self.last_payload = None


def _as_attempt_result(value: Union[bool, AttemptResult]) -> AttemptResult:
    if isinstance(value, AttemptResult):
        return value
    if isinstance(value, bool):
        return AttemptResult(passed=value)
    raise TypeError(
        f"attempt must return bool or AttemptResult, got {type(value).__name__}"
    )


class RetryEngine:
    """
    Runs one probing session under a RetryPolicy.

    The engine has no error channel of its own: attempt closures are
    expected to turn driver errors into a failed AttemptResult. Anything
    that escapes a closure propagates out of run().

    Attributes:
        policy: Timing and termination policy
        check_type: Label used for logs and metrics
    """

    def __init__(self, policy: RetryPolicy, check_type: str = "generic"):
        self.policy = policy
        self.check_type = check_type

    async def run(
        self,
        attempt: AttemptFn,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> RetryReport:
        """
        Drive attempts until a terminal condition.

        Args:
            attempt: Async callable receiving (attempt_index, consecutive_successes)
            cancel_event: Optional cancellation signal, checked before each attempt

        Returns:
            RetryReport with the terminal RetryResult
        """
        state = _SessionState()
        start = time.monotonic()

        logger.debug(
            "Starting probing session",
            check_type=self.check_type,
            timeout_ms=self.policy.timeout_ms,
            interval_ms=self.policy.interval_ms,
            consecutive_successes=self.policy.consecutive_successes,
        )

        loop_task = asyncio.create_task(self._attempt_loop(attempt, state, cancel_event))
        try:
            done, _ = await asyncio.wait({loop_task}, timeout=self.policy.timeout_seconds)
        finally:
            if not loop_task.done():
                loop_task.cancel()
                await asyncio.gather(loop_task, return_exceptions=True)

        if loop_task in done:
            result = loop_task.result()
        else:
            result = RetryResult.TIMEOUT_EXCEEDED

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Probing session finished",
            check_type=self.check_type,
            result=result.value,
            attempts=state.attempts,
            elapsed_ms=elapsed_ms,
        )

        return RetryReport(
            result=result,
            attempts=state.attempts,
            last_payload=state.last_payload,
            elapsed_ms=elapsed_ms,
        )

    async def _attempt_loop(
        self,
        attempt: AttemptFn,
        state: _SessionState,
        cancel_event: Optional[asyncio.Event],
    ) -> RetryResult:
        attempt_index = 1
        successes = 0

        while True:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(
                    "Probing session cancelled",
                    check_type=self.check_type,
                    attempt=attempt_index,
                )
                return RetryResult.FAILURE

            result = _as_attempt_result(await attempt(attempt_index, successes))

            state.attempts = attempt_index
            if result.payload is not None:
                state.last_payload = result.payload

            successes = successes + 1 if result.passed else 0
            self._record(
                AttemptOutcome(
                    succeeded=result.passed,
                    attempt_index=attempt_index,
                    consecutive_successes=successes,
                )
            )

            if successes >= self.policy.consecutive_successes:
                return RetryResult.SUCCESS

            attempt_index += 1
            await asyncio.sleep(self.policy.interval_seconds)

    def _record(self, outcome: AttemptOutcome) -> None:
        check_attempts_total.labels(
            check_type=self.check_type,
            outcome="passed" if outcome.succeeded else "failed",
        ).inc()

        if outcome.succeeded:
            logger.debug(
                f"SUCCESS [{outcome.consecutive_successes}/{self.policy.consecutive_successes}]",
                check_type=self.check_type,
                attempt=outcome.attempt_index,
            )
        else:
            logger.debug(
                f"ATTEMPT #{outcome.attempt_index} failed",
                check_type=self.check_type,
            )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"check_type={self.check_type}, "
            f"timeout={self.policy.timeout_ms}ms, "
            f"interval={self.policy.interval_ms}ms, "
            f"consecutive_successes={self.policy.consecutive_successes})"
        )
