"""
TCP echo check.

Each attempt connects, writes `message + "\\n"`, and reads a single reply of
at most TCP_READ_BUFFER_SIZE bytes under the per-attempt timeout.

Normal mode passes when the reply (trailing NUL bytes trimmed) contains
`expected_message`. With `persistent_response_regex` set, the regex match
must also be identical across every attempt of the session: the first match
becomes the reference value and passes that attempt outright. Later attempts
must extract the same value and contain `expected_message`.

Expect-write-failure mode inverts the read: a read error (timeout, reset,
EOF) passes the attempt and any reply fails it. Connect and write errors
fail the attempt in both modes.
"""

import asyncio
import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from checkmate.checks.base import BaseCheck
from checkmate.checks.exceptions import CheckConfigurationError
from checkmate.config import settings
from checkmate.models.check_results import TCPEchoCheckResult
from checkmate.models.check_specs import TCPEchoSpec
from checkmate.models.diagnostics import Diagnostics
from checkmate.models.enums import CheckType
from checkmate.retry.engine import AttemptFn
from checkmate.retry.models import AttemptResult


class _ReadFailed(Exception):
    """The reply could not be read (timeout, reset, EOF)."""


class _PersistentMatch:
    """Reference value for the persistent response regex, once per session."""

    __slots__ = ("value", "attempt")

    def __init__(self) -> None:
        self.value: Optional[str] = None
        self.attempt = 0


class TCPEchoCheck(BaseCheck[TCPEchoSpec, TCPEchoCheckResult]):
    """TCP echo check using asyncio streams."""

    check_type = CheckType.TCP_ECHO
    result_class = TCPEchoCheckResult

    def __init__(self, spec: TCPEchoSpec, **kwargs):
        super().__init__(spec, **kwargs)
        self._persistent_regex: Optional[re.Pattern[str]] = None

    def validate(self) -> None:
        spec = self.spec

        if not spec.expect_write_failure and not spec.expected_message:
            raise CheckConfigurationError(
                "Missing expected message",
                "expected_message is required when expect_write_failure is false",
            )

        if spec.persistent_response_regex:
            try:
                self._persistent_regex = re.compile(spec.persistent_response_regex)
            except re.error as e:
                raise CheckConfigurationError(
                    "Invalid regex",
                    f"Could not compile regex {spec.persistent_response_regex!r}: {e}",
                ) from None

    @asynccontextmanager
    async def session(self, diagnostics: Diagnostics) -> AsyncIterator[AttemptFn]:
        spec = self.spec
        destination = f"{spec.host}:{spec.port}"
        reference = _PersistentMatch()

        if spec.expect_write_failure and spec.expected_message:
            self.log.warning("expected_message is ignored when expect_write_failure is true")
            diagnostics.add_warning(
                "Ignored configuration",
                "expected_message is ignored when expect_write_failure is true",
            )

        async def attempt(attempt_index: int, successes: int) -> AttemptResult:
            try:
                reader, writer = await asyncio.wait_for(
                    asyncio.open_connection(spec.host, spec.port),
                    timeout=spec.connection_timeout_ms / 1000.0,
                )
            except (OSError, asyncio.TimeoutError) as e:
                self.log.warning(f"dial {destination!r} failed", attempt=attempt_index, error=repr(e))
                return AttemptResult(passed=False)

            try:
                try:
                    writer.write((spec.message + "\n").encode())
                    await writer.drain()
                except OSError as e:
                    self.log.warning("write to server failed", attempt=attempt_index, error=repr(e))
                    return AttemptResult(passed=False)

                try:
                    reply = await self._read_reply(reader)
                except _ReadFailed as e:
                    if spec.expect_write_failure:
                        self.log.debug("read failed as expected", attempt=attempt_index, error=str(e))
                        return AttemptResult(passed=True)
                    self.log.warning("read from server failed", attempt=attempt_index, error=str(e))
                    return AttemptResult(passed=False)

                if spec.expect_write_failure:
                    self.log.warning(
                        "read succeeded but a failure was expected",
                        attempt=attempt_index,
                        reply=reply,
                    )
                    return AttemptResult(passed=False)

                return AttemptResult(
                    passed=self._evaluate_reply(reply, attempt_index, reference, diagnostics)
                )
            finally:
                await self._close(writer)

        yield attempt

    async def _read_reply(self, reader: asyncio.StreamReader) -> str:
        try:
            data = await asyncio.wait_for(
                reader.read(settings.TCP_READ_BUFFER_SIZE),
                timeout=self.spec.single_attempt_timeout_ms / 1000.0,
            )
        except asyncio.TimeoutError:
            raise _ReadFailed(
                f"i/o timeout after {self.spec.single_attempt_timeout_ms}ms"
            ) from None
        except OSError as e:
            raise _ReadFailed(repr(e)) from None
        if not data:
            raise _ReadFailed("EOF")
        return data.rstrip(b"\x00").decode("utf-8", errors="replace")

    def _evaluate_reply(
        self,
        reply: str,
        attempt_index: int,
        reference: _PersistentMatch,
        diagnostics: Diagnostics,
    ) -> bool:
        spec = self.spec

        if self._persistent_regex is not None:
            match = self._persistent_regex.search(reply)
            if match is None:
                detail = (
                    f"Got response {reply!r}, which does not match regex "
                    f"{spec.persistent_response_regex!r}"
                )
                self.log.warning(detail, attempt=attempt_index)
                diagnostics.add_warning("Check failed", detail)
                return False

            value = match.group(0)
            self.log.info("Persistent regex matched", attempt=attempt_index, value=value)
            if reference.value is None:
                reference.value = value
                reference.attempt = attempt_index
                return True
            if reference.value != value:
                detail = (
                    f"Got response {value!r}, which does not match previous attempt "
                    f"{reference.value!r}"
                )
                self.log.warning(detail, attempt=attempt_index, reference_attempt=reference.attempt)
                diagnostics.add_warning("Check failed", detail)
                return False

        if spec.expected_message not in reply:
            detail = (
                f"Got response {reply!r}, which does not include expected message "
                f"{spec.expected_message!r}"
            )
            self.log.warning(detail, attempt=attempt_index)
            diagnostics.add_warning("Check failed", detail)
            return False

        return True

    async def _close(self, writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            # Peer already reset the connection
            self.log.debug("connection close failed", error=repr(e))
