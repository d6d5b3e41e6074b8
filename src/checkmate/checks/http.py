"""
HTTP health check.

Each attempt sends one request and passes when:
- the status code matches the configured pattern (e.g. "200-204,300"), and
- if a JSONPath is configured, the JSONPath result of the body matches the
  configured value regex.

The body of the most recent response with a matching status is reported
as `result_body`. Transport errors (refused, DNS, TLS, per-request
timeout) fail the attempt and are retried.
"""

import json
import re
import ssl
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Union

import httpx

from checkmate.checks.base import BaseCheck
from checkmate.checks.exceptions import CheckConfigurationError, JSONPathNotFound
from checkmate.checks.jsonpath import KubectlJSONPath
from checkmate.checks.status_codes import StatusCodePattern
from checkmate.models.check_results import HTTPCheckResult
from checkmate.models.check_specs import HTTPCheckSpec
from checkmate.models.diagnostics import Diagnostics
from checkmate.models.enums import CheckType
from checkmate.retry.engine import AttemptFn
from checkmate.retry.models import AttemptResult, RetryReport


class HTTPHealthCheck(BaseCheck[HTTPCheckSpec, HTTPCheckResult]):
    """
    HTTP health check driven by httpx.AsyncClient.

    One client is opened per session so connections can be reused across
    attempts; every attempt still issues a fresh request.
    """

    check_type = CheckType.HTTP
    result_class = HTTPCheckResult

    def __init__(self, spec: HTTPCheckSpec, **kwargs):
        super().__init__(spec, **kwargs)
        self._url: Optional[httpx.URL] = None
        self._status_pattern: Optional[StatusCodePattern] = None
        self._jsonpath: Optional[KubectlJSONPath] = None
        self._json_value: Optional[re.Pattern[str]] = None
        self._verify: Union[bool, ssl.SSLContext] = True

    def validate(self) -> None:
        spec = self.spec

        try:
            url = httpx.URL(spec.url)
        except httpx.InvalidURL as e:
            raise CheckConfigurationError(
                "Client Error", f"Unable to parse url {spec.url!r}, got error {e}"
            ) from None
        if url.scheme not in ("http", "https") or not url.host:
            raise CheckConfigurationError(
                "Client Error", f"Unable to parse url {spec.url!r}, expected an absolute http(s) URL"
            )
        self._url = url

        if bool(spec.jsonpath) != bool(spec.json_value):
            raise CheckConfigurationError(
                "Client Error", "Both JSONPath and JSONValue must be specified"
            )

        self._status_pattern = StatusCodePattern.parse(spec.status_code)

        if spec.jsonpath:
            self._jsonpath = KubectlJSONPath.parse(spec.jsonpath)
            try:
                self._json_value = re.compile(spec.json_value)
            except re.error as e:
                raise CheckConfigurationError(
                    "Invalid regex", f"Could not compile regex {spec.json_value!r}: {e}"
                ) from None

        if spec.ca_bundle and spec.insecure_tls:
            raise CheckConfigurationError(
                "Conflicting configuration",
                "You cannot specify both custom CA and insecure TLS. Please use only one of them.",
            )
        self._verify = self._build_verify()

    def _build_verify(self) -> Union[bool, ssl.SSLContext]:
        if self.spec.insecure_tls:
            return False
        if not self.spec.ca_bundle:
            return True
        try:
            return ssl.create_default_context(cadata=self.spec.ca_bundle)
        except (ssl.SSLError, ValueError) as e:
            raise CheckConfigurationError(
                "Building CA cert pool", f"Could not load CA bundle: {e}"
            ) from None

    @asynccontextmanager
    async def session(self, diagnostics: Diagnostics) -> AsyncIterator[AttemptFn]:
        spec = self.spec
        method = spec.method.upper()

        self.log.debug(
            "Starting HTTP health check",
            url=str(self._url),
            method=method,
            timeout_ms=spec.timeout_ms,
            request_timeout_ms=spec.request_timeout_ms,
            headers=sorted(spec.headers),
        )

        async with httpx.AsyncClient(
            verify=self._verify,
            timeout=httpx.Timeout(spec.request_timeout_ms / 1000.0),
            follow_redirects=True,
        ) as client:

            async def attempt(attempt_index: int, successes: int) -> AttemptResult:
                if successes:
                    self.log.debug(
                        f"SUCCESS [{successes}/{spec.consecutive_successes}] http {method} {self._url}"
                    )
                else:
                    self.log.debug(f"ATTEMPT #{attempt_index} http {method} {self._url}")

                try:
                    response = await client.request(
                        method,
                        self._url,
                        headers=spec.headers,
                        content=spec.request_body or None,
                    )
                except httpx.HTTPError as e:
                    self.log.warning(
                        "CONNECTION FAILURE",
                        attempt=attempt_index,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    return AttemptResult(passed=False)

                if not self._status_pattern.matches(response.status_code):
                    self.log.debug(f"FAILURE CODE {response.status_code}", attempt=attempt_index)
                    return AttemptResult(passed=False)

                body = response.text
                self.log.debug(
                    f"SUCCESS CODE {response.status_code}",
                    attempt=attempt_index,
                    body_bytes=len(response.content),
                )

                if self._jsonpath is None:
                    return AttemptResult(passed=True, payload=body)
                return AttemptResult(
                    passed=self._match_jsonpath(body, attempt_index),
                    payload=body,
                )

            yield attempt

    def _match_jsonpath(self, body: str, attempt_index: int) -> bool:
        try:
            document = json.loads(body)
        except ValueError as e:
            self.log.warning(
                "ERROR PARSING RESPONSE BODY AS JSON",
                attempt=attempt_index,
                error=str(e),
            )
            return False

        try:
            value = self._jsonpath.evaluate(document)
        except JSONPathNotFound as e:
            self.log.warning(
                "ERROR EXECUTING JSONPATH",
                attempt=attempt_index,
                error=e.message,
            )
            return False

        if self._json_value.search(value) is None:
            self.log.debug(
                "JSONPath value does not match",
                attempt=attempt_index,
                value=value,
                pattern=self._json_value.pattern,
            )
            return False
        return True

    def result_fields(self, report: Optional[RetryReport]) -> dict[str, Any]:
        body = report.last_payload if report is not None else None
        return {"result_body": body or ""}
