"""
Unit tests for HTTPHealthCheck.

HTTP traffic is mocked with respx; every test runs a full probing session
through the retry engine.
"""

import asyncio

import httpx
import pytest
import respx

from checkmate.checks.http import HTTPHealthCheck
from checkmate.models.check_specs import HTTPCheckSpec
from checkmate.models.enums import CheckType, DiagnosticSeverity
from checkmate.retry.models import RetryResult

URL = "http://service.test/health"


def make_spec(**overrides) -> HTTPCheckSpec:
    fields = {
        "url": URL,
        "timeout_ms": 1000,
        "interval_ms": 10,
        "request_timeout_ms": 500,
    }
    fields.update(overrides)
    return HTTPCheckSpec(**fields)


def summaries(result, severity):
    return [d.summary for d in result.diagnostics if d.severity == severity]


class TestHTTPHealthCheckPasses:
    """Sessions that pass."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_status_code_only(self):
        respx.get(URL).mock(return_value=httpx.Response(200, text="all good"))

        result = await HTTPHealthCheck(make_spec()).run()

        assert result.passed is True
        assert result.check_type == CheckType.HTTP
        assert result.retry_result == RetryResult.SUCCESS
        assert result.attempts == 1
        assert result.result_body == "all good"
        assert result.diagnostics == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_jsonpath_value_matches(self):
        respx.get(URL).mock(return_value=httpx.Response(200, text='{"SomeField":"someValue"}'))

        spec = make_spec(jsonpath="{.SomeField}", json_value="someValue")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is True
        assert result.retry_result == RetryResult.SUCCESS
        assert result.result_body == '{"SomeField":"someValue"}'
        assert not result.has_error

    @pytest.mark.asyncio
    @respx.mock
    async def test_json_value_is_a_regex(self):
        respx.get(URL).mock(return_value=httpx.Response(200, json={"version": "1.24.3"}))

        spec = make_spec(jsonpath="{.version}", json_value=r"^1\.24\.\d+$")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_status_code_range(self):
        respx.get(URL).mock(return_value=httpx.Response(301))

        result = await HTTPHealthCheck(make_spec(status_code="200-204,300-305")).run()

        assert result.passed is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_consecutive_successes(self):
        route = respx.get(URL).mock(return_value=httpx.Response(200))

        result = await HTTPHealthCheck(make_spec(consecutive_successes=3)).run()

        assert result.passed is True
        assert result.attempts == 3
        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error_is_retried(self):
        route = respx.get(URL).mock(
            side_effect=[httpx.ConnectError("Connection refused"), httpx.Response(200, text="up")]
        )

        result = await HTTPHealthCheck(make_spec()).run()

        assert result.passed is True
        assert result.attempts == 2
        assert route.call_count == 2
        assert result.result_body == "up"

    @pytest.mark.asyncio
    @respx.mock
    async def test_method_headers_and_body_sent(self):
        route = respx.post(URL).mock(return_value=httpx.Response(200))

        spec = make_spec(method="post", headers={"X-Token": "secret"}, request_body="ping")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is True
        request = route.calls.last.request
        assert request.method == "POST"
        assert request.headers["X-Token"] == "secret"
        assert request.content == b"ping"


class TestHTTPHealthCheckFails:
    """Sessions that run out of time."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_status_mismatch_times_out(self):
        respx.get(URL).mock(return_value=httpx.Response(500, text="down"))

        spec = make_spec(timeout_ms=300, consecutive_successes=2)
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is False
        assert result.retry_result == RetryResult.TIMEOUT_EXCEEDED
        assert result.attempts >= 1
        assert result.has_error
        assert summaries(result, DiagnosticSeverity.WARNING) == ["Timeout exceeded"]
        assert summaries(result, DiagnosticSeverity.ERROR) == ["Check failed"]
        # Bodies are only reported for responses with a matching status
        assert result.result_body == ""

    @pytest.mark.asyncio
    @respx.mock
    async def test_create_anyway_downgrades_failure(self):
        respx.get(URL).mock(return_value=httpx.Response(503))

        spec = make_spec(timeout_ms=200, create_anyway_on_check_failure=True)
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is False
        assert result.retry_result == RetryResult.TIMEOUT_EXCEEDED
        assert not result.has_error
        assert summaries(result, DiagnosticSeverity.WARNING) == ["Timeout exceeded"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_jsonpath_value_mismatch_with_consecutive_successes(self):
        respx.get(URL).mock(return_value=httpx.Response(200, text='{"SomeField":"notSomeValue"}'))

        spec = make_spec(
            jsonpath="{.SomeField}",
            json_value="someValue",
            consecutive_successes=2,
            timeout_ms=1000,
        )
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is False
        assert result.retry_result == RetryResult.TIMEOUT_EXCEEDED
        assert result.result_body == '{"SomeField":"notSomeValue"}'

    @pytest.mark.asyncio
    @respx.mock
    async def test_jsonpath_filter_type_error_fails_attempt(self):
        route = respx.get(URL).mock(
            side_effect=[
                httpx.Response(200, json={"items": [{"a": None}]}),
                httpx.Response(200, json={"items": [{"a": 2}]}),
            ]
        )

        spec = make_spec(jsonpath="{.items[?(@.a > 1)].a}", json_value="2")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is True
        assert result.attempts == 2
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_jsonpath_value_mismatch(self):
        respx.get(URL).mock(return_value=httpx.Response(200, json={"status": "starting"}))

        spec = make_spec(timeout_ms=200, jsonpath="{.status}", json_value="^ready$")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is False
        assert result.retry_result == RetryResult.TIMEOUT_EXCEEDED
        # Status matched, so the body is still reported
        assert "starting" in result.result_body

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body_fails_attempt(self):
        respx.get(URL).mock(return_value=httpx.Response(200, text="<html>ok</html>"))

        spec = make_spec(timeout_ms=200, jsonpath="{.status}", json_value="ok")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is False
        assert result.retry_result == RetryResult.TIMEOUT_EXCEEDED

    @pytest.mark.asyncio
    @respx.mock
    async def test_jsonpath_not_found_fails_attempt(self):
        respx.get(URL).mock(return_value=httpx.Response(200, json={"other": "ok"}))

        spec = make_spec(timeout_ms=200, jsonpath="{.status}", json_value="ok")
        result = await HTTPHealthCheck(spec).run()

        assert result.passed is False

    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_cancelled_session(self):
        route = respx.get(URL).mock(return_value=httpx.Response(200))
        cancel = asyncio.Event()
        cancel.set()

        result = await HTTPHealthCheck(make_spec(), cancel_event=cancel).run()

        assert result.passed is False
        assert result.retry_result == RetryResult.FAILURE
        assert route.call_count == 0
        assert summaries(result, DiagnosticSeverity.WARNING) == ["Check cancelled"]
        assert summaries(result, DiagnosticSeverity.ERROR) == ["Check failed"]


class TestHTTPHealthCheckConfiguration:
    """Configuration errors: no attempt is ever made."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides, summary",
        [
            ({"status_code": "200-204-300"}, "Bad status code pattern"),
            ({"status_code": "abc"}, "Bad status code pattern"),
            ({"jsonpath": "{.status}"}, "Client Error"),
            ({"json_value": "ok"}, "Client Error"),
            ({"jsonpath": "{.status", "json_value": "ok"}, "Bad JSONPath expression"),
            ({"jsonpath": "{.status}", "json_value": "("}, "Invalid regex"),
            ({"url": "not a url"}, "Client Error"),
            ({"url": "ftp://service.test/file"}, "Client Error"),
            ({"ca_bundle": "-----BEGIN CERTIFICATE-----", "insecure_tls": True}, "Conflicting configuration"),
            ({"ca_bundle": "not a certificate"}, "Building CA cert pool"),
        ],
    )
    async def test_configuration_error(self, overrides, summary):
        result = await HTTPHealthCheck(make_spec(**overrides)).run()

        assert result.passed is False
        assert result.retry_result is None
        assert result.attempts == 0
        assert result.configuration_error
        assert summaries(result, DiagnosticSeverity.ERROR) == [summary]

    def test_spec_defaults(self):
        spec = HTTPCheckSpec(url=URL)

        assert spec.method == "GET"
        assert spec.status_code == "200"
        assert spec.timeout_ms == 5000
        assert spec.request_timeout_ms == 1000
        assert spec.interval_ms == 200
        assert spec.consecutive_successes == 1
        assert spec.create_anyway_on_check_failure is False
