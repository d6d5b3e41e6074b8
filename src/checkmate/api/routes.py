"""
Check routes.

Each endpoint runs exactly one probing session for the posted
configuration and blocks until it ends. The request returns 200 when the
result carries no error diagnostics (the check passed, or failed with
create_anyway_on_check_failure), 422 for configuration errors and 424 when
the check did not pass.
"""

import structlog
from fastapi import APIRouter, Depends, status

from checkmate.api.dependencies import get_settings
from checkmate.api.models import ErrorResponse, HealthResponse
from checkmate.checks.base import BaseCheck
from checkmate.checks.exceptions import CheckFailedError
from checkmate.checks.http import HTTPHealthCheck
from checkmate.checks.local_command import LocalCommandCheck
from checkmate.checks.tcp_echo import TCPEchoCheck
from checkmate.config import Settings
from checkmate.models.check_results import (
    CheckResult,
    HTTPCheckResult,
    LocalCommandCheckResult,
    TCPEchoCheckResult,
)
from checkmate.models.check_specs import HTTPCheckSpec, LocalCommandSpec, TCPEchoSpec

logger = structlog.get_logger(__name__)

router = APIRouter()

CHECK_RESPONSES = {
    200: {"description": "Check passed, or failed with create_anyway_on_check_failure"},
    422: {"model": ErrorResponse, "description": "Invalid check configuration"},
    424: {"model": ErrorResponse, "description": "Check did not pass"},
}


async def _run_check(check: BaseCheck) -> CheckResult:
    logger.info("Check requested", check_type=check.check_type.value, run_id=check.run_id)
    result = await check.run()
    if result.has_error:
        raise CheckFailedError(result)
    return result


@router.post(
    "/checks/http",
    response_model=HTTPCheckResult,
    status_code=status.HTTP_200_OK,
    summary="Run an HTTP health check",
    responses=CHECK_RESPONSES,
)
async def run_http_check(spec: HTTPCheckSpec) -> HTTPCheckResult:
    """Poll a URL until its status code (and optional JSONPath value) match."""
    return await _run_check(HTTPHealthCheck(spec))


@router.post(
    "/checks/tcp-echo",
    response_model=TCPEchoCheckResult,
    status_code=status.HTTP_200_OK,
    summary="Run a TCP echo check",
    responses=CHECK_RESPONSES,
)
async def run_tcp_echo_check(spec: TCPEchoSpec) -> TCPEchoCheckResult:
    """Send a message to a TCP server until its reply matches."""
    return await _run_check(TCPEchoCheck(spec))


@router.post(
    "/checks/local-command",
    response_model=LocalCommandCheckResult,
    status_code=status.HTTP_200_OK,
    summary="Run a local command check",
    responses=CHECK_RESPONSES,
)
async def run_local_command_check(spec: LocalCommandSpec) -> LocalCommandCheckResult:
    """Run a shell command until it exits 0."""
    return await _run_check(LocalCommandCheck(spec))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health",
)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(status="ok", version=settings.APP_VERSION)
