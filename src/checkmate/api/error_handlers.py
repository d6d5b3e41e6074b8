"""
FastAPI exception handlers for structured error responses.

Maps check exceptions to HTTP status codes:
- configuration rejected before any attempt -> 422
- check did not pass and failure is not tolerated -> 424
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from checkmate.api.models import ErrorResponse
from checkmate.checks.exceptions import CheckFailedError
from checkmate.models.enums import DiagnosticSeverity

logger = structlog.get_logger(__name__)


async def check_failed_handler(request: Request, exc: CheckFailedError) -> JSONResponse:
    """
    Handle checks whose result carries error diagnostics.

    Args:
        request: FastAPI request
        exc: CheckFailedError carrying the check result

    Returns:
        JSON error response with the full result
    """
    result = exc.result
    errors = [d.detail or d.summary for d in result.diagnostics if d.severity == DiagnosticSeverity.ERROR]

    if result.configuration_error:
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        error = "invalid_check_configuration"
        message = "; ".join(errors) or "Invalid check configuration"
    else:
        status_code = status.HTTP_424_FAILED_DEPENDENCY
        error = "check_failed"
        message = "; ".join(errors) or "The check did not pass"

    logger.warning(
        "Check request rejected",
        error=error,
        check_type=result.check_type.value,
        run_id=result.id,
        retry_result=result.retry_result.value if result.retry_result else None,
        attempts=result.attempts,
    )

    body = ErrorResponse(error=error, message=message, result=result)
    return JSONResponse(
        status_code=status_code,
        content={
            **body.model_dump(mode="json", exclude={"result"}),
            "result": result.model_dump(mode="json"),
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception(
        "Unexpected error",
        error_type=type(exc).__name__,
    )

    body = ErrorResponse(error="internal_error", message="An unexpected error occurred")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    CheckFailedError: check_failed_handler,
    Exception: generic_error_handler,
}
