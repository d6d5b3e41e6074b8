"""
Custom exceptions for the check layer.

Configuration problems are raised before the retry loop starts and are
never retried. Per-attempt problems (connection refused, wrong status code,
unexpected reply) are not exceptions at this level: check drivers turn them
into failed attempts.
"""


class CheckError(Exception):
    """
    Base exception for all check errors.

    All check-specific exceptions inherit from this to allow catching
    any check-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CheckConfigurationError(CheckError):
    """
    Raised when a check configuration cannot produce a meaningful attempt.

    Examples:
    - Status code pattern doesn't parse
    - CA bundle together with insecure TLS
    - JSONPath without a value regex
    - create_file could not be written

    The summary becomes the diagnostic title, the message its detail.
    """
    def __init__(self, summary: str, message: str, details: dict | None = None):
        super().__init__(message, details)
        self.summary = summary


class StatusCodePatternError(CheckConfigurationError):
    """Raised when a status code pattern such as '200-204,300' doesn't parse."""

    def __init__(self, message: str, pattern: str):
        super().__init__("Bad status code pattern", message, {"pattern": pattern})
        self.pattern = pattern


class JSONPathExpressionError(CheckConfigurationError):
    """Raised when a kubectl-style JSONPath template doesn't parse."""

    def __init__(self, message: str, expression: str):
        super().__init__("Bad JSONPath expression", message, {"jsonpath": expression})
        self.expression = expression


class JSONPathNotFound(CheckError):
    """Raised when a JSONPath expression matches nothing in a document."""
    pass


class CheckFailedError(CheckError):
    """
    Raised by the host layer when a check did not pass and failure is not
    tolerated (create_anyway_on_check_failure is false).
    """
    def __init__(self, result):
        self.result = result
        super().__init__(
            f"{result.check_type.value} check did not pass",
            {"retry_result": result.retry_result.value if result.retry_result else None},
        )
