"""
Check configuration models.

One spec is built per probing session from host-supplied configuration.
Field-level constraints (types, ranges) are enforced here; cross-field
rules such as "CA bundle and insecure TLS are mutually exclusive" are
checked by the check itself so they surface as diagnostics.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from checkmate.retry.models import RetryPolicy


class CheckSpec(BaseModel):
    """
    Fields shared by every check: retry policy and failure tolerance.
    """

    model_config = ConfigDict(extra="forbid")

    timeout_ms: int = Field(
        default=10000,
        gt=0,
        description="Overall timeout in milliseconds before giving up",
    )
    interval_ms: int = Field(default=200, ge=0, description="Interval in milliseconds between attempts")
    consecutive_successes: int = Field(
        default=1,
        ge=1,
        description="Consecutive passing attempts required for the check to pass",
    )
    create_anyway_on_check_failure: bool = Field(
        default=False,
        description="If true, a check that does not pass is reported without an error",
    )

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            timeout_ms=self.timeout_ms,
            interval_ms=self.interval_ms,
            consecutive_successes=self.consecutive_successes,
        )


class HTTPCheckSpec(CheckSpec):
    """HTTP health check configuration."""

    url: str = Field(..., description="URL to request")
    method: str = Field(default="GET", description="HTTP method")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    request_body: str = Field(default="", description="Request body sent with every attempt")
    status_code: str = Field(
        default="200",
        description="Expected status codes, e.g. '200-204,300'",
    )
    request_timeout_ms: int = Field(
        default=1000,
        gt=0,
        description="Timeout for an individual request",
    )
    timeout_ms: int = Field(default=5000, gt=0, description="Overall timeout in milliseconds")
    ca_bundle: Optional[str] = Field(default=None, description="PEM-encoded CA certificates to trust")
    insecure_tls: bool = Field(default=False, description="Skip TLS certificate verification")
    jsonpath: Optional[str] = Field(
        default=None,
        description="kubectl-style JSONPath applied to the response body, e.g. '{.status}'",
    )
    json_value: Optional[str] = Field(
        default=None,
        description="Regex the JSONPath result must match",
    )


class TCPEchoSpec(CheckSpec):
    """TCP echo check configuration."""

    host: str = Field(..., description="Hostname to connect to")
    port: int = Field(..., ge=1, le=65535, description="TCP port")
    message: str = Field(..., description="Message to send (a newline is appended)")
    expected_message: str = Field(
        default="",
        description="Substring the reply must contain",
    )
    expect_write_failure: bool = Field(
        default=False,
        description="Pass when reading the reply fails after connecting",
    )
    persistent_response_regex: Optional[str] = Field(
        default=None,
        description="Regex whose match must stay identical across all attempts",
    )
    connection_timeout_ms: int = Field(default=5000, gt=0, description="TCP connect timeout")
    single_attempt_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Read timeout for an individual attempt",
    )


class CreateFileSpec(BaseModel):
    """File materialized once before a local command check starts."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="File name (used as prefix of the created file)")
    contents: str = Field(..., description="File contents")
    use_working_dir: bool = Field(
        default=False,
        description="Create inside the working directory instead of the temp directory",
    )
    create_directory: bool = Field(
        default=False,
        description="Create missing parent directories",
    )


class LocalCommandSpec(CheckSpec):
    """Local command check configuration."""

    command: str = Field(..., description="Command passed to 'sh -c'")
    working_directory: str = Field(default=".", description="Directory the command runs in")
    command_timeout_ms: int = Field(
        default=5000,
        gt=0,
        description="Timeout for an individual command run",
    )
    env: dict[str, str] = Field(
        default_factory=dict,
        description="Environment overrides merged over the inherited environment",
    )
    create_file: Optional[CreateFileSpec] = Field(default=None, description="Optional file to create")
