"""
Local command check.

Each attempt runs the command through `/bin/sh -c` in the working
directory, with the configured environment merged over the inherited one,
and passes on exit code 0. A run exceeding the command timeout is killed
and counts as a failed attempt. stdout/stderr of the last attempt are
reported.

If `create_file` is set, a file with the given contents is created once
before the first attempt (in the temporary directory, or in the working
directory) and its absolute path is exported to every attempt through the
CHECKMATE_FILEPATH environment variable.
"""

import asyncio
import os
import signal
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Optional

from checkmate.checks.base import BaseCheck
from checkmate.checks.exceptions import CheckConfigurationError
from checkmate.config import settings
from checkmate.models.check_results import LocalCommandCheckResult
from checkmate.models.check_specs import CreateFileSpec, LocalCommandSpec
from checkmate.models.diagnostics import Diagnostics
from checkmate.models.enums import CheckType
from checkmate.retry.engine import AttemptFn
from checkmate.retry.models import AttemptResult, RetryReport


@dataclass(frozen=True)
class CommandOutput:
    """Captured output of one command run."""

    exit_code: Optional[int]
    stdout: str
    stderr: str


def create_file(spec: CreateFileSpec, working_directory: str) -> Path:
    """
    Materialize `spec` on disk and return its absolute path.

    The file name is used as a prefix; a random suffix keeps concurrent
    sessions from clobbering each other. A directory part in the name is only
    allowed together with use_working_dir.

    Raises:
        CheckConfigurationError: Directory or file could not be created
    """
    name = Path(spec.name)
    if spec.use_working_dir:
        directory = Path(working_directory) / name.parent
        if spec.create_directory:
            try:
                directory.mkdir(mode=0o750, parents=True, exist_ok=True)
            except OSError as e:
                raise CheckConfigurationError(
                    "Error creating directory", f"Error creating directory {str(directory)!r}. {e}"
                ) from None
    else:
        if name.parent != Path("."):
            raise CheckConfigurationError(
                "Error creating file",
                f"File name {spec.name!r} contains a path separator; "
                "set use_working_dir to create it in a subdirectory",
            )
        directory = Path(tempfile.gettempdir())

    try:
        fd, path = tempfile.mkstemp(prefix=name.name, dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(spec.contents)
    except OSError as e:
        raise CheckConfigurationError("Error creating file", str(e)) from None

    try:
        return Path(path).resolve()
    except OSError as e:
        raise CheckConfigurationError(
            "Can't get path to file",
            f"Can't determine the absolute path of the file we created at {path!r} error={e}",
        ) from None


def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    """Kill the shell and anything it spawned."""
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass  # already exited


class LocalCommandCheck(BaseCheck[LocalCommandSpec, LocalCommandCheckResult]):
    """Local command check using asyncio subprocesses."""

    check_type = CheckType.LOCAL_COMMAND
    result_class = LocalCommandCheckResult

    def __init__(self, spec: LocalCommandSpec, **kwargs):
        super().__init__(spec, **kwargs)
        self._created_file: Optional[Path] = None

    def validate(self) -> None:
        if not self.spec.command.strip():
            raise CheckConfigurationError("Missing command", "command must not be empty")

    @asynccontextmanager
    async def session(self, diagnostics: Diagnostics) -> AsyncIterator[AttemptFn]:
        spec = self.spec
        env = dict(os.environ)
        env.update(spec.env)

        if spec.create_file is not None:
            self._created_file = create_file(spec.create_file, spec.working_directory)
            env[settings.FILEPATH_ENV_VAR] = str(self._created_file)
            self.log.info("Created file for command", path=str(self._created_file))

        self.log.debug(f"Command string: sh -c {spec.command}", working_directory=spec.working_directory)

        async def attempt(attempt_index: int, successes: int) -> AttemptResult:
            try:
                output = await self._execute(env)
            except OSError as e:
                self.log.error(
                    "Error starting command",
                    attempt=attempt_index,
                    error=repr(e),
                )
                return AttemptResult(passed=False)

            self.log.debug("Command stdout", attempt=attempt_index, stdout=output.stdout)
            self.log.debug("Command stderr", attempt=attempt_index, stderr=output.stderr)

            if output.exit_code != 0:
                self.log.debug(
                    f"ATTEMPT #{attempt_index} exit_code={output.exit_code}",
                )
                return AttemptResult(passed=False, payload=output)

            self.log.debug(f"SUCCESS [{successes + 1}/{spec.consecutive_successes}]")
            return AttemptResult(passed=True, payload=output)

        yield attempt

    async def _execute(self, env: dict[str, str]) -> CommandOutput:
        """
        Run the command once.

        Returns exit_code None when the command timed out and was killed;
        whatever it wrote before the kill is still reported.

        Raises:
            OSError: The shell could not be started (e.g. missing working directory)
        """
        process = await asyncio.create_subprocess_shell(
            self.spec.command,
            cwd=self.spec.working_directory,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
        # Drain both pipes while waiting so output written before a kill survives
        readers = [
            asyncio.ensure_future(process.stdout.read()),
            asyncio.ensure_future(process.stderr.read()),
        ]
        timed_out = False
        try:
            try:
                await asyncio.wait_for(
                    process.wait(),
                    timeout=self.spec.command_timeout_ms / 1000.0,
                )
            except asyncio.TimeoutError:
                timed_out = True
                self.log.warning(
                    "Command timed out",
                    command_timeout_ms=self.spec.command_timeout_ms,
                )
            finally:
                if process.returncode is None:
                    _kill_process_group(process)
                    await process.wait()

            stdout, stderr = await asyncio.gather(*readers)
        finally:
            for reader in readers:
                reader.cancel()

        return CommandOutput(
            exit_code=None if timed_out else process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )

    def result_fields(self, report: Optional[RetryReport]) -> dict[str, Any]:
        output: Optional[CommandOutput] = report.last_payload if report is not None else None
        return {
            "stdout": output.stdout if output else None,
            "stderr": output.stderr if output else None,
            "create_file_path": str(self._created_file) if self._created_file else None,
        }
