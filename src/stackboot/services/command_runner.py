"""Subprocess execution service for stackboot."""

import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from stackboot.errors import ProcessExecutionFailed

STDERR_SNIPPET_LIMIT = 2000
COMMAND_NOT_FOUND_EXIT_CODE = 127


class IOMode(str, Enum):
    CAPTURED = "captured"
    INHERITED = "inherited"


@dataclass(frozen=True)
class CommandOutput:
    returncode: int
    stdout: str = ""
    stderr: str = ""


class CommandRunner:
    """Runs external commands with consistent error handling. Never retries."""

    def __init__(
        self,
        logger,
        default_timeout: Optional[float] = None,
        interrupt_grace_seconds: float = 10.0,
    ):
        self.logger = logger
        self.default_timeout = default_timeout
        self.interrupt_grace_seconds = interrupt_grace_seconds

    def run(
        self,
        cmd: List[str],
        io_mode: IOMode = IOMode.CAPTURED,
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> CommandOutput:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing (%s): %s", io_mode.value, cmd_str)

        if io_mode == IOMode.INHERITED:
            result = self._run_inherited(cmd, cwd, timeout)
        else:
            effective_timeout = timeout if timeout is not None else self.default_timeout
            result = self._run_captured(cmd, cwd, effective_timeout)

        if io_mode == IOMode.CAPTURED and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = self._snippet(result.stderr)
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"
        raise ProcessExecutionFailed(message, exit_code=result.returncode, stderr_snippet=stderr)

    def _run_captured(self, cmd: List[str], cwd: Optional[str], timeout: Optional[float]) -> CommandOutput:
        cmd_str = " ".join(cmd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                text=True,
                capture_output=True,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise self._not_found(cmd) from exc
        except subprocess.TimeoutExpired as exc:
            raise ProcessExecutionFailed(
                f"Command timed out after {timeout}s: {cmd_str}",
                exit_code=-1,
                stderr_snippet=self._snippet(exc.stderr),
            ) from exc
        except OSError as exc:
            raise ProcessExecutionFailed(
                f"Failed to execute command: {cmd_str}. {exc}", exit_code=-1
            ) from exc

        return CommandOutput(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def _run_inherited(self, cmd: List[str], cwd: Optional[str], timeout: Optional[float]) -> CommandOutput:
        cmd_str = " ".join(cmd)
        try:
            process = subprocess.Popen(cmd, cwd=cwd)
        except FileNotFoundError as exc:
            raise self._not_found(cmd) from exc
        except OSError as exc:
            raise ProcessExecutionFailed(
                f"Failed to execute command: {cmd_str}. {exc}", exit_code=-1
            ) from exc

        with process:
            try:
                returncode = process.wait(timeout=timeout)
            except KeyboardInterrupt:
                # The child shares our process group and received the same SIGINT.
                self.logger.warning("Interrupted. Waiting for '%s' to exit...", cmd[0])
                self._stop(process)
                raise
            except subprocess.TimeoutExpired as exc:
                self._stop(process)
                raise ProcessExecutionFailed(
                    f"Command timed out after {timeout}s: {cmd_str}", exit_code=-1
                ) from exc

        return CommandOutput(returncode=returncode)

    def _stop(self, process: subprocess.Popen):
        try:
            process.wait(timeout=self.interrupt_grace_seconds)
        except subprocess.TimeoutExpired:
            self.logger.warning("Process %s did not exit in time. Terminating.", process.pid)
            process.terminate()
            process.wait()

    @staticmethod
    def _not_found(cmd: List[str]) -> ProcessExecutionFailed:
        return ProcessExecutionFailed(
            f"Required command not found: {cmd[0]}. Please install it and try again.",
            exit_code=COMMAND_NOT_FOUND_EXIT_CODE,
        )

    @staticmethod
    def _snippet(stream) -> str:
        if not stream:
            return ""
        if isinstance(stream, bytes):
            stream = stream.decode("utf-8", errors="replace")
        return stream.strip()[-STDERR_SNIPPET_LIMIT:]
