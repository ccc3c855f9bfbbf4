"""Domain errors for stackboot."""

from typing import Optional


class BootstrapError(RuntimeError):
    """Raised when a bootstrap step cannot complete."""


class PreconditionMissing(BootstrapError):
    """A required local file is absent."""


class DependencyUnavailable(BootstrapError):
    """A required external service or tool cannot be reached."""


class ProcessExecutionFailed(BootstrapError):
    """A child process exited non-zero, timed out or could not be spawned."""

    def __init__(self, message: str, exit_code: int, stderr_snippet: Optional[str] = None):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr_snippet = stderr_snippet


class ReadinessTimeout(BootstrapError):
    """A readiness probe did not succeed within its attempt budget."""
