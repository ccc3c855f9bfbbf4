"""Precondition checks run before any mutating step."""

import os

from stackboot.errors import ProcessExecutionFailed
from stackboot.services.command_runner import CommandRunner, IOMode


class PreconditionService:
    """Read-only checks of local state and the container runtime."""

    def __init__(self, logger, command_runner: CommandRunner):
        self.logger = logger
        self.command_runner = command_runner

    def check_file_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def check_daemon_reachable(self) -> bool:
        try:
            self.command_runner.run(["docker", "info"], io_mode=IOMode.CAPTURED)
        except ProcessExecutionFailed as exc:
            self.logger.debug("Docker daemon check failed: %s", exc)
            return False
        return True
