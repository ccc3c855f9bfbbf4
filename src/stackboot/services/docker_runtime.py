"""Docker runtime services for stackboot."""

import subprocess
from typing import List, Optional

from stackboot.errors import DependencyUnavailable
from stackboot.errors_catalog import actionable_error
from stackboot.models import ExecutionContext


class DockerRuntimeService:
    """Detects docker-compose and builds the compose commands a run needs."""

    def __init__(self, logger, subprocess_module=subprocess):
        self.logger = logger
        self.subprocess = subprocess_module
        self._compose_cmd: Optional[List[str]] = None

    @property
    def compose_cmd(self) -> List[str]:
        if self._compose_cmd is None:
            self._compose_cmd = self.get_docker_compose_cmd()
        return list(self._compose_cmd)

    def get_docker_compose_cmd(self) -> List[str]:
        try:
            self.subprocess.run(["docker", "compose", "version"], check=True, capture_output=True)
            return ["docker", "compose"]
        except (self.subprocess.CalledProcessError, FileNotFoundError):
            try:
                self.subprocess.run(["docker-compose", "--version"], check=True, capture_output=True)
                self.logger.debug("Falling back to docker-compose v1")
                return ["docker-compose"]
            except (self.subprocess.CalledProcessError, FileNotFoundError):
                raise DependencyUnavailable(actionable_error("compose_missing"))

    def up_cmd(self, ctx: ExecutionContext, detached: bool) -> List[str]:
        cmd = self.compose_cmd + ["-f", ctx.compose_file, "up", "--build"]
        if detached:
            cmd.append("-d")
        return cmd

    def exec_cmd(self, ctx: ExecutionContext, service: str, command: List[str]) -> List[str]:
        return self.compose_cmd + ["-f", ctx.compose_file, "exec", "-T", service] + list(command)

    def down_cmd(self, ctx: ExecutionContext) -> List[str]:
        return self.compose_cmd + ["-f", ctx.compose_file, "down"]

    @staticmethod
    def logs_cmd(container: str, follow: bool = False) -> List[str]:
        cmd = ["docker", "logs"]
        if follow:
            cmd.append("-f")
        cmd.append(container)
        return cmd

    def follow_up_commands(self, ctx: ExecutionContext) -> List[str]:
        # Printed only; these strings never reach the command runner.
        hints = []
        if ctx.app_container:
            hints.append(f"View logs: {' '.join(self.logs_cmd(ctx.app_container, follow=True))}")
        hints.append(f"Stop stack: {' '.join(self.down_cmd(ctx))}")
        return hints
