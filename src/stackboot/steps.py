"""Step actions shared by the mode pipelines."""

from typing import Dict, Tuple

from stackboot.errors import (
    BootstrapError,
    DependencyUnavailable,
    PreconditionMissing,
    ProcessExecutionFailed,
    ReadinessTimeout,
)
from stackboot.errors_catalog import actionable_error
from stackboot.models import ExecutionContext, FailurePolicy, Step
from stackboot.services.command_runner import CommandRunner, IOMode
from stackboot.services.docker_runtime import DockerRuntimeService
from stackboot.services.filesystem import FileSystemService
from stackboot.services.http_probe import HttpProbeService
from stackboot.services.preconditions import PreconditionService
from stackboot.services.readiness import ReadinessPoller

STEP_DEFINITIONS: Dict[str, Tuple[FailurePolicy, str]] = {
    "check_env_file": (FailurePolicy.FATAL, "Checking environment file..."),
    "check_docker": (FailurePolicy.FATAL, "Checking Docker daemon..."),
    "ensure_state_dir": (FailurePolicy.FATAL, "Preparing local state directory..."),
    "ensure_ignore_entry": (FailurePolicy.FATAL, "Checking ignore file..."),
    "migrate": (FailurePolicy.FATAL, "Applying latest schema..."),
    "probe_database": (FailurePolicy.WARN, "Waiting for the database to be ready..."),
    "wait_for_app": (FailurePolicy.WARN, "Waiting for the application to accept connections..."),
    "start_stack": (FailurePolicy.FATAL, "Building and starting containers..."),
}


class BootstrapSteps:
    """Binds step actions to the services they drive."""

    def __init__(
        self,
        logger,
        console,
        command_runner: CommandRunner,
        preconditions: PreconditionService,
        filesystem: FileSystemService,
        docker_runtime: DockerRuntimeService,
        poller: ReadinessPoller,
        http_probe: HttpProbeService,
    ):
        self.logger = logger
        self.console = console
        self.command_runner = command_runner
        self.preconditions = preconditions
        self.filesystem = filesystem
        self.docker_runtime = docker_runtime
        self.poller = poller
        self.http_probe = http_probe

    def step(self, name: str) -> Step:
        if name not in STEP_DEFINITIONS:
            raise KeyError(f"Unknown step: {name}")
        policy, description = STEP_DEFINITIONS[name]
        return Step(name=name, action=getattr(self, name), policy=policy, description=description)

    def check_env_file(self, ctx: ExecutionContext):
        if not self.preconditions.check_file_exists(ctx.resolve(ctx.env_file)):
            raise PreconditionMissing(actionable_error("env_file_missing", path=ctx.env_file))
        return None

    def check_docker(self, ctx: ExecutionContext):
        if not self.preconditions.check_daemon_reachable():
            raise DependencyUnavailable(actionable_error("docker_unreachable"))
        return None

    def ensure_state_dir(self, ctx: ExecutionContext):
        if not ctx.state_dir:
            raise BootstrapError("No local state directory configured for this mode.")
        if self.filesystem.ensure_directory(ctx.resolve(ctx.state_dir)):
            self.console.print(f"[green]Created {ctx.state_dir}[/green]")
        return None

    def ensure_ignore_entry(self, ctx: ExecutionContext):
        if not ctx.ignore_entry:
            raise BootstrapError("No local state directory configured for this mode.")
        ignore_path = ctx.resolve(ctx.ignore_file)
        if self.filesystem.ensure_ignore_entry(ignore_path, ctx.ignore_entry):
            self.console.print(f"[green]Added {ctx.ignore_entry} to {ctx.ignore_file}[/green]")
        return None

    def migrate(self, ctx: ExecutionContext):
        try:
            self.command_runner.run(list(ctx.migrate_command), io_mode=IOMode.INHERITED, cwd=ctx.working_dir)
        except ProcessExecutionFailed as exc:
            raise ProcessExecutionFailed(
                f"{actionable_error('migration_failed')}\n{exc}",
                exit_code=exc.exit_code,
                stderr_snippet=exc.stderr_snippet,
            ) from exc
        return None

    def probe_database(self, ctx: ExecutionContext):
        if not ctx.probe_service or not ctx.probe_command:
            self.logger.info("No database probe configured. Skipping.")
            return "skipped"

        cmd = self.docker_runtime.exec_cmd(ctx, ctx.probe_service, list(ctx.probe_command))
        outputs = []

        def probe() -> bool:
            result = self.command_runner.run(cmd, io_mode=IOMode.CAPTURED, cwd=ctx.working_dir)
            outputs.append(result.stdout)
            return True

        if not self.poller.wait_until_ready(probe, ctx.readiness_attempts, ctx.readiness_interval):
            raise ReadinessTimeout(actionable_error("database_not_ready", service=ctx.probe_service))
        self.console.print("[green]Database is ready.[/green]")
        return outputs[-1]

    def wait_for_app(self, ctx: ExecutionContext):
        ready = self.poller.wait_until_ready(
            lambda: self.http_probe.is_responding(ctx.base_url),
            ctx.readiness_attempts,
            ctx.readiness_interval,
        )
        if not ready:
            raise ReadinessTimeout(
                actionable_error(
                    "app_not_ready",
                    url=ctx.base_url,
                    attempts=str(ctx.readiness_attempts),
                    container=ctx.app_container or "<app container>",
                )
            )
        self.console.print("[green]Application is accepting connections.[/green]")
        return None

    def start_stack(self, ctx: ExecutionContext):
        cmd = self.docker_runtime.up_cmd(ctx, detached=ctx.detached)
        try:
            self.command_runner.run(cmd, io_mode=IOMode.INHERITED, cwd=ctx.working_dir)
        except ProcessExecutionFailed as exc:
            raise ProcessExecutionFailed(
                actionable_error("stack_launch_failed", compose_file=ctx.compose_file),
                exit_code=exc.exit_code,
                stderr_snippet=exc.stderr_snippet,
            ) from exc
        return None
