import logging
import os
import subprocess
import uuid
from typing import Any, Dict, Optional

import requests
from rich.console import Console
from rich.table import Table

from .errors import BootstrapError
from .models import ExecutionContext, Mode, Pipeline, RunOutcome
from .pipeline import PipelineExecutor
from .profiles import ModeProfile, get_profile
from .services.command_runner import CommandRunner, IOMode
from .services.config_loader import ConfigLoader
from .services.docker_runtime import DockerRuntimeService
from .services.filesystem import FileSystemService
from .services.http_probe import HttpProbeService
from .services.preconditions import PreconditionService
from .services.readiness import ReadinessPoller
from .services.report import ReportService
from .steps import BootstrapSteps

console = Console()
logger = logging.getLogger("stackboot")

EXIT_INTERRUPTED = 130


class Bootstrapper:
    VALID_MODES = [mode.value for mode in Mode]

    def __init__(
        self,
        mode: str,
        working_dir: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        command_timeout: Optional[float] = None,
        report_file: Optional[str] = None,
    ):
        if mode not in self.VALID_MODES:
            raise BootstrapError(f"Invalid mode. Supported modes: {', '.join(self.VALID_MODES)}")

        self.profile: ModeProfile = get_profile(mode)
        self.cwd = os.path.abspath(working_dir or os.getcwd())
        if command_timeout is not None:
            command_timeout = ConfigLoader.parse_number(command_timeout, "command_timeout")
        self.run_id = uuid.uuid4().hex[:10]

        self.command_runner = CommandRunner(logger=logger, default_timeout=command_timeout)
        self.docker_runtime_service = DockerRuntimeService(logger=logger, subprocess_module=subprocess)
        self.report_service = ReportService(report_file=report_file, logger=logger)
        self.steps = BootstrapSteps(
            logger=logger,
            console=console,
            command_runner=self.command_runner,
            preconditions=PreconditionService(logger=logger, command_runner=self.command_runner),
            filesystem=FileSystemService(logger=logger),
            docker_runtime=self.docker_runtime_service,
            poller=ReadinessPoller(logger=logger),
            http_probe=HttpProbeService(logger=logger, requests_module=requests),
        )
        self.executor = PipelineExecutor(logger=logger, console=console, listener=self.report_service)

        self.context: ExecutionContext = self.profile.build_context(self.cwd, overrides)
        self.pipeline: Pipeline = self.profile.build_pipeline(self.steps)

    def plan(self) -> Pipeline:
        return self.pipeline

    def print_plan(self):
        table = Table(title=f"{self.profile.title} plan")
        table.add_column("#", justify="right")
        table.add_column("Step")
        table.add_column("On failure")
        table.add_column("Description")
        for index, step in enumerate(self.pipeline.steps, start=1):
            table.add_row(str(index), step.name, step.policy.value, step.description)
        console.print(table)
        console.print(f"[dim]Compose file: {self.context.compose_file}[/dim]")
        console.print(f"[dim]Environment file: {self.context.env_file}[/dim]")

    def _print_banner(self):
        console.print(f"[bold blue]Starting application in {self.profile.title}[/bold blue]")
        for note in self.profile.notes:
            console.print(f"   - {note}")
        logger.info("Run %s (%s) in %s", self.run_id, self.profile.mode.value, self.cwd)

    def _print_summary(self, outcome: RunOutcome):
        for warning in outcome.warnings:
            console.print(f"[yellow]Step '{warning.name}' failed; startup continued.[/yellow]")

        console.print(f"[bold green]{self.profile.title} environment started successfully![/bold green]")
        console.print(f"   Application: {self.context.base_url}")
        if self.context.database_url:
            console.print(f"   Database: {self.context.database_url}")
        for hint in self.docker_runtime_service.follow_up_commands(self.context):
            console.print(f"   {hint}")

    def run(self) -> int:
        self.report_service.start_run(self.run_id, self.profile.mode.value)
        report_status = "failed"
        aborted_at: Optional[str] = None
        report_error: Optional[str] = None

        try:
            self._print_banner()
            outcome = self.executor.execute(self.pipeline, self.context)

            if not outcome.completed:
                aborted_at = outcome.aborted_at
                failed = outcome.result_for(outcome.aborted_at)
                report_error = failed.error if failed else None
                report_status = "aborted"
                logger.error("Run aborted at step '%s'", outcome.aborted_at)
                return outcome.exit_code

            self._print_summary(outcome)
            report_status = "completed"
            return outcome.exit_code

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            report_status = "interrupted"
            report_error = "Operation cancelled by user."
            return EXIT_INTERRUPTED
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            report_error = str(exc)
            return 1
        finally:
            self.report_service.finalize(report_status, aborted_at=aborted_at, error=report_error)

    def down(self) -> int:
        """Stops the mode's compose stack. Never part of a pipeline."""
        try:
            cmd = self.docker_runtime_service.down_cmd(self.context)
            console.print(f"[dim]Stopping containers from {self.context.compose_file}...[/dim]")
            self.command_runner.run(cmd, io_mode=IOMode.INHERITED, cwd=self.cwd)
        except BootstrapError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            return 1
        console.print("[green]Containers stopped.[/green]")
        return 0
