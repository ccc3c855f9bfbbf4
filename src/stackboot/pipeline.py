"""Sequential step executor with per-step failure policy."""

import time
from typing import List, Optional

from stackboot.errors import BootstrapError
from stackboot.models import (
    ExecutionContext,
    FailurePolicy,
    Pipeline,
    RunOutcome,
    RunStatus,
    StepResult,
    StepStatus,
)


class PipelineExecutor:
    """Runs pipeline steps strictly in order.

    A step fails by raising ``BootstrapError``. A failed ``fatal`` step ends the
    run immediately; a failed ``warn`` step is recorded and the run goes on.
    Nothing is rolled back. Any other exception, ``KeyboardInterrupt`` included,
    propagates to the caller.
    """

    def __init__(self, logger, console, listener=None):
        self.logger = logger
        self.console = console
        self.listener = listener

    def execute(self, pipeline: Pipeline, ctx: ExecutionContext) -> RunOutcome:
        results: List[StepResult] = []
        total = len(pipeline.steps)

        for index, step in enumerate(pipeline.steps, start=1):
            self.logger.info("[%s/%s] %s", index, total, step.name)
            if step.description:
                self.console.print(f"[blue]{step.description}[/blue]")
            self._notify_started(step.name)

            started = time.monotonic()
            try:
                output = step.action(ctx)
            except BootstrapError as exc:
                result = StepResult(
                    name=step.name,
                    status=StepStatus.FAILED,
                    policy=step.policy,
                    error=str(exc),
                    duration_seconds=time.monotonic() - started,
                )
                results.append(result)
                self._notify_finished(step.name, StepStatus.FAILED.value, error=str(exc))

                if step.policy == FailurePolicy.FATAL:
                    self.console.print(f"[bold red]Error:[/bold red] {exc}")
                    self.logger.error("Step '%s' failed: %s", step.name, exc)
                    return RunOutcome(
                        status=RunStatus.ABORTED,
                        results=tuple(results),
                        aborted_at=step.name,
                    )

                self.console.print(f"[yellow]Warning:[/yellow] {exc}")
                self.logger.warning("Step '%s' failed, continuing: %s", step.name, exc)
                continue

            results.append(
                StepResult(
                    name=step.name,
                    status=StepStatus.SUCCESS,
                    policy=step.policy,
                    output=output,
                    duration_seconds=time.monotonic() - started,
                )
            )
            self._notify_finished(step.name, StepStatus.SUCCESS.value)
            self.logger.debug("Step '%s' completed", step.name)

        return RunOutcome(status=RunStatus.COMPLETED, results=tuple(results))

    def _notify_started(self, name: str):
        if self.listener is not None:
            self.listener.step_started(name)

    def _notify_finished(self, name: str, status: str, error: Optional[str] = None):
        if self.listener is not None:
            self.listener.step_finished(name, status, error=error)
