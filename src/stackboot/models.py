"""Shared domain models for stackboot."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple


class Mode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class FailurePolicy(str, Enum):
    FATAL = "fatal"
    WARN = "warn"


class StepStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class ExecutionContext:
    """Parameters for one bootstrap run. Built once, never mutated."""

    mode: Mode
    env_file: str
    working_dir: str
    compose_file: str
    base_url: str
    database_url: str
    migrate_command: Tuple[str, ...]
    ignore_file: str = ".gitignore"
    state_dir: Optional[str] = None
    probe_service: Optional[str] = None
    probe_command: Tuple[str, ...] = ()
    app_container: Optional[str] = None
    detached: bool = False
    readiness_attempts: int = 1
    readiness_interval: float = 2.0

    @property
    def ignore_entry(self) -> Optional[str]:
        if not self.state_dir:
            return None
        return self.state_dir.rstrip("/\\") + "/"

    def resolve(self, path: str) -> str:
        if os.path.isabs(path):
            return path
        return os.path.join(self.working_dir, path)


StepAction = Callable[[ExecutionContext], Optional[str]]


@dataclass(frozen=True)
class Step:
    """One named unit of work. The action raises BootstrapError to fail."""

    name: str
    action: StepAction
    policy: FailurePolicy = FailurePolicy.FATAL
    description: str = ""


@dataclass(frozen=True)
class Pipeline:
    mode: Mode
    steps: Tuple[Step, ...]

    def __post_init__(self):
        names = [step.name for step in self.steps]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate step names in pipeline: {', '.join(duplicates)}")

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]


@dataclass(frozen=True)
class StepResult:
    name: str
    status: StepStatus
    policy: FailurePolicy
    output: Optional[str] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == StepStatus.SUCCESS


@dataclass(frozen=True)
class RunOutcome:
    """Terminal result of a pipeline execution."""

    status: RunStatus
    results: Tuple[StepResult, ...] = field(default_factory=tuple)
    aborted_at: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @property
    def warnings(self) -> List[StepResult]:
        return [
            result
            for result in self.results
            if result.status == StepStatus.FAILED and result.policy == FailurePolicy.WARN
        ]

    @property
    def exit_code(self) -> int:
        return 0 if self.completed else 1

    def result_for(self, name: str) -> Optional[StepResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None
