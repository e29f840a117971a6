"""Shared domain models for moodle-bootstrap."""

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, TextIO

from rich.markup import escape

from .constants import DEFAULT_DB_ENGINE, DEFAULT_DOCKER_PATH, DEFAULT_PROJECT


@dataclass(frozen=True)
class BootstrapConfig:
    """Validated parameters for one bootstrap run."""

    web_port: int
    code_path: str
    db_engine: str = DEFAULT_DB_ENGINE
    db_port: Optional[int] = None
    project: str = DEFAULT_PROJECT
    vnc_port: Optional[int] = None
    run_install: bool = False
    docker_path: str = DEFAULT_DOCKER_PATH
    db_wait_timeout: Optional[float] = None


@dataclass(frozen=True)
class ServiceHandle:
    """A compose service addressed within its project."""

    name: str
    project: str


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED_TOLERATED = "failed-tolerated"
    FAILED = "failed"
    NOT_RUN = "not-run"


class BootstrapState(str, Enum):
    VALIDATING = "Validating"
    STARTING = "Starting"
    WAITING_FOR_DATABASE = "WaitingForDatabase"
    CONFIGURING_DEBUGGER = "ConfiguringDebugger"
    RESTARTING_WEB = "RestartingWeb"
    INITIALIZING_DATABASE = "OptionallyInitializingDatabase"
    REPORTING = "Reporting"
    DONE = "Done"


# States that carry a per-step outcome, in execution order.
STEP_STATES = (
    BootstrapState.VALIDATING,
    BootstrapState.STARTING,
    BootstrapState.WAITING_FOR_DATABASE,
    BootstrapState.CONFIGURING_DEBUGGER,
    BootstrapState.RESTARTING_WEB,
    BootstrapState.INITIALIZING_DATABASE,
)


@dataclass
class StepOutcome:
    state: BootstrapState
    status: StepStatus = StepStatus.NOT_RUN
    detail: Optional[str] = None


@dataclass
class BootstrapOutcome:
    """Per-step results accumulated during a run; never persisted."""

    steps: Dict[BootstrapState, StepOutcome] = field(
        default_factory=lambda: {state: StepOutcome(state) for state in STEP_STATES}
    )
    config: Optional[BootstrapConfig] = None
    fatal_state: Optional[BootstrapState] = None
    fatal_error: Optional[str] = None
    final_state: Optional[BootstrapState] = None

    def record(self, state: BootstrapState, status: StepStatus, detail: Optional[str] = None):
        self.steps[state] = StepOutcome(state, status, detail)

    def record_fatal(self, state: BootstrapState, error: str):
        self.record(state, StepStatus.FAILED, error)
        self.fatal_state = state
        self.fatal_error = error

    def status_of(self, state: BootstrapState) -> StepStatus:
        return self.steps[state].status

    @property
    def is_fatal(self) -> bool:
        return self.fatal_state is not None

    @property
    def exit_code(self) -> int:
        return 1 if self.is_fatal else 0

    def ordered_steps(self) -> List[StepOutcome]:
        return [self.steps[state] for state in STEP_STATES]


@dataclass(frozen=True)
class InstallResult:
    status: StepStatus
    notes: tuple = ()


@dataclass(frozen=True)
class OutputStyle:
    """Terminal formatting decided once at startup."""

    color: bool = True

    @classmethod
    def detect(
        cls,
        no_color: bool = False,
        environ: Optional[Mapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ) -> "OutputStyle":
        environ = os.environ if environ is None else environ
        stream = sys.stderr if stream is None else stream
        if no_color or environ.get("NO_COLOR") or environ.get("TERM") == "dumb":
            return cls(color=False)
        isatty = getattr(stream, "isatty", None)
        return cls(color=bool(isatty and isatty()))

    def paint(self, text: str, color: str) -> str:
        if not self.color:
            return escape(text)
        return f"[{color}]{escape(text)}[/{color}]"
