import logging
import os
from typing import Any, Callable, Optional

from rich.console import Console

from .constants import DB_SERVICE, DEFAULT_DB_WAIT_TIMEOUT, WEB_SERVICE
from .errors import BootstrapError
from .models import (
    BootstrapConfig,
    BootstrapOutcome,
    BootstrapState,
    OutputStyle,
    StepStatus,
)
from .services.command_runner import CommandRunner
from .services.database_init import DatabaseInitializer
from .services.debug_extension import DebugExtensionInstaller
from .services.docker_runtime import ServiceOrchestrator
from .services.filesystem import FileSystemService
from .services.readiness import ReadinessWaiter
from .services.reporter import Reporter
from .services.validation import ConfigValidator

logger = logging.getLogger("moodlebootstrap")


class BootstrapSequencer:
    """Brings up a local moodle-docker environment, one state at a time.

    ``Validating``, ``Starting`` and ``WaitingForDatabase`` abort the run on
    failure. ``ConfiguringDebugger``, ``RestartingWeb`` and
    ``OptionallyInitializingDatabase`` only record a tolerated failure.
    ``Reporting`` always runs. Nothing is torn down afterwards.
    """

    def __init__(
        self,
        webport: Any,
        code_path: Any,
        dbengine: Any = None,
        dbport: Any = None,
        project: Any = None,
        vncport: Any = None,
        install: bool = False,
        docker_path: Any = None,
        db_timeout: Any = DEFAULT_DB_WAIT_TIMEOUT,
        style: Optional[OutputStyle] = None,
        console: Optional[Console] = None,
        orchestrator=None,
        readiness_waiter=None,
        debug_installer=None,
        database_initializer=None,
    ):
        self.raw_params = {
            "webport": webport,
            "code_path": code_path,
            "dbengine": dbengine,
            "dbport": dbport,
            "project": project,
            "vncport": vncport,
            "install": install,
            "docker_path": docker_path,
            "db_timeout": db_timeout,
        }
        self.style = style or OutputStyle.detect()
        self.console = console or Console(stderr=True, no_color=not self.style.color)

        self.validator = ConfigValidator()
        self.command_runner = CommandRunner(logger=logger)
        self.filesystem_service = FileSystemService(logger=logger, console=self.console)
        self.orchestrator = orchestrator or ServiceOrchestrator(
            logger=logger,
            console=self.console,
            command_runner=self.command_runner,
            filesystem_service=self.filesystem_service,
        )
        self.readiness_waiter = readiness_waiter or ReadinessWaiter(
            logger=logger,
            console=self.console,
            command_runner=self.command_runner,
        )
        self.debug_installer = debug_installer or DebugExtensionInstaller(
            logger=logger,
            console=self.console,
            orchestrator=self.orchestrator,
        )
        self.database_initializer = database_initializer or DatabaseInitializer(
            logger=logger,
            console=self.console,
            orchestrator=self.orchestrator,
        )
        self.reporter = Reporter(console=self.console, style=self.style)

        self.outcome = BootstrapOutcome()
        self.state: Optional[BootstrapState] = None
        self.config: Optional[BootstrapConfig] = None

    def _enter(self, state: BootstrapState):
        self.state = state
        logger.debug("Entering state %s", state.value)

    def _record_fatal(self, error: str):
        self.outcome.record_fatal(self.state or BootstrapState.VALIDATING, error)

    def _run_fatal_step(self, state: BootstrapState, callback: Callable, *args):
        self._enter(state)
        result = callback(*args)
        self.outcome.record(state, StepStatus.SUCCEEDED)
        return result

    def _run_tolerated_step(self, state: BootstrapState, callback: Callable, *args):
        self._enter(state)
        try:
            status, detail = callback(*args)
        except BootstrapError as exc:
            logger.warning("%s failed; continuing: %s", state.value, exc)
            self.console.print(
                f"[yellow]Warning:[/yellow] {state.value} failed; continuing."
            )
            self.outcome.record(state, StepStatus.FAILED_TOLERATED, str(exc))
            return
        self.outcome.record(state, status, detail)

    def validate(self) -> BootstrapConfig:
        config = self.validator.validate(**self.raw_params)
        if not os.path.isdir(config.code_path):
            logger.warning("Code path %s does not exist on this host.", config.code_path)
        self.config = config
        self.outcome.config = config
        return config

    def start_services(self):
        self.orchestrator.check_backend()
        return self.orchestrator.start(self.config)

    def wait_for_database(self):
        self.readiness_waiter.wait_for_database(self.config)

    def configure_debugger(self):
        result = self.debug_installer.ensure_installed(self.orchestrator.service(WEB_SERVICE))
        return result.status, "; ".join(result.notes) or None

    def restart_web(self):
        self.console.print("[blue]Enabling XDebug and restarting webserver...[/blue]")
        self.orchestrator.restart(self.orchestrator.service(WEB_SERVICE))
        return StepStatus.SUCCEEDED, None

    def initialize_database(self):
        status = self.database_initializer.run_if_requested(
            self.config,
            self.orchestrator.service(WEB_SERVICE),
        )
        detail = None if self.config.run_install else "install not requested"
        return status, detail

    def cleanup(self):
        """Interrupt hook. Containers are meant to outlive this process."""
        logger.debug("Leaving containers running.")

    def run(self) -> int:
        try:
            logger.info("Starting moodle-bootstrap...")

            self._run_fatal_step(BootstrapState.VALIDATING, self.validate)
            services = self._run_fatal_step(BootstrapState.STARTING, self.start_services)
            if services and not any(service.name == DB_SERVICE for service in services):
                logger.warning("No '%s' service reported by the backend.", DB_SERVICE)
            self._run_fatal_step(BootstrapState.WAITING_FOR_DATABASE, self.wait_for_database)

            self._run_tolerated_step(BootstrapState.CONFIGURING_DEBUGGER, self.configure_debugger)
            self._run_tolerated_step(BootstrapState.RESTARTING_WEB, self.restart_web)
            self._run_tolerated_step(BootstrapState.INITIALIZING_DATABASE, self.initialize_database)

        except KeyboardInterrupt:
            self.console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            self._record_fatal("Operation cancelled by user.")
            self.cleanup()
        except BootstrapError as exc:
            logger.error(str(exc))
            self._record_fatal(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error")
            self._record_fatal(f"Unexpected error: {exc}")
        finally:
            self._enter(BootstrapState.REPORTING)
            self.reporter.report(self.outcome)
            self._enter(BootstrapState.DONE)
            self.outcome.final_state = BootstrapState.DONE

        return self.outcome.exit_code
