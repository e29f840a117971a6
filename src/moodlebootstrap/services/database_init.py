"""Moodle database installation step."""

from moodlebootstrap.constants import INSTALL_DATABASE_COMMAND
from moodlebootstrap.models import BootstrapConfig, ServiceHandle, StepStatus


class DatabaseInitializer:
    """Runs Moodle's CLI database installer when asked to.

    The installer detects an existing installation and exits non-zero, so
    every failure is logged and reported as tolerated.
    """

    def __init__(self, logger, console, orchestrator):
        self.logger = logger
        self.console = console
        self.orchestrator = orchestrator

    def run_if_requested(self, config: BootstrapConfig, web_service: ServiceHandle) -> StepStatus:
        if not config.run_install:
            self.logger.debug("Database install not requested.")
            return StepStatus.SKIPPED

        self.console.print("[blue]Running init scripts...[/blue]")
        output, exit_code = self.orchestrator.exec(web_service, INSTALL_DATABASE_COMMAND)
        if exit_code != 0:
            self.logger.warning(
                "Database install exited with %s (the site may already be installed).\n%s",
                exit_code,
                output.strip(),
            )
            return StepStatus.FAILED_TOLERATED

        self.console.print("[green]Moodle database installed.[/green]")
        return StepStatus.SUCCEEDED
