"""Database readiness probing for moodle-bootstrap."""

import os

from moodlebootstrap.constants import WAIT_FOR_DB_SCRIPT
from moodlebootstrap.errors import (
    BootstrapError,
    CommandTimeoutError,
    ReadinessError,
    ReadinessTimeoutError,
)
from moodlebootstrap.errors_catalog import actionable_error
from moodlebootstrap.models import BootstrapConfig
from moodlebootstrap.services.docker_runtime import build_environment


class ReadinessWaiter:
    """Blocks until the database service accepts connections."""

    def __init__(self, logger, console, command_runner):
        self.logger = logger
        self.console = console
        self.command_runner = command_runner

    def wait_for_database(self, config: BootstrapConfig):
        self.console.print("[yellow]Waiting for database to start...[/yellow]")
        cmd = [os.path.join(config.docker_path, WAIT_FOR_DB_SCRIPT)]

        try:
            self.command_runner.run(
                cmd,
                check=True,
                capture_output=True,
                timeout=config.db_wait_timeout,
                env=build_environment(config),
                cwd=config.docker_path,
            )
        except CommandTimeoutError as exc:
            raise ReadinessTimeoutError(
                actionable_error("readiness_timeout", timeout=f"{config.db_wait_timeout:g}")
            ) from exc
        except BootstrapError as exc:
            raise ReadinessError(f"{actionable_error('readiness_failed')}\n{exc}") from exc

        self.console.print("[green]Database is ready.[/green]")
