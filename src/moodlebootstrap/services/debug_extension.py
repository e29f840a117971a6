"""Xdebug installation inside the web service."""

import re

from moodlebootstrap.constants import (
    DEBUG_EXTENSION,
    DEBUG_EXTENSION_CONFIG,
    DEBUG_EXTENSION_INI_PATH,
)
from moodlebootstrap.errors import ToleratedStepFailure
from moodlebootstrap.models import InstallResult, ServiceHandle, StepStatus

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def is_extension_loaded(module_listing: str, extension: str = DEBUG_EXTENSION) -> bool:
    """Checks ``php -m`` output for ``extension``.

    Output from ``docker compose exec`` may carry ``\\r`` and other control
    characters, so each line is stripped of them before a case-insensitive
    substring match.
    """
    needle = extension.lower()
    for line in module_listing.splitlines():
        if needle in _CONTROL_CHARS.sub("", line).strip().lower():
            return True
    return False


class DebugExtensionInstaller:
    """Makes sure Xdebug is installed, configured and enabled in the web service."""

    def __init__(self, logger, console, orchestrator, extension: str = DEBUG_EXTENSION):
        self.logger = logger
        self.console = console
        self.orchestrator = orchestrator
        self.extension = extension

    def is_installed(self, web_service: ServiceHandle) -> bool:
        output, exit_code = self.orchestrator.exec(web_service, ["php", "-m"])
        if exit_code != 0:
            self.logger.warning("Could not list PHP modules (exit code %s).", exit_code)
            return False
        return is_extension_loaded(output, self.extension)

    def ensure_installed(self, web_service: ServiceHandle) -> InstallResult:
        notes = []

        if self.is_installed(web_service):
            self.console.print("[dim]XDebug already installed; skipping...[/dim]")
            status = StepStatus.SKIPPED
            notes.append("already installed")
        else:
            self.console.print("[blue]Installing XDebug from PECL...[/blue]")
            status = StepStatus.SUCCEEDED
            _, exit_code = self.orchestrator.exec(web_service, ["pecl", "install", self.extension])
            if exit_code != 0:
                self.logger.warning(
                    "pecl install %s failed (exit code %s); continuing.",
                    self.extension,
                    exit_code,
                )
                notes.append(f"pecl install exited with {exit_code}")

        self.write_config(web_service)

        # Already-enabled warnings go to the captured output and are dropped.
        _, exit_code = self.orchestrator.exec(
            web_service, ["docker-php-ext-enable", self.extension]
        )
        if exit_code != 0:
            self.logger.warning(
                "docker-php-ext-enable %s exited with %s.", self.extension, exit_code
            )
            notes.append(f"docker-php-ext-enable exited with {exit_code}")

        return InstallResult(status=status, notes=tuple(notes))

    def write_config(self, web_service: ServiceHandle):
        """Overwrites the extension ini with the fixed configuration block."""
        self.console.print("[blue]Injecting XDebug config...[/blue]")
        _, exit_code = self.orchestrator.exec(
            web_service,
            ["bash", "-c", f"cat > {DEBUG_EXTENSION_INI_PATH}"],
            input_text=DEBUG_EXTENSION_CONFIG,
        )
        if exit_code != 0:
            raise ToleratedStepFailure(
                f"Could not write {DEBUG_EXTENSION_INI_PATH} (exit code {exit_code})."
            )
