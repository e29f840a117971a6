"""Filesystem helpers for moodle-bootstrap."""

import logging
import os
import shutil

from rich.console import Console

from moodlebootstrap.constants import CONFIG_TEMPLATE
from moodlebootstrap.errors import BootstrapError
from moodlebootstrap.errors_catalog import actionable_error


class FileSystemService:
    """Encapsulates file side effects on the host."""

    def __init__(self, logger: logging.Logger, console: Console):
        self.logger = logger
        self.console = console

    def copy_config_template(self, docker_path: str, code_path: str) -> str:
        """Copies the moodle-docker config template to ``<code_path>/config.php``.

        Any existing ``config.php`` is replaced.
        """
        template = os.path.join(docker_path, CONFIG_TEMPLATE)
        if not os.path.isfile(template):
            raise BootstrapError(actionable_error("template_missing", path=template))

        destination = os.path.join(code_path, "config.php")
        try:
            shutil.copyfile(template, destination)
        except OSError as exc:
            raise BootstrapError(f"Could not copy {template} to {destination}: {exc}") from exc

        self.logger.debug("Copied %s to %s", template, destination)
        return destination
