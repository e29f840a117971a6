"""Docker runtime services for moodle-bootstrap."""

import os
from typing import Dict, List, Mapping, Optional, Set, Tuple

from moodlebootstrap.constants import COMPOSE_WRAPPER
from moodlebootstrap.errors import BackendUnavailableError, BootstrapError
from moodlebootstrap.errors_catalog import actionable_error
from moodlebootstrap.models import BootstrapConfig, ServiceHandle


def build_environment(
    config: BootstrapConfig, base: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Process environment through which moodle-docker is configured."""
    env = dict(os.environ if base is None else base)
    env.update(
        {
            "COMPOSE_PROJECT_NAME": config.project,
            "MOODLE_DOCKER_WEB_PORT": str(config.web_port),
            "MOODLE_DOCKER_WWWROOT": config.code_path,
            "MOODLE_DOCKER_DB": config.db_engine,
        }
    )
    if config.db_port is not None:
        env["MOODLE_DOCKER_DB_PORT"] = str(config.db_port)
    if config.vnc_port is not None:
        env["MOODLE_DOCKER_SELENIUM_VNC_PORT"] = str(config.vnc_port)
    return env


class ServiceOrchestrator:
    """Starts, execs into and restarts services through the moodle-docker wrapper."""

    def __init__(self, logger, console, command_runner, filesystem_service):
        self.logger = logger
        self.console = console
        self.command_runner = command_runner
        self.filesystem_service = filesystem_service
        self.config: Optional[BootstrapConfig] = None

    def compose_cmd(self, config: BootstrapConfig) -> List[str]:
        return [os.path.join(config.docker_path, COMPOSE_WRAPPER)]

    def check_backend(self):
        self.console.print("[blue]Checking Docker daemon...[/blue]")
        try:
            result = self.command_runner.run(["docker", "ps"], check=False, capture_output=True)
        except BootstrapError as exc:
            raise BackendUnavailableError(actionable_error("backend_unavailable")) from exc

        if result.returncode != 0:
            raise BackendUnavailableError(actionable_error("backend_unavailable"))

    def start(self, config: BootstrapConfig) -> Set[ServiceHandle]:
        wrapper = self.compose_cmd(config)[0]
        if not os.path.isfile(wrapper):
            raise BackendUnavailableError(actionable_error("compose_wrapper_missing", path=wrapper))

        self.filesystem_service.copy_config_template(config.docker_path, config.code_path)
        self.config = config

        self.console.print("[blue]Starting containers...[/blue]")
        try:
            self._compose(["up", "-d"])
        except BootstrapError as exc:
            raise BootstrapError(
                f"{actionable_error('start_failed', project=config.project)}\n{exc}"
            ) from exc

        listing = self._compose(["ps", "--services"], check=False, capture_output=True)
        services = {
            ServiceHandle(name=line.strip(), project=config.project)
            for line in (listing.stdout or "").splitlines()
            if line.strip()
        }
        self.logger.info("Running services: %s", ", ".join(sorted(s.name for s in services)))
        return services

    def exec(
        self,
        service: ServiceHandle,
        command: List[str],
        input_text: Optional[str] = None,
    ) -> Tuple[str, int]:
        """Runs ``command`` inside ``service``; a non-zero exit is returned, not raised."""
        result = self._compose(
            ["exec", "-T", service.name] + list(command),
            check=False,
            capture_output=True,
            input_text=input_text,
        )
        return result.stdout or "", result.returncode

    def restart(self, service: ServiceHandle):
        self._compose(["restart", service.name], capture_output=True)

    def service(self, name: str) -> ServiceHandle:
        return ServiceHandle(name=name, project=self._require_config().project)

    def _require_config(self) -> BootstrapConfig:
        if self.config is None:
            raise BootstrapError("Services have not been started yet.")
        return self.config

    def _compose(self, args: List[str], check: bool = True, capture_output: bool = False, **kwargs):
        config = self._require_config()
        return self.command_runner.run(
            self.compose_cmd(config) + args,
            check=check,
            capture_output=capture_output,
            env=build_environment(config),
            cwd=config.docker_path,
            **kwargs,
        )
