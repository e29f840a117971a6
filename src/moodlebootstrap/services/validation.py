"""Parameter validation for moodle-bootstrap."""

import math
import os
from typing import Any, Optional

from moodlebootstrap.constants import (
    DEFAULT_DB_ENGINE,
    DEFAULT_DB_WAIT_TIMEOUT,
    DEFAULT_DOCKER_PATH,
    DEFAULT_PROJECT,
    MAX_PORT,
    MIN_PORT,
    SUPPORTED_DB_ENGINES,
)
from moodlebootstrap.errors import ValidationError
from moodlebootstrap.models import BootstrapConfig


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ConfigValidator:
    """Turns raw parameter values into a ``BootstrapConfig``.

    Has no side effects: nothing is checked on disk or against Docker.
    """

    def validate(
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
    ) -> BootstrapConfig:
        if _is_blank(code_path):
            raise ValidationError("code_path", "missing")
        if _is_blank(webport):
            raise ValidationError("webport", "missing")

        return BootstrapConfig(
            web_port=self.parse_port("webport", webport),
            code_path=os.path.abspath(os.path.expanduser(str(code_path).strip())),
            db_engine=self.parse_db_engine(dbengine),
            db_port=self.parse_optional_port("dbport", dbport),
            project=self.parse_project(project),
            vnc_port=self.parse_optional_port("vncport", vncport),
            run_install=bool(install),
            docker_path=os.path.abspath(
                os.path.expanduser(str(docker_path).strip())
                if not _is_blank(docker_path)
                else DEFAULT_DOCKER_PATH
            ),
            db_wait_timeout=self.parse_timeout(db_timeout),
        )

    def parse_port(self, field: str, value: Any) -> int:
        if isinstance(value, bool):
            raise ValidationError(field, "not numeric")
        try:
            port = int(str(value).strip())
        except ValueError as exc:
            raise ValidationError(field, "not numeric") from exc

        if port < MIN_PORT or port > MAX_PORT:
            raise ValidationError(field, "out of range")
        return port

    def parse_optional_port(self, field: str, value: Any) -> Optional[int]:
        if _is_blank(value):
            return None
        return self.parse_port(field, value)

    def parse_db_engine(self, value: Any) -> str:
        if _is_blank(value):
            return DEFAULT_DB_ENGINE

        engine = str(value).strip().lower()
        if engine not in SUPPORTED_DB_ENGINES:
            raise ValidationError("dbengine", "unsupported")
        return engine

    def parse_project(self, value: Any) -> str:
        if _is_blank(value):
            return DEFAULT_PROJECT

        project = str(value)
        if any(char.isspace() for char in project):
            raise ValidationError("project", "contains whitespace")
        return project

    def parse_timeout(self, value: Any) -> Optional[float]:
        """Returns the readiness timeout in seconds, ``None`` meaning unbounded."""
        if _is_blank(value):
            return DEFAULT_DB_WAIT_TIMEOUT
        if isinstance(value, bool):
            raise ValidationError("db_timeout", "not numeric")
        try:
            timeout = float(value)
        except (TypeError, ValueError) as exc:
            raise ValidationError("db_timeout", "not numeric") from exc

        if not math.isfinite(timeout) or timeout < 0:
            raise ValidationError("db_timeout", "out of range")
        return timeout or None
