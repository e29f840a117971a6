"""Actionable error catalog for moodle-bootstrap."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "backend_unavailable": {
        "what": "Docker does not appear to be running; aborting startup.",
        "next": "Start the Docker daemon and check that `docker ps` works for your user.",
    },
    "compose_wrapper_missing": {
        "what": "moodle-docker compose wrapper not found: {path}",
        "next": "Clone moodle-docker there or point `--docker-path` at your checkout.",
    },
    "template_missing": {
        "what": "Config template not found: {path}",
        "next": "Check that `--docker-path` points at a moodle-docker checkout.",
    },
    "start_failed": {
        "what": "Could not start the {project} containers.",
        "next": "Run `bin/moodle-docker-compose logs` in the moodle-docker checkout.",
    },
    "readiness_timeout": {
        "what": "Database did not become ready within {timeout}s.",
        "next": "Inspect the `db` container logs or raise `--db-timeout`.",
    },
    "readiness_failed": {
        "what": "Database readiness probe failed.",
        "next": "Inspect the `db` container logs and retry.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
