import logging
import os

import click
from rich.console import Console
from rich.logging import RichHandler

from .constants import DEFAULT_DB_WAIT_TIMEOUT, DEFAULT_DOCKER_PATH, SUPPORTED_DB_ENGINES
from .core import BootstrapSequencer
from .errors import BootstrapError
from .models import OutputStyle
from .services.config_loader import ConfigLoader

DEFAULT_CONFIG_FILE = ".moodlebootstrap.yml"


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_level=False,
            show_path=False,
        )
    ],
)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("webport", required=False)
@click.option("-v", "--verbose", is_flag=True, default=None, help="Print script debug info.")
@click.option(
    "-i",
    "--install",
    is_flag=True,
    default=None,
    help="Run the Moodle CLI database install script.",
)
@click.option(
    "--code_path",
    "--code-path",
    "code_path",
    required=False,
    help="Path to the directory with the Moodle PHP code (typically /var/work/moodle).",
)
@click.option(
    "--dbengine",
    required=False,
    help=f"DB engine to spin up: {', '.join(SUPPORTED_DB_ENGINES)} (default: mysql).",
)
@click.option(
    "--dbport",
    required=False,
    help="Host port bound to the database. Not mapped by default.",
)
@click.option(
    "-p",
    "--project",
    required=False,
    help="Docker container prefix (default: docker-moodle).",
)
@click.option(
    "--vncport",
    required=False,
    help="Host port bound to the selenium VNC server (Behat). Not mapped by default.",
)
@click.option("--no-color", "no_color", is_flag=True, default=None, help="Disable colored output.")
@click.option(
    "--docker-path",
    required=False,
    type=click.Path(),
    help=f"Path to the moodle-docker checkout (default: {DEFAULT_DOCKER_PATH}).",
)
@click.option(
    "--db-timeout",
    required=False,
    help=f"Seconds to wait for the database; 0 = forever (default: {DEFAULT_DB_WAIT_TIMEOUT:g})",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    webport,
    verbose,
    install,
    code_path,
    dbengine,
    dbport,
    project,
    vncport,
    no_color,
    docker_path,
    db_timeout,
    config,
    log_file,
):
    """Start a local moodle-docker environment with XDebug enabled.

    WEBPORT is the host port bound to the web server (commonly 8000).
    """
    logger = logging.getLogger("moodlebootstrap")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BootstrapError as exc:
        raise click.ClickException(str(exc)) from exc

    webport = _resolve_option(webport, config_values, "webport")
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    install = bool(_resolve_option(install, config_values, "install", default=False))
    code_path = _resolve_option(code_path, config_values, "code_path")
    dbengine = _resolve_option(dbengine, config_values, "dbengine")
    dbport = _resolve_option(dbport, config_values, "dbport")
    project = _resolve_option(project, config_values, "project")
    vncport = _resolve_option(vncport, config_values, "vncport")
    no_color = bool(_resolve_option(no_color, config_values, "no_color", default=False))
    docker_path = _resolve_option(
        docker_path, config_values, "docker_path", default=DEFAULT_DOCKER_PATH
    )
    db_timeout = _resolve_option(
        db_timeout, config_values, "db_timeout", default=DEFAULT_DB_WAIT_TIMEOUT
    )
    log_file = _resolve_option(log_file, config_values, "log_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    style = OutputStyle.detect(no_color=no_color)
    sequencer = BootstrapSequencer(
        webport=webport,
        code_path=code_path,
        dbengine=dbengine,
        dbport=dbport,
        project=project,
        vncport=vncport,
        install=install,
        docker_path=docker_path,
        db_timeout=db_timeout,
        style=style,
        console=Console(stderr=True, no_color=not style.color),
    )

    raise SystemExit(sequencer.run())


if __name__ == "__main__":
    main()
