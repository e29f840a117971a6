"""Shared constants for moodle-bootstrap."""

SUPPORTED_DB_ENGINES = ("pgsql", "mariadb", "mssql", "mysql", "oracle")
DEFAULT_DB_ENGINE = "mysql"
DEFAULT_PROJECT = "docker-moodle"
DEFAULT_DOCKER_PATH = "/var/work/docker-moodle"
DEFAULT_DB_WAIT_TIMEOUT = 300.0
MIN_PORT = 1001
MAX_PORT = 65535

WEB_SERVICE = "webserver"
DB_SERVICE = "db"

COMPOSE_WRAPPER = "bin/moodle-docker-compose"
WAIT_FOR_DB_SCRIPT = "bin/moodle-docker-wait-for-db"
CONFIG_TEMPLATE = "config.docker-template.php"

DEBUG_EXTENSION = "xdebug"
DEBUG_EXTENSION_INI_PATH = "/usr/local/etc/php/conf.d/docker-php-ext-xdebug.ini"
# Written verbatim on every run.
DEBUG_EXTENSION_CONFIG = """; Settings for Xdebug Docker configuration
xdebug.mode=debug
xdebug.start_with_request=yes
xdebug.client_port=9003
xdebug.idekey=VSCODE
xdebug.discover_client_host=false
xdebug.client_host=host.docker.internal
xdebug.log=/var/log/xdebug.log
"""

INSTALL_DATABASE_COMMAND = [
    "php",
    "admin/cli/install_database.php",
    "--agree-license",
    "--fullname=Docker moodle",
    "--shortname=docker_moodle",
    "--summary=Docker moodle site",
    "--adminpass=test",
    "--adminemail=admin@example.com",
]
