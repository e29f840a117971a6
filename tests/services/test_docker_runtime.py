import subprocess

import pytest

from moodlebootstrap.errors import BackendUnavailableError, BootstrapError
from moodlebootstrap.models import BootstrapConfig, ServiceHandle
from moodlebootstrap.services.docker_runtime import ServiceOrchestrator, build_environment


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeFileSystem:
    def __init__(self):
        self.copies = []

    def copy_config_template(self, docker_path, code_path):
        self.copies.append((docker_path, code_path))


class FakeRunner:
    def __init__(self, results=None):
        self.calls = []
        self.results = results or {}

    def run(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        for key, value in self.results.items():
            if key in cmd:
                if isinstance(value, Exception):
                    raise value
                return value
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


def _config(tmp_path, **overrides) -> BootstrapConfig:
    values = {
        "web_port": 8000,
        "code_path": "/srv/app",
        "docker_path": str(tmp_path),
    }
    values.update(overrides)
    return BootstrapConfig(**values)


def _wrapper(tmp_path):
    wrapper = tmp_path / "bin" / "moodle-docker-compose"
    wrapper.parent.mkdir(parents=True)
    wrapper.write_text("#!/bin/sh\n", encoding="utf-8")
    return wrapper


def _orchestrator(runner, filesystem=None):
    return ServiceOrchestrator(
        logger=DummyLogger(),
        console=DummyConsole(),
        command_runner=runner,
        filesystem_service=filesystem or FakeFileSystem(),
    )


def test_build_environment_sets_only_given_ports(tmp_path):
    env = build_environment(_config(tmp_path, project="demo"), base={"PATH": "/bin"})

    assert env == {
        "PATH": "/bin",
        "COMPOSE_PROJECT_NAME": "demo",
        "MOODLE_DOCKER_WEB_PORT": "8000",
        "MOODLE_DOCKER_WWWROOT": "/srv/app",
        "MOODLE_DOCKER_DB": "mysql",
    }


def test_build_environment_wires_engine_and_optional_ports(tmp_path):
    config = _config(tmp_path, db_engine="pgsql", db_port=15432, vnc_port=5900)

    env = build_environment(config, base={})

    assert env["MOODLE_DOCKER_DB"] == "pgsql"
    assert env["MOODLE_DOCKER_DB_PORT"] == "15432"
    assert env["MOODLE_DOCKER_SELENIUM_VNC_PORT"] == "5900"


def test_check_backend_raises_when_docker_is_down():
    down = subprocess.CompletedProcess(["docker", "ps"], 1, stdout="", stderr="")
    runner = FakeRunner({"ps": down})

    with pytest.raises(BackendUnavailableError, match="Docker does not appear to be running"):
        _orchestrator(runner).check_backend()


def test_check_backend_raises_when_docker_is_missing():
    runner = FakeRunner({"ps": BootstrapError("Required command not found: docker.")})

    with pytest.raises(BackendUnavailableError):
        _orchestrator(runner).check_backend()


def test_start_requires_compose_wrapper(tmp_path):
    runner = FakeRunner()

    with pytest.raises(BackendUnavailableError, match="compose wrapper not found"):
        _orchestrator(runner).start(_config(tmp_path))

    assert runner.calls == []


def test_start_copies_template_and_returns_running_services(tmp_path):
    wrapper = _wrapper(tmp_path)
    listing = subprocess.CompletedProcess([], 0, stdout="db\r\nwebserver\n\n", stderr="")
    runner = FakeRunner({"--services": listing})
    filesystem = FakeFileSystem()
    config = _config(tmp_path, project="demo")

    services = _orchestrator(runner, filesystem).start(config)

    assert services == {ServiceHandle("db", "demo"), ServiceHandle("webserver", "demo")}
    assert filesystem.copies == [(str(tmp_path), "/srv/app")]
    up_cmd, up_kwargs = runner.calls[0]
    assert up_cmd == [str(wrapper), "up", "-d"]
    assert up_kwargs["cwd"] == str(tmp_path)
    assert up_kwargs["env"]["COMPOSE_PROJECT_NAME"] == "demo"


def test_start_failure_is_reported_with_project(tmp_path):
    _wrapper(tmp_path)
    runner = FakeRunner({"up": BootstrapError("Command failed (1)")})

    with pytest.raises(BootstrapError, match="Could not start the docker-moodle containers"):
        _orchestrator(runner).start(_config(tmp_path))


def test_exec_returns_exit_code_instead_of_raising(tmp_path):
    wrapper = _wrapper(tmp_path)
    failure = subprocess.CompletedProcess([], 7, stdout="partial", stderr="boom")
    runner = FakeRunner({"pecl": failure})
    orchestrator = _orchestrator(runner)
    orchestrator.start(_config(tmp_path))

    output, exit_code = orchestrator.exec(
        orchestrator.service("webserver"), ["pecl", "install", "xdebug"]
    )

    assert (output, exit_code) == ("partial", 7)
    cmd, kwargs = runner.calls[-1]
    assert cmd == [str(wrapper), "exec", "-T", "webserver", "pecl", "install", "xdebug"]
    assert kwargs["check"] is False


def test_restart_raises_on_failure(tmp_path):
    _wrapper(tmp_path)
    runner = FakeRunner({"restart": BootstrapError("Command failed (1)")})
    orchestrator = _orchestrator(runner)
    orchestrator.start(_config(tmp_path))

    with pytest.raises(BootstrapError):
        orchestrator.restart(orchestrator.service("webserver"))


def test_exec_before_start_is_an_error():
    orchestrator = _orchestrator(FakeRunner())

    with pytest.raises(BootstrapError, match="not been started"):
        orchestrator.exec(ServiceHandle("webserver", "demo"), ["php", "-m"])
