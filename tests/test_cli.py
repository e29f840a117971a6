from click.testing import CliRunner

import moodlebootstrap.cli as cli_module


def _fake_sequencer(captured, exit_code=0):
    class FakeSequencer:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def run(self):
            return exit_code

    return FakeSequencer


def test_cli_passes_parameters_through(monkeypatch):
    captured = {}
    monkeypatch.setattr(cli_module, "BootstrapSequencer", _fake_sequencer(captured))

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        [
            "--code_path",
            "/srv/app",
            "--dbengine",
            "pgsql",
            "--dbport",
            "15432",
            "-p",
            "moodle401",
            "--vncport",
            "5900",
            "-i",
            "--no-color",
            "8000",
        ],
    )

    assert result.exit_code == 0
    assert captured["webport"] == "8000"
    assert captured["code_path"] == "/srv/app"
    assert captured["dbengine"] == "pgsql"
    assert captured["dbport"] == "15432"
    assert captured["project"] == "moodle401"
    assert captured["vncport"] == "5900"
    assert captured["install"] is True
    assert captured["style"].color is False


def test_cli_uses_config_and_allows_cli_override(tmp_path, monkeypatch):
    config_file = tmp_path / "bootstrap.yml"
    config_file.write_text(
        "code_path: /var/work/moodle\n" "webport: 8000\n" "dbengine: mariadb\n" "db_timeout: 60\n",
        encoding="utf-8",
    )
    captured = {}
    monkeypatch.setattr(cli_module, "BootstrapSequencer", _fake_sequencer(captured))

    result = CliRunner().invoke(
        cli_module.main,
        ["--config", str(config_file), "--dbengine", "pgsql", "9000"],
    )

    assert result.exit_code == 0
    assert captured["webport"] == "9000"
    assert captured["code_path"] == "/var/work/moodle"
    assert captured["dbengine"] == "pgsql"
    assert captured["db_timeout"] == 60
    assert captured["install"] is False


def test_cli_uses_default_config_file_when_present(tmp_path, monkeypatch):
    (tmp_path / ".moodlebootstrap.yml").write_text(
        "code_path: /srv/app\nwebport: 8100\ninstall: true\n",
        encoding="utf-8",
    )
    captured = {}
    monkeypatch.setattr(cli_module, "BootstrapSequencer", _fake_sequencer(captured))
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 0
    assert captured["webport"] == 8100
    assert captured["install"] is True


def test_cli_exits_with_sequencer_code(monkeypatch):
    monkeypatch.setattr(cli_module, "BootstrapSequencer", _fake_sequencer({}, exit_code=1))

    result = CliRunner().invoke(cli_module.main, ["--code_path", "/srv/app", "8000"])

    assert result.exit_code == 1


def test_cli_missing_code_path_exits_one(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = CliRunner().invoke(cli_module.main, ["8000"])

    assert result.exit_code == 1


def test_cli_rejects_bad_config_file(tmp_path):
    config_file = tmp_path / "bootstrap.yml"
    config_file.write_text("webserver: nginx\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["--config", str(config_file), "8000"])

    assert result.exit_code == 1
    assert "Unknown configuration keys" in result.output


def test_cli_help_lists_options():
    result = CliRunner().invoke(cli_module.main, ["-h"])

    assert result.exit_code == 0
    assert "--code_path" in result.output
    assert "--vncport" in result.output
