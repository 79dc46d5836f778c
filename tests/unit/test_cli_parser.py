from pathlib import Path
import runpy
import sys

import pytest

import backup_and_sync.cli as cli_module
import backup_and_sync.commands.factory as factory_module
from backup_and_sync.cli import CliApplication
from backup_and_sync.commands.base import Command
from backup_and_sync.core.errors import ConfigError, JobError, JobFailedError


class FakeCommand(Command):
    def __init__(self, result: int = 0, error: Exception | None = None) -> None:
        self.result = result
        self.error = error

    def run(self) -> int:
        if self.error is not None:
            raise self.error
        return self.result


class FakeFactory:
    def __init__(self, command: Command | None = None, error: Exception | None = None) -> None:
        self.command = command or FakeCommand()
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    def create(self, action: str, config_path: str | None) -> Command:
        self.calls.append((action, config_path))
        if self.error is not None:
            raise self.error
        return self.command


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "setup_logging", lambda *args, **kwargs: None)


def test_build_parser_defaults_to_run(tmp_path: Path) -> None:
    args = CliApplication(tmp_path).build_parser().parse_args([])

    assert args.action == "run"
    assert args.config is None
    assert args.log_level == "INFO"
    assert args.log_file is None


def test_build_parser_accepts_all_actions_and_options(tmp_path: Path) -> None:
    parser = CliApplication(tmp_path).build_parser()

    for action in ["run", "backup", "restic", "rclone"]:
        assert parser.parse_args([action]).action == action

    args = parser.parse_args(
        ["rclone", "--config", "/etc/backup.yaml", "--log-level", "debug", "--log-file", "/tmp/b.log"]
    )
    assert args.config == "/etc/backup.yaml"
    assert args.log_level == "DEBUG"
    assert args.log_file == Path("/tmp/b.log")


def test_build_parser_rejects_unknown_action(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        CliApplication(tmp_path).build_parser().parse_args(["restore"])


def test_version_flag_prints_version(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    with pytest.raises(SystemExit) as exc:
        CliApplication(tmp_path).run(["--version"])

    assert exc.value.code == 0
    assert capsys.readouterr().out.startswith("backup-and-sync version ")


def test_run_invokes_factory_and_command(tmp_path: Path) -> None:
    app = CliApplication(tmp_path)
    factory = FakeFactory(FakeCommand(result=0))
    app._factory = factory  # type: ignore[assignment]

    result = app.run(["--config", "/tmp/integration.yaml"])

    assert result == 0
    assert factory.calls == [("run", "/tmp/integration.yaml")]


def test_run_returns_one_when_config_cannot_be_loaded(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    app = CliApplication(tmp_path)
    app._factory = FakeFactory(error=ConfigError("Config file not found: x"))  # type: ignore[assignment]

    assert app.run([]) == 1
    assert "Reading config file failed: Config file not found: x" in caplog.text


def test_run_returns_one_when_a_job_aborts(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    failure = JobFailedError("restic", "backup", JobError("restic exec failed: exit status 1"))
    app = CliApplication(tmp_path)
    app._factory = FakeFactory(FakeCommand(error=failure))  # type: ignore[assignment]

    assert app.run(["restic"]) == 1
    assert "restic execution failed: run backup job failed" in caplog.text


def test_main_uses_working_directory(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    observed: dict[str, Path] = {}

    class AppStub:
        def __init__(self, search_dir: Path) -> None:
            observed["search_dir"] = search_dir

        def run(self) -> int:
            return 13

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_module, "CliApplication", AppStub)

    assert cli_module.main() == 13
    assert observed["search_dir"] == tmp_path


def test_cli_module_main_guard_executes(monkeypatch: pytest.MonkeyPatch) -> None:
    observed: list[tuple[str, str | None]] = []

    class FactorySpy:
        def __init__(self, search_dir: Path) -> None:
            _ = search_dir

        def create(self, action: str, config_path: str | None) -> Command:
            observed.append((action, config_path))
            return FakeCommand()

    monkeypatch.setattr(factory_module, "CommandFactory", FactorySpy)
    monkeypatch.setattr(sys, "argv", ["backup-and-sync", "rclone", "--log-level", "WARNING"])
    monkeypatch.delitem(sys.modules, "backup_and_sync.cli", raising=False)

    with pytest.raises(SystemExit) as exc:
        runpy.run_module("backup_and_sync.cli", run_name="__main__")

    assert exc.value.code == 0
    assert observed == [("rclone", None)]
