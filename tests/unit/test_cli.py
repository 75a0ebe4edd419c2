"""Unit tests for the reclaim CLI commands."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from reclaim.core.status.status_usecase import StatusResponse
from reclaim.domain.entities import PortOccupant, ProbeStatus, RunOutcome, Stage
from reclaim.entrypoints.cli import EXIT_LAUNCH_UNVERIFIED, cli
from tests.helpers import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
    assert_success_indicator,
)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def factory():
    """Patch the use case factory; tests set the outcome on the returned mock."""
    with patch("reclaim.adapters.factory.UseCaseFactory") as mock_factory_cls:
        yield mock_factory_cls.return_value


def set_outcome(factory: MagicMock, outcome: RunOutcome) -> MagicMock:
    usecase = factory.create_reclaim_usecase.return_value
    usecase.execute.return_value = outcome
    return usecase


class TestRunCommand:
    """Tests for 'reclaim run'."""

    def test_already_satisfied(self, runner: CliRunner, factory: MagicMock) -> None:
        set_outcome(factory, RunOutcome.already_satisfied())

        result = runner.invoke(cli, ["run"], obj={})

        assert_command_success(result)
        assert_success_indicator(result)
        assert_output_contains(result, "Nothing to reclaim")

    def test_succeeded(self, runner: CliRunner, factory: MagicMock) -> None:
        set_outcome(factory, RunOutcome.succeeded())

        result = runner.invoke(cli, ["run"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "Port reclaimed and server restarted")

    def test_succeeded_with_warning_still_exits_zero(
        self, runner: CliRunner, factory: MagicMock
    ) -> None:
        set_outcome(factory, RunOutcome.succeeded().with_warning("could not restart"))

        result = runner.invoke(cli, ["run"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "1 warning(s)")

    def test_aborted_exits_one_with_stage(self, runner: CliRunner, factory: MagicMock) -> None:
        set_outcome(
            factory,
            RunOutcome.aborted(
                "port held by foreign process", Stage.RESOLVE, hint="Port is held by 'chrome'"
            ),
        )

        result = runner.invoke(cli, ["run"], obj={})

        assert_command_failed(result)
        assert_output_contains(result, "Aborted during resolve: port held by foreign process")
        assert_error_message(result, hint="chrome")

    def test_launch_unverified_exits_three(self, runner: CliRunner, factory: MagicMock) -> None:
        set_outcome(factory, RunOutcome.launch_unverified("server did not respond within 5s"))

        result = runner.invoke(cli, ["run"], obj={})

        assert result.exit_code == EXIT_LAUNCH_UNVERIFIED
        assert_output_contains(result, "not verified")

    def test_flags_override_defaults(self, runner: CliRunner, factory: MagicMock) -> None:
        usecase = set_outcome(factory, RunOutcome.succeeded())

        result = runner.invoke(
            cli,
            [
                "run",
                "-p",
                "8080",
                "-r",
                "mistral",
                "--wait-timeout-seconds",
                "3",
                "--ollama-startup-delay",
                "0",
                "--service-name",
                "hns",
            ],
            obj={},
        )

        assert_command_success(result)
        config = usecase.execute.call_args[0][0]
        assert config.port == 8080
        assert config.required_model == "mistral"
        assert config.wait_timeout_seconds == 3
        assert config.startup_delay_seconds == 0
        assert config.service_name == "hns"

    def test_config_file_supplies_defaults(
        self, runner: CliRunner, factory: MagicMock, isolated_config_path: Path
    ) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nport = 9000\nrequired_model = \"llava\"\n")
        usecase = set_outcome(factory, RunOutcome.succeeded())

        result = runner.invoke(cli, ["run", "-r", "mistral"], obj={})

        assert_command_success(result)
        config = usecase.execute.call_args[0][0]
        assert config.port == 9000
        assert config.required_model == "mistral"

    def test_verbose_flag_sets_config(self, runner: CliRunner, factory: MagicMock) -> None:
        usecase = set_outcome(factory, RunOutcome.succeeded())

        result = runner.invoke(cli, ["run", "-v"], obj={})

        assert_command_success(result)
        assert usecase.execute.call_args[0][0].verbose is True

    @pytest.mark.parametrize(
        "args",
        [
            ["-p", "0"],
            ["-p", "70000"],
            ["--wait-timeout-seconds", "0"],
            ["--ollama-startup-delay", "-1"],
        ],
    )
    def test_rejects_invalid_values(
        self, runner: CliRunner, factory: MagicMock, args: list[str]
    ) -> None:
        result = runner.invoke(cli, ["run", *args], obj={})

        assert result.exit_code == 2
        factory.create_reclaim_usecase.assert_not_called()

    def test_blank_model_is_invalid_config(self, runner: CliRunner, factory: MagicMock) -> None:
        result = runner.invoke(cli, ["run", "-r", " "], obj={})

        assert_command_failed(result)
        assert_output_contains(result, "Invalid configuration")

    def test_domain_error_becomes_cli_error(self, runner: CliRunner, factory: MagicMock) -> None:
        from reclaim.domain.exceptions import ModelServerError

        factory.create_reclaim_usecase.side_effect = ModelServerError("boom", hint="fix it")

        result = runner.invoke(cli, ["run"], obj={})

        assert_command_failed(result)
        assert_error_message(result, hint="fix it")

    def test_unexpected_error_is_wrapped(self, runner: CliRunner, factory: MagicMock) -> None:
        factory.create_reclaim_usecase.side_effect = KeyError("x")

        result = runner.invoke(cli, ["run"], obj={})

        assert_command_failed(result)
        assert_output_contains(result, "Unexpected error in run")


class TestStatusCommand:
    """Tests for 'reclaim status'."""

    def test_shows_occupant_and_plan(self, runner: CliRunner, factory: MagicMock) -> None:
        factory.create_status_usecase.return_value.execute.return_value = StatusResponse(
            port=11434,
            probe=ProbeStatus.RUNNING_WITHOUT_MODEL,
            occupant=PortOccupant(pid=4321, name="ollama"),
            occupant_is_server=True,
        )

        result = runner.invoke(cli, ["status"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "running without 'llama3.2-vision'")
        assert_output_contains(result, "ollama (PID 4321, model server)")
        assert_output_contains(result, "terminate server")

    def test_not_responding_free_port(self, runner: CliRunner, factory: MagicMock) -> None:
        factory.create_status_usecase.return_value.execute.return_value = StatusResponse(
            port=8080, probe=ProbeStatus.NOT_RESPONDING
        )

        result = runner.invoke(cli, ["status", "-p", "8080"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "not responding")
        assert_output_contains(result, "Listener: none")
        assert factory.create_status_usecase.call_args[0][0].port == 8080


class TestConfigCommands:
    """Tests for 'reclaim config'."""

    def test_path(self, runner: CliRunner, isolated_config_path: Path) -> None:
        result = runner.invoke(cli, ["config", "path"], obj={})

        assert_command_success(result)
        assert result.output.strip() == str(isolated_config_path)

    def test_show_not_created(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["config", "show"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "(not created)")
        assert_output_contains(result, "port = 11434")
        assert_output_contains(result, "service_name = 'winnat'")

    def test_init_writes_defaults(self, runner: CliRunner, isolated_config_path: Path) -> None:
        result = runner.invoke(cli, ["config", "init"], obj={})

        assert_command_success(result)
        assert isolated_config_path.exists()
        assert "[run]" in isolated_config_path.read_text()

    def test_init_refuses_overwrite(self, runner: CliRunner, isolated_config_path: Path) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nport = 9000\n")

        result = runner.invoke(cli, ["config", "init"], obj={})

        assert_command_failed(result)
        assert_output_contains(result, "Config file already exists")
        assert_error_message(result, hint="--force")
        assert "9000" in isolated_config_path.read_text()

    def test_init_force_overwrites(self, runner: CliRunner, isolated_config_path: Path) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nport = 9000\n")

        result = runner.invoke(cli, ["config", "init", "--force"], obj={})

        assert_command_success(result)
        assert "port = 11434" in isolated_config_path.read_text()

    def test_show_reflects_file(self, runner: CliRunner, isolated_config_path: Path) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nport = 9000\n")

        result = runner.invoke(cli, ["config", "show"], obj={})

        assert_output_contains(result, "(exists)")
        assert_output_contains(result, "port = 9000")

    def test_show_falls_back_to_defaults_with_warning(
        self, runner: CliRunner, isolated_config_path: Path
    ) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nport = 0\n")

        result = runner.invoke(cli, ["config", "show"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "Using default configuration")
        assert_output_contains(result, "port must be between 1 and 65535")
        assert_output_contains(result, "port = 11434")

    def test_show_wrong_value_type_falls_back_to_defaults(
        self, runner: CliRunner, isolated_config_path: Path
    ) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nrequired_model = 5\n")

        result = runner.invoke(cli, ["config", "show"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "required_model must be of type str")
        assert_output_contains(result, "required_model = 'llama3.2-vision'")
        assert "Unexpected error" not in result.output

    def test_show_warns_about_unknown_keys(
        self, runner: CliRunner, isolated_config_path: Path
    ) -> None:
        isolated_config_path.parent.mkdir(parents=True)
        isolated_config_path.write_text("[run]\nport = 9000\ncolour = 'blue'\n")

        result = runner.invoke(cli, ["config", "show"], obj={})

        assert_command_success(result)
        assert_output_contains(result, "colour")
        assert_output_contains(result, "port = 9000")
