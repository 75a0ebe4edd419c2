"""Unit tests for use case and adapter wiring."""

from unittest.mock import patch

from reclaim.adapters.config.toml_config_provider import TomlConfigProvider
from reclaim.adapters.factory import ConfigFactory, UseCaseFactory
from reclaim.adapters.net.psutil_inspector import PsutilPortInspector
from reclaim.adapters.ollama import OllamaCliServer
from reclaim.core.reclaim import ReclaimUseCase
from reclaim.core.status.status_usecase import StatusUseCase
from reclaim.domain.config import RunConfig


class TestConfigFactory:
    def test_creates_toml_provider(self, tmp_path) -> None:
        provider = ConfigFactory().create_config_provider(tmp_path / "c.toml")

        assert isinstance(provider, TomlConfigProvider)
        assert provider.path == tmp_path / "c.toml"


class TestUseCaseFactory:
    """Tests for wiring the real adapters."""

    def test_server_uses_configured_executable_and_port(self) -> None:
        server = UseCaseFactory()._create_server(
            RunConfig(port=8080, server_executable="/opt/ollama")
        )

        assert isinstance(server, OllamaCliServer)
        assert server.executable == "/opt/ollama"
        assert server.port == 8080

    def test_creates_reclaim_usecase(self) -> None:
        usecase = UseCaseFactory().create_reclaim_usecase(RunConfig.default())

        assert isinstance(usecase, ReclaimUseCase)

    def test_creates_status_usecase(self) -> None:
        usecase = UseCaseFactory().create_status_usecase(RunConfig.default())

        assert isinstance(usecase, StatusUseCase)

    def test_inspector_is_psutil(self) -> None:
        assert isinstance(UseCaseFactory()._create_inspector(), PsutilPortInspector)

    def test_wiring_makes_no_external_calls(self) -> None:
        """Creating use cases must not touch the OS."""
        with patch("subprocess.run") as mock_run, patch("subprocess.Popen") as mock_popen:
            UseCaseFactory().create_reclaim_usecase(RunConfig.default())

        mock_run.assert_not_called()
        mock_popen.assert_not_called()
