"""Factory classes for use case and adapter instantiation.

This module centralizes the creation of use cases and their dependencies,
keeping the CLI layer free from direct adapter imports. Imports are lazy so
that commands like --help never pay for loading psutil.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reclaim.core.reclaim.reclaim_usecase import ReclaimUseCase
    from reclaim.core.status.status_usecase import StatusUseCase
    from reclaim.domain.config import RunConfig
    from reclaim.ports.config import ConfigProvider
    from reclaim.ports.progress import StageReporter


class ConfigFactory:
    """Factory for configuration providers."""

    def create_config_provider(self, path: Path | None = None) -> ConfigProvider:
        """Create the TOML config provider.

        Args:
            path: Explicit config file path (default: platform config location).
        """
        from reclaim.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider(path)


class UseCaseFactory:
    """Factory for use cases wired to the real OS and server adapters."""

    def _create_server(self, config: RunConfig):
        from reclaim.adapters.ollama import OllamaCliServer

        return OllamaCliServer(executable=config.server_executable, port=config.port)

    def _create_inspector(self):
        from reclaim.adapters.net.psutil_inspector import PsutilPortInspector

        return PsutilPortInspector()

    def create_reclaim_usecase(
        self, config: RunConfig, reporter: StageReporter | None = None
    ) -> ReclaimUseCase:
        """Create the port reclamation use case.

        Args:
            config: Run configuration (selects executable and port).
            reporter: Receives per-stage status lines.

        Returns:
            ReclaimUseCase ready to execute.
        """
        from reclaim.adapters.service.system_service import SystemServiceController
        from reclaim.core.reclaim import ReclaimUseCase

        inspector = self._create_inspector()
        return ReclaimUseCase(
            server=self._create_server(config),
            inspector=inspector,
            terminator=inspector,
            services=SystemServiceController(),
            reporter=reporter,
        )

    def create_status_usecase(self, config: RunConfig) -> StatusUseCase:
        """Create the read-only status use case."""
        from reclaim.core.status.status_usecase import StatusUseCase

        return StatusUseCase(
            server=self._create_server(config),
            inspector=self._create_inspector(),
        )
