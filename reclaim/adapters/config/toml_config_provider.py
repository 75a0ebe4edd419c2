"""TOML-based configuration provider.

Config loading priority (highest to lowest):
1. Command-line flags (applied by the CLI on top of the loaded config)
2. Config file: $RECLAIM_CONFIG or the platform config directory
3. Built-in defaults
"""

import logging
from pathlib import Path

from reclaim.domain.config import RunConfig
from reclaim.shared.config_io import get_global_config_path, load_config

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from a TOML file.

    Gracefully handles a missing or invalid config with warnings, falling
    back to built-in defaults.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path

    def load(self) -> RunConfig:
        """Load configuration, falling back to defaults.

        Returns:
            RunConfig from the config file, or defaults
        """
        path = self.path or get_global_config_path()
        if not path.exists():
            logger.debug("No config file at %s, using defaults", path)
            return RunConfig.default()

        try:
            config = load_config(path)
        except (FileNotFoundError, ValueError) as e:
            logger.warning(
                "Failed to load config at %s: %s. Using default configuration.",
                path,
                e,
            )
            return RunConfig.default()

        logger.debug("Loaded config from %s", path)
        return config
