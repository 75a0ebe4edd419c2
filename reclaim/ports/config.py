"""Configuration provider port.

Defines the interface for loading application configuration.
"""

from typing import Protocol

from reclaim.domain.config import RunConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self) -> RunConfig:
        """Load the run configuration.

        Returns:
            RunConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if the config file is missing or invalid.
        """
        ...
