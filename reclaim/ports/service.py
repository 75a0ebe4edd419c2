"""Port interface for OS service control."""

from typing import Protocol


class ServiceController(Protocol):
    """Protocol for stopping and starting a named OS service."""

    def stop(self, name: str) -> None:
        """Stop a service. A service that is already stopped counts as success.

        Raises:
            ServiceControlError: If the service manager refuses or fails.
        """
        ...

    def start(self, name: str) -> None:
        """Start a service. A service that is already running counts as success.

        Raises:
            ServiceControlError: If the service manager refuses or fails.
        """
        ...
