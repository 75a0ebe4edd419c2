"""Port interfaces for OS process and socket inspection."""

from typing import Protocol

from reclaim.domain.entities import PortOccupant


class PortInspector(Protocol):
    """Protocol for mapping a local TCP port to its listening process."""

    def find_occupant(self, port: int) -> PortOccupant | None:
        """Find the process listening on a local TCP port.

        Args:
            port: Local TCP port number.

        Returns:
            The listening process, or None if nothing listens on the port.
        """
        ...


class ProcessTerminator(Protocol):
    """Protocol for forcibly stopping a process."""

    def terminate(self, pid: int) -> None:
        """Forcibly stop a process, without a grace period.

        A process that has already exited counts as terminated.

        Args:
            pid: Process ID to stop.

        Raises:
            TerminationError: If the process exists but cannot be stopped.
        """
        ...
