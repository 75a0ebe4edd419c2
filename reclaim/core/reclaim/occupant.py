"""Port occupant resolution and the termination safety rule."""

import logging

from reclaim.domain.entities import PortOccupant
from reclaim.domain.exceptions import ForeignOccupantError
from reclaim.ports.network import PortInspector, ProcessTerminator

logger = logging.getLogger(__name__)


class PortOccupantResolver:
    """Maps a TCP port to its occupant and clears it if it is the server."""

    def __init__(self, inspector: PortInspector, terminator: ProcessTerminator) -> None:
        self._inspector = inspector
        self._terminator = terminator

    def resolve(self, port: int) -> PortOccupant | None:
        """Look up the current listener on a port. Never cached."""
        logger.debug("Looking up listener on port %d", port)
        occupant = self._inspector.find_occupant(port)
        if occupant is None:
            logger.debug("No listener on port %d", port)
        else:
            logger.debug(f"Port {port} held by {occupant.name} (PID {occupant.pid})")
        return occupant

    def is_occupied(self, port: int) -> bool:
        return self.resolve(port) is not None

    def terminate_if_own(self, occupant: PortOccupant, expected_name: str) -> None:
        """Terminate the occupant, but only if it is the target server.

        Args:
            occupant: Process found listening on the port.
            expected_name: Process name of the target server.

        Raises:
            ForeignOccupantError: If the occupant is some other process. It is
                left untouched.
            TerminationError: If the occupant could not be terminated.
        """
        if not occupant.matches(expected_name):
            logger.info(
                f"Refusing to terminate {occupant.name} (PID {occupant.pid}): "
                f"not '{expected_name}'"
            )
            raise ForeignOccupantError(occupant.pid, occupant.name)

        logger.info(f"Terminating {occupant.name} (PID {occupant.pid})")
        self._terminator.terminate(occupant.pid)
