"""Service gate: suspends the network-helper service around reclamation."""

import logging

from reclaim.domain.entities import ServiceGateState
from reclaim.domain.exceptions import ServiceControlError
from reclaim.ports.service import ServiceController

logger = logging.getLogger(__name__)


class ServiceGate:
    """Stops a named service and later starts it again.

    One gate is created per run. reopen() only starts the service if this
    gate's close() stopped it, and only once.
    """

    def __init__(self, controller: ServiceController, service_name: str) -> None:
        self._controller = controller
        self.service_name = service_name
        self.state = ServiceGateState()

    def close(self) -> None:
        """Stop the service.

        Raises:
            ServiceControlError: If the service could not be stopped.
        """
        logger.debug("Stopping service %s", self.service_name)
        self._controller.stop(self.service_name)
        self.state.mark_closed()

    def reopen(self) -> str | None:
        """Start the service again if this gate stopped it.

        Failures are not raised or retried: the caller reports them as a
        warning alongside the run's outcome.

        Returns:
            Warning message if the service failed to start, else None.
        """
        if not self.state.consume():
            return None

        logger.debug("Starting service %s", self.service_name)
        try:
            self._controller.start(self.service_name)
        except ServiceControlError as e:
            logger.info(f"Failed to restart service {self.service_name}: {e.message}")
            return f"could not restart network helper '{self.service_name}': {e.message}"
        return None
