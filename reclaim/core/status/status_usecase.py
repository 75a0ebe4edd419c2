"""Status use case: report what a reclaim run would decide, without acting."""

import logging
from dataclasses import dataclass

from reclaim.core.reclaim.prober import AvailabilityProber
from reclaim.domain.config import RunConfig
from reclaim.domain.entities import PortOccupant, ProbeStatus
from reclaim.ports.model_server import ModelServer
from reclaim.ports.network import PortInspector

logger = logging.getLogger(__name__)


@dataclass
class StatusResponse:
    """Read-only snapshot of the server and its port.

    Attributes:
        port: Port that was inspected.
        probe: Result of the availability probe.
        occupant: Process listening on the port, if any.
        occupant_is_server: Whether that process is the model server.
    """

    port: int
    probe: ProbeStatus
    occupant: PortOccupant | None = None
    occupant_is_server: bool = False

    @property
    def planned_action(self) -> str:
        """What 'reclaim run' would do next, in words."""
        if self.probe is ProbeStatus.SATISFIED:
            return "nothing (required model already available)"
        if self.occupant is None:
            return "stop service, wait for port, launch server"
        if self.occupant_is_server:
            return "terminate server, stop service, wait for port, launch server"
        return "abort (port held by foreign process)"


class StatusUseCase:
    """Probes the server and resolves the port occupant. Never mutates anything."""

    def __init__(
        self,
        server: ModelServer,
        inspector: PortInspector,
    ) -> None:
        self._prober = AvailabilityProber(server)
        self._inspector = inspector

    def execute(self, config: RunConfig) -> StatusResponse:
        probe = self._prober.probe(config)
        occupant = self._inspector.find_occupant(config.port)
        return StatusResponse(
            port=config.port,
            probe=probe,
            occupant=occupant,
            occupant_is_server=(
                occupant is not None and occupant.matches(config.server_process_name)
            ),
        )
