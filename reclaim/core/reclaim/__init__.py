"""Port reclamation procedure.

Components:
- AvailabilityProber: Is the required model already being served?
- PortOccupantResolver: Which process holds the port, and may we kill it?
- ServiceGate: Stops/starts the network-helper service around reclamation
- PortWaiter: Bounded polling until the port is free
- ServerLauncher: Detached relaunch plus a bounded readiness check
- ReclaimUseCase: Sequences the stages (main entry point)
"""

from reclaim.core.reclaim.gate import ServiceGate
from reclaim.core.reclaim.launcher import ServerLauncher
from reclaim.core.reclaim.occupant import PortOccupantResolver
from reclaim.core.reclaim.prober import AvailabilityProber
from reclaim.core.reclaim.reclaim_usecase import ReclaimUseCase
from reclaim.core.reclaim.waiter import PortWaiter

__all__ = [
    "AvailabilityProber",
    "PortOccupantResolver",
    "PortWaiter",
    "ReclaimUseCase",
    "ServerLauncher",
    "ServiceGate",
]
