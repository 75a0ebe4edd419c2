"""Centralized timing configuration for the reclamation procedure.

The user-tunable budgets (port wait timeout, startup delay) live in RunConfig;
the fixed intervals the procedure polls and settles at are defined here.
"""


class ReclaimTimeouts:
    """Fixed timing values for reclamation stages.

    All values are in seconds.

    Groups:
        SETTLE_*: Unconditional sleeps after a destructive action
        POLL_*: Intervals between observations in bounded polling loops
        SERVICE_*: OS service manager command timeouts
    """

    SETTLE_AFTER_TERMINATE: float = 1.0
    """Pause after killing the port occupant.

    Gives the OS a moment to release the listening socket before the
    network-helper service is stopped.
    """

    POLL_PORT_FREE: float = 1.0
    """Interval between port occupancy checks while waiting for the port to free."""

    POLL_LAUNCH_VERIFY: float = 1.0
    """Interval between availability probes after relaunching the server."""

    SERVICE_COMMAND: float = 30.0
    """Timeout for a single service stop/start command.

    Stopping winnat can take several seconds while it tears down NAT
    mappings; anything beyond this is treated as a failure.
    """
