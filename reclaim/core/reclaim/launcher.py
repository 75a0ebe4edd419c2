"""Server launcher: start the model server detached and check it comes up."""

import logging
import math
import time

from reclaim.core.reclaim.prober import AvailabilityProber
from reclaim.core.reclaim.timeouts import ReclaimTimeouts
from reclaim.domain.config import RunConfig
from reclaim.domain.entities import ProbeStatus
from reclaim.ports.model_server import ModelServer
from reclaim.ports.progress import ProgressCallback

logger = logging.getLogger(__name__)


class ServerLauncher:
    """Starts the model server and verifies it starts responding.

    The launcher does not supervise the spawned server; once it answers a
    probe, its lifecycle is no longer our concern.
    """

    def __init__(
        self,
        server: ModelServer,
        prober: AvailabilityProber,
        poll_interval: float = ReclaimTimeouts.POLL_LAUNCH_VERIFY,
    ) -> None:
        self._server = server
        self._prober = prober
        self._poll_interval = poll_interval

    def launch(self) -> int:
        """Spawn the server.

        Returns:
            PID of the spawned process.

        Raises:
            LaunchError: If the process could not be started.
        """
        pid = self._server.launch()
        logger.info(f"Model server started with PID {pid}")
        return pid

    def verify(
        self, config: RunConfig, progress: ProgressCallback | None = None
    ) -> ProbeStatus | None:
        """Re-probe the server until it responds or the startup budget runs out.

        Args:
            config: Run configuration; startup_delay_seconds is the budget.
            progress: Optional progress callback, one update per probe.

        Returns:
            The first responding ProbeStatus (SATISFIED or
            RUNNING_WITHOUT_MODEL), or None if the server never responded.
        """
        checks = math.ceil(config.startup_delay_seconds / self._poll_interval)
        if progress:
            progress.on_start(checks, "Waiting for the model server to respond")
        try:
            for i in range(checks):
                time.sleep(self._poll_interval)
                status = self._prober.probe(config)
                if progress:
                    progress.on_progress(i + 1, status.value)
                if status.is_responding:
                    elapsed = (i + 1) * self._poll_interval
                    logger.info(f"Model server is responding (took {elapsed:.1f}s)")
                    return status
        finally:
            if progress:
                progress.on_complete()

        logger.info(
            f"Model server not responding after {config.startup_delay_seconds}s"
        )
        return None
