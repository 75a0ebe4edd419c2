"""Port waiter: bounded polling until the port is observed free."""

import logging
import math
import time
from collections.abc import Callable

from reclaim.core.reclaim.timeouts import ReclaimTimeouts
from reclaim.ports.progress import ProgressCallback

logger = logging.getLogger(__name__)


class PortWaiter:
    """Polls a port occupancy check until it reports free or time runs out.

    There is no cancellation signal: the loop ends when the port is free or
    when the timeout budget has been used up, whichever comes first.
    """

    def __init__(
        self,
        is_occupied: Callable[[int], bool],
        poll_interval: float = ReclaimTimeouts.POLL_PORT_FREE,
    ) -> None:
        """Initialize the waiter.

        Args:
            is_occupied: Returns True if something listens on the given port.
            poll_interval: Seconds to sleep before each observation.
        """
        self._is_occupied = is_occupied
        self._poll_interval = poll_interval

    def max_polls(self, timeout_seconds: float) -> int:
        """Number of observations that fit in the timeout budget."""
        return math.ceil(timeout_seconds / self._poll_interval)

    def wait_until_free(
        self,
        port: int,
        timeout_seconds: float,
        progress: ProgressCallback | None = None,
    ) -> bool:
        """Wait for the port to be free.

        Observes the port immediately, then once per interval. A port that is
        already free costs no sleep at all, and the loop never runs longer
        than the timeout.

        Args:
            port: Local TCP port to watch.
            timeout_seconds: Total budget in seconds.
            progress: Optional progress callback, one update per poll.

        Returns:
            True as soon as the port is observed free, False on timeout.
        """
        checks = self.max_polls(timeout_seconds)
        if progress:
            progress.on_start(checks, f"Waiting for port {port} to free up")
        try:
            for i in range(checks):
                if i:
                    time.sleep(self._poll_interval)
                occupied = self._is_occupied(port)
                if progress:
                    progress.on_progress(i + 1, "in use" if occupied else "free")
                if not occupied:
                    elapsed = i * self._poll_interval
                    logger.info(f"Port {port} is free (took {elapsed:.1f}s)")
                    return True
        finally:
            if progress:
                progress.on_complete()

        logger.info(f"Port {port} still in use after {timeout_seconds}s")
        return False
