"""psutil-based port inspection and process termination."""

import logging

import psutil

from reclaim.domain.entities import PortOccupant
from reclaim.domain.exceptions import TerminationError

logger = logging.getLogger(__name__)

UNKNOWN_PROCESS = "unknown"


class PsutilPortInspector:
    """Implements PortInspector and ProcessTerminator with psutil.

    A listener whose owner cannot be determined (missing PID or access
    denied) is reported with PID 0 and name "unknown". It still counts as an
    occupant but never matches the server's process name, so it is never
    terminated.
    """

    def _listening_pids(self, port: int) -> list[int | None]:
        """PIDs of TCP sockets listening on the given local port."""
        try:
            connections = psutil.net_connections(kind="tcp")
        except psutil.AccessDenied:
            # macOS requires root for the system-wide table; walk processes instead
            logger.debug("System-wide connection table denied, scanning processes")
            return self._listening_pids_per_process(port)

        return [
            conn.pid
            for conn in connections
            if conn.laddr and conn.laddr.port == port and conn.status == psutil.CONN_LISTEN
        ]

    def _listening_pids_per_process(self, port: int) -> list[int | None]:
        pids: list[int | None] = []
        for proc in psutil.process_iter(["pid"]):
            try:
                connections = proc.net_connections(kind="tcp")
            except (psutil.AccessDenied, psutil.NoSuchProcess, psutil.ZombieProcess):
                continue
            for conn in connections:
                if conn.laddr and conn.laddr.port == port and conn.status == psutil.CONN_LISTEN:
                    pids.append(proc.pid)
        return pids

    def find_occupant(self, port: int) -> PortOccupant | None:
        """Find the process listening on a local TCP port.

        Args:
            port: Local TCP port number.

        Returns:
            The listening process, or None if nothing listens on the port.
        """
        pids = self._listening_pids(port)
        if not pids:
            return None

        # IPv4 and IPv6 listeners of one server share a PID; prefer a known one
        known = sorted({pid for pid in pids if pid})
        if not known:
            return PortOccupant(pid=0, name=UNKNOWN_PROCESS)

        pid = known[0]
        try:
            name = psutil.Process(pid).name()
        except psutil.NoSuchProcess:
            logger.debug(f"Listener PID {pid} exited during lookup")
            return None
        except psutil.AccessDenied:
            name = UNKNOWN_PROCESS
        return PortOccupant(pid=pid, name=name)

    def terminate(self, pid: int) -> None:
        """Forcibly kill a process (SIGKILL / TerminateProcess).

        Args:
            pid: Process ID to kill.

        Raises:
            TerminationError: If the process exists but cannot be killed.
        """
        try:
            psutil.Process(pid).kill()
        except psutil.NoSuchProcess:
            logger.info(f"Process {pid} already exited")
        except psutil.AccessDenied as e:
            raise TerminationError(
                f"Permission denied killing PID {pid}",
                hint="Run reclaim with the same user as the server, or elevated",
            ) from e
