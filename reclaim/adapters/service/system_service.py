"""Service control adapter using the platform's service manager CLI.

Windows services are controlled with "net stop/start"; elsewhere systemd's
"systemctl stop/start" is used.
"""

import logging
import subprocess
import sys

from reclaim.core.reclaim.timeouts import ReclaimTimeouts
from reclaim.domain.exceptions import ServiceControlError

logger = logging.getLogger(__name__)

# "net" helpmsg codes for "already in the requested state"
_NET_NOT_STARTED = "3521"  # The service is not started
_NET_ALREADY_STARTED = "2182"  # The requested service has already been started


def service_command(action: str, name: str, platform: str | None = None) -> list[str]:
    """Build the command that performs an action on a service.

    Args:
        action: "stop" or "start".
        name: Service name.
        platform: sys.platform value to build for (default: current platform).

    Returns:
        Command argument list.
    """
    platform = platform or sys.platform
    if platform == "win32":
        return ["net", action, name]
    return ["systemctl", action, name]


class SystemServiceController:
    """Stops and starts OS services through subprocess calls."""

    def __init__(
        self,
        timeout: float = ReclaimTimeouts.SERVICE_COMMAND,
        platform: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.platform = platform or sys.platform

    def _run(self, action: str, name: str, already_codes: tuple[str, ...]) -> None:
        cmd = service_command(action, name, self.platform)
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise ServiceControlError(f"'{cmd[0]}' not found on this system") from e
        except subprocess.TimeoutExpired as e:
            raise ServiceControlError(
                f"'{' '.join(cmd)}' timed out after {self.timeout}s"
            ) from e
        except OSError as e:
            raise ServiceControlError(f"Failed to run '{' '.join(cmd)}': {e}") from e

        if result.returncode == 0:
            return

        output = f"{result.stdout}\n{result.stderr}"
        if any(f"HELPMSG {code}" in output for code in already_codes):
            logger.info(f"Service {name} already in requested state ({action})")
            return

        detail = result.stderr.strip() or result.stdout.strip() or "no output"
        raise ServiceControlError(
            f"'{' '.join(cmd)}' failed (exit code {result.returncode}): {detail}"
        )

    def stop(self, name: str) -> None:
        """Stop a service; an already-stopped service counts as stopped.

        Raises:
            ServiceControlError: If the service manager fails.
        """
        self._run("stop", name, (_NET_NOT_STARTED,))

    def start(self, name: str) -> None:
        """Start a service; an already-running service counts as started.

        Raises:
            ServiceControlError: If the service manager fails.
        """
        self._run("start", name, (_NET_ALREADY_STARTED,))
