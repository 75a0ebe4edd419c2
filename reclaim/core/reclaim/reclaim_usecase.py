"""Port reclamation use case.

Sequences the reclamation stages for one run:

    probe -> resolve occupant -> (terminate + settle) -> stop service
          -> wait for port -> launch server -> verify -> start service

Every fatal condition ends the run with an aborted RunOutcome naming the
stage and reason; nothing is retried across stage boundaries. Once the
network-helper service has been stopped, it is started again on every path,
including aborts and interrupts.
"""

import logging
import time

from reclaim.core.reclaim.gate import ServiceGate
from reclaim.core.reclaim.launcher import ServerLauncher
from reclaim.core.reclaim.occupant import PortOccupantResolver
from reclaim.core.reclaim.prober import AvailabilityProber
from reclaim.core.reclaim.timeouts import ReclaimTimeouts
from reclaim.core.reclaim.waiter import PortWaiter
from reclaim.domain.config import RunConfig
from reclaim.domain.entities import ProbeStatus, RunOutcome, Stage
from reclaim.domain.exceptions import (
    ForeignOccupantError,
    LaunchError,
    ServiceControlError,
    TerminationError,
)
from reclaim.ports.model_server import ModelServer
from reclaim.ports.network import PortInspector, ProcessTerminator
from reclaim.ports.progress import ProgressCallback, StageReporter
from reclaim.ports.service import ServiceController

logger = logging.getLogger(__name__)


class NullStageReporter:
    """Stage reporter that discards everything."""

    def step(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def progress(self) -> ProgressCallback | None:
        return None


class ReclaimUseCase:
    """Runs the reclamation procedure against injected OS and server adapters."""

    def __init__(
        self,
        server: ModelServer,
        inspector: PortInspector,
        terminator: ProcessTerminator,
        services: ServiceController,
        reporter: StageReporter | None = None,
        settle_seconds: float = ReclaimTimeouts.SETTLE_AFTER_TERMINATE,
    ) -> None:
        """Initialize the use case.

        Args:
            server: Model server adapter (list models, launch).
            inspector: Resolves a port to its listening process.
            terminator: Forcibly stops processes.
            services: Stops and starts the network-helper service.
            reporter: Receives per-stage status lines (default: discard).
            settle_seconds: Sleep after terminating the port occupant.
        """
        self.prober = AvailabilityProber(server)
        self.resolver = PortOccupantResolver(inspector, terminator)
        self.waiter = PortWaiter(self.resolver.is_occupied)
        self.launcher = ServerLauncher(server, self.prober)
        self._services = services
        self._reporter = reporter or NullStageReporter()
        self._settle_seconds = settle_seconds

    def execute(self, config: RunConfig) -> RunOutcome:
        """Reclaim the configured port and restart the model server.

        Args:
            config: Resolved run configuration.

        Returns:
            The run's single terminal outcome.
        """
        logger.debug("Starting reclaim run: %s", config)

        self._reporter.step(
            f"Checking whether the server on port {config.port} "
            f"serves '{config.required_model}'..."
        )
        status = self.prober.probe(config)
        if status is ProbeStatus.SATISFIED:
            self._reporter.success(
                f"Model '{config.required_model}' is already available, nothing to do"
            )
            return RunOutcome.already_satisfied()
        if status is ProbeStatus.RUNNING_WITHOUT_MODEL:
            self._reporter.step(f"Server is running without '{config.required_model}'")
        else:
            self._reporter.step("Server is not responding")

        aborted = self._clear_occupant(config)
        if aborted is not None:
            return aborted

        gate = ServiceGate(self._services, config.service_name)
        self._reporter.step(f"Stopping service '{config.service_name}'...")
        try:
            gate.close()
        except ServiceControlError as e:
            logger.info(f"Failed to stop service {config.service_name}: {e.message}")
            return self._abort(
                "could not stop network helper",
                Stage.CLOSE_GATE,
                hint=f"Run from an elevated prompt ({e.message})",
            )
        self._reporter.success(f"Service '{config.service_name}' stopped")

        try:
            outcome = self._reclaim_window(config)
        finally:
            self._reporter.step(f"Starting service '{config.service_name}'...")
            warning = gate.reopen()

        if warning is not None:
            self._reporter.warning(warning)
            return outcome.with_warning(warning)
        self._reporter.success(f"Service '{config.service_name}' started")
        return outcome

    def _clear_occupant(self, config: RunConfig) -> RunOutcome | None:
        """Terminate the server process holding the port, if there is one.

        Returns:
            An aborted outcome if the port cannot be cleared safely, else None.
        """
        occupant = self.resolver.resolve(config.port)
        if occupant is None:
            self._reporter.step(f"No process is listening on port {config.port}")
            return None

        self._reporter.step(
            f"Port {config.port} is held by {occupant.name} (PID {occupant.pid})"
        )
        try:
            self.resolver.terminate_if_own(occupant, config.server_process_name)
        except ForeignOccupantError as e:
            return self._abort(e.message, Stage.RESOLVE, hint=e.hint)
        except TerminationError as e:
            logger.info(f"Failed to terminate PID {occupant.pid}: {e.message}")
            return self._abort(
                "could not terminate port occupant", Stage.TERMINATE, hint=e.message
            )

        self._reporter.success(f"Terminated {occupant.name} (PID {occupant.pid})")
        time.sleep(self._settle_seconds)
        return None

    def _reclaim_window(self, config: RunConfig) -> RunOutcome:
        """Stages that run while the network-helper service is stopped."""
        self._reporter.step(
            f"Waiting up to {config.wait_timeout_seconds}s for port {config.port}..."
        )
        if not self.waiter.wait_until_free(
            config.port, config.wait_timeout_seconds, self._reporter.progress()
        ):
            return self._abort(
                "timeout waiting for port to free",
                Stage.WAIT,
                hint=f"Something else may have taken port {config.port}; "
                "run 'reclaim status' to see which process holds it",
            )
        self._reporter.success(f"Port {config.port} is free")

        self._reporter.step(f"Launching '{config.server_executable} serve'...")
        try:
            self.launcher.launch()
        except LaunchError as e:
            logger.info(f"Failed to launch model server: {e.message}")
            return self._abort("could not launch server", Stage.LAUNCH, hint=e.message)

        status = self.launcher.verify(config, self._reporter.progress())
        if status is None:
            reason = (
                f"server did not respond within {config.startup_delay_seconds}s of launch"
            )
            self._reporter.warning(reason)
            return RunOutcome.launch_unverified(reason)

        self._reporter.success("Model server is responding")
        if status is ProbeStatus.RUNNING_WITHOUT_MODEL:
            self._reporter.warning(
                f"Server does not list '{config.required_model}' yet; "
                f"pull it with '{config.server_executable} pull {config.required_model}'"
            )
        return RunOutcome.succeeded()

    def _abort(self, reason: str, stage: Stage, hint: str | None = None) -> RunOutcome:
        logger.info(f"Aborting at stage {stage.value}: {reason}")
        return RunOutcome.aborted(reason, stage, hint=hint)
