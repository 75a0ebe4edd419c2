"""Run configuration domain model for reclaim.

A RunConfig is resolved once per invocation, from built-in defaults, the
optional config file and command-line flags (in increasing precedence), and
is passed unchanged into every stage of the reclamation procedure.
"""

from dataclasses import dataclass, fields, replace
from typing import Any

DEFAULT_PORT = 11434
DEFAULT_REQUIRED_MODEL = "llama3.2-vision"
DEFAULT_SERVICE_NAME = "winnat"
DEFAULT_SERVER_PROCESS_NAME = "ollama"


@dataclass(frozen=True)
class RunConfig:
    """Resolved configuration for one reclaim run.

    Attributes:
        port: TCP port the model server listens on (default: 11434)
        required_model: Model identifier the server must be able to serve
        wait_timeout_seconds: Upper bound for waiting on the port to free up
        startup_delay_seconds: Budget for the relaunched server to start responding
        verbose: Emit timestamped trace lines for each step
        service_name: OS network-helper service stopped around the reclamation
        server_process_name: Process name identifying the model server
        server_executable: Executable used to list models and to serve
        probe_timeout_seconds: Timeout for a single "list models" query

    Raises:
        ValueError: If a value has the wrong type, the port is out of range,
                   a timeout is not positive, the startup delay is negative,
                   or a name is empty.
    """

    port: int = DEFAULT_PORT
    required_model: str = DEFAULT_REQUIRED_MODEL
    wait_timeout_seconds: int = 10
    startup_delay_seconds: int = 5
    verbose: bool = False
    service_name: str = DEFAULT_SERVICE_NAME
    server_process_name: str = DEFAULT_SERVER_PROCESS_NAME
    server_executable: str = DEFAULT_SERVER_PROCESS_NAME
    probe_timeout_seconds: int = 15

    def __post_init__(self) -> None:
        """Validate run config after initialization."""
        for f in fields(self):
            value = getattr(self, f.name)
            # bool is a subclass of int; `port = true` is not a port number
            if f.type is int and isinstance(value, bool):
                raise ValueError(f"{f.name} must be an integer, got {value!r}")
            if not isinstance(value, f.type):
                raise ValueError(f"{f.name} must be of type {f.type.__name__}, got {value!r}")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {self.port}")
        if self.wait_timeout_seconds <= 0:
            raise ValueError(
                f"wait_timeout_seconds must be positive, got {self.wait_timeout_seconds}"
            )
        if self.startup_delay_seconds < 0:
            raise ValueError(
                f"startup_delay_seconds cannot be negative, "
                f"got {self.startup_delay_seconds}"
            )
        if self.probe_timeout_seconds <= 0:
            raise ValueError(
                f"probe_timeout_seconds must be positive, "
                f"got {self.probe_timeout_seconds}"
            )
        for name in ("required_model", "service_name", "server_process_name", "server_executable"):
            if not getattr(self, name).strip():
                raise ValueError(f"{name} cannot be empty")

    @staticmethod
    def default() -> "RunConfig":
        """Create a config with all default values."""
        return RunConfig()

    @staticmethod
    def field_names() -> list[str]:
        """Names of all configurable fields, in declaration order."""
        return [f.name for f in fields(RunConfig)]

    def with_overrides(self, **overrides: Any) -> "RunConfig":
        """Return a copy with the given fields replaced.

        None values are skipped so unset command-line options keep the
        value already resolved from the config file or defaults.

        Raises:
            ValueError: If an override names an unknown field or fails validation.
        """
        known = set(self.field_names())
        changes = {}
        for key, value in overrides.items():
            if key not in known:
                raise ValueError(f"Unknown run setting: {key}")
            if value is not None:
                changes[key] = value
        if not changes:
            return self
        return replace(self, **changes)
