"""Domain exceptions for reclaim.

These exceptions represent failures of individual reclamation stages and of
the external capabilities they use. The orchestrator converts the fatal ones
into an aborted RunOutcome; the CLI boundary converts anything that still
escapes into a user-facing error message.
"""


class ReclaimDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ModelServerError(ReclaimDomainError):
    """Raised when the model server's "list models" query fails or reports an error."""

    pass


class LaunchError(ReclaimDomainError):
    """Raised when the model server process cannot be started."""

    pass


class TerminationError(ReclaimDomainError):
    """Raised when the port occupant cannot be terminated."""

    pass


class ServiceControlError(ReclaimDomainError):
    """Raised when the OS service manager fails to stop or start a service."""

    pass


class ForeignOccupantError(ReclaimDomainError):
    """Raised when the port is held by a process that is not the model server."""

    def __init__(self, pid: int, name: str) -> None:
        super().__init__(
            "port held by foreign process",
            hint=f"Port is held by '{name}' (PID {pid}); stop it yourself or pick another port",
        )
        self.pid = pid
        self.name = name

