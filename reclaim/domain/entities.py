"""Domain entities for a reclaim run.

All entities are transient and scoped to a single invocation; nothing here is
persisted or shared between runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ProbeStatus(str, Enum):
    """Result of asking the model server which models it can serve."""

    SATISFIED = "satisfied"  # Responding and the required model is available
    RUNNING_WITHOUT_MODEL = "running_without_model"
    NOT_RESPONDING = "not_responding"  # Query failed, timed out or reported an error

    @property
    def is_responding(self) -> bool:
        """True if the server answered the query at all."""
        return self is not ProbeStatus.NOT_RESPONDING


class OutcomeKind(str, Enum):
    """Terminal states of the reclamation procedure."""

    ALREADY_SATISFIED = "already_satisfied"
    SUCCEEDED = "succeeded"
    LAUNCH_UNVERIFIED = "launch_unverified"
    ABORTED = "aborted"


class Stage(str, Enum):
    """Stages of the reclamation procedure, in execution order."""

    PROBE = "probe"
    RESOLVE = "resolve"
    TERMINATE = "terminate"
    CLOSE_GATE = "close_gate"
    WAIT = "wait"
    LAUNCH = "launch"
    VERIFY = "verify"
    REOPEN_GATE = "reopen_gate"


@dataclass(frozen=True)
class PortOccupant:
    """The process currently listening on a TCP port.

    Attributes:
        pid: Operating system process identifier.
        name: Process name as reported by the OS (e.g. "ollama", "ollama.exe").
    """

    pid: int
    name: str

    def matches(self, expected_name: str) -> bool:
        """Check whether this occupant is the expected process.

        Comparison ignores case and a trailing ".exe" so the same name works
        on Windows and POSIX.

        Args:
            expected_name: Process name of the target server.

        Returns:
            True if the occupant's name identifies the expected process.
        """
        return _normalize_process_name(self.name) == _normalize_process_name(expected_name)


def _normalize_process_name(name: str) -> str:
    normalized = name.strip().lower()
    if normalized.endswith(".exe"):
        normalized = normalized[: -len(".exe")]
    return normalized


@dataclass
class ServiceGateState:
    """Tracks whether this run stopped the network-helper service.

    Set when the gate is closed and consumed when it is reopened, so a run
    never starts a service it did not stop, and never starts it twice.
    """

    closed: bool = False

    def mark_closed(self) -> None:
        self.closed = True

    def consume(self) -> bool:
        """Clear the closed flag, returning whether it was set."""
        was_closed = self.closed
        self.closed = False
        return was_closed


@dataclass(frozen=True)
class RunOutcome:
    """Terminal result of one reclaim run.

    Attributes:
        kind: Which terminal state the run ended in.
        reason: Human-readable reason (set for aborted and unverified runs).
        stage: Stage that decided the outcome, if it was not a success.
        warnings: Non-fatal problems, e.g. the service failing to restart.
        hint: Optional actionable suggestion for an aborted run.
    """

    kind: OutcomeKind
    reason: str | None = None
    stage: Stage | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    hint: str | None = None

    @classmethod
    def already_satisfied(cls) -> RunOutcome:
        return cls(kind=OutcomeKind.ALREADY_SATISFIED)

    @classmethod
    def succeeded(cls) -> RunOutcome:
        return cls(kind=OutcomeKind.SUCCEEDED)

    @classmethod
    def launch_unverified(cls, reason: str) -> RunOutcome:
        return cls(kind=OutcomeKind.LAUNCH_UNVERIFIED, reason=reason, stage=Stage.VERIFY)

    @classmethod
    def aborted(cls, reason: str, stage: Stage, hint: str | None = None) -> RunOutcome:
        return cls(kind=OutcomeKind.ABORTED, reason=reason, stage=stage, hint=hint)

    @property
    def is_success(self) -> bool:
        """True for outcomes where the server is known to be serving."""
        return self.kind in (OutcomeKind.ALREADY_SATISFIED, OutcomeKind.SUCCEEDED)

    def with_warning(self, warning: str) -> RunOutcome:
        """Return a copy of this outcome with an extra warning attached."""
        return RunOutcome(
            kind=self.kind,
            reason=self.reason,
            stage=self.stage,
            warnings=(*self.warnings, warning),
            hint=self.hint,
        )
