"""Progress and status reporting protocols.

Lets the reclamation stages report what they are doing without the core
depending on a specific console or UI library.
"""

from typing import Protocol


class ProgressCallback(Protocol):
    """Protocol for progress reporting during bounded polling loops."""

    def on_start(self, total: int, description: str) -> None:
        """Called when a polling loop starts.

        Args:
            total: Maximum number of polls.
            description: Description of what is being waited for.
        """
        ...

    def on_progress(self, current: int, item_description: str | None = None) -> None:
        """Called after each poll.

        Args:
            current: Current poll number (1-based).
            item_description: Optional description of the latest observation.
        """
        ...

    def on_complete(self) -> None:
        """Called when the loop ends, whether it succeeded or timed out."""
        ...


class StageReporter(Protocol):
    """Protocol for the per-stage status lines shown to the operator."""

    def step(self, message: str) -> None:
        """Report that a stage is starting or has made a decision."""
        ...

    def success(self, message: str) -> None:
        """Report that a stage completed successfully."""
        ...

    def warning(self, message: str) -> None:
        """Report a non-fatal problem."""
        ...

    def progress(self) -> ProgressCallback | None:
        """Progress callback for polling loops, or None to report nothing."""
        ...
