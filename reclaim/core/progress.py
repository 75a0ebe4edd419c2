"""Console reporting for reclaim runs.

Provides the click-based stage reporter and Rich-based spinners shown while
the procedure polls the port or the relaunched server.
"""

import logging

import click
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from reclaim.core.presentation.colors import ReclaimColors
from reclaim.ports.progress import ProgressCallback

logger = logging.getLogger(__name__)


class RichProgressCallback:
    """Rich-based progress callback for bounded polling loops.

    Starts its own transient Progress display on on_start and tears it down
    on on_complete, so each loop gets a fresh spinner that disappears when
    done.
    """

    def __init__(self) -> None:
        self.progress: Progress | None = None
        self.task_id: int | None = None

    def on_start(self, total: int, description: str) -> None:
        """Show a spinner and bar for the polling loop."""
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("[cyan]{task.fields[observation]}"),
            transient=True,
        )
        self.progress.start()
        self.task_id = self.progress.add_task(description, total=total, observation="")

    def on_progress(self, current: int, item_description: str | None = None) -> None:
        """Advance the bar and show the latest observation."""
        if self.progress is not None and self.task_id is not None:
            self.progress.update(
                self.task_id, completed=current, observation=item_description or ""
            )

    def on_complete(self) -> None:
        """Stop and hide the display."""
        if self.progress is not None:
            self.progress.stop()
        self.progress = None
        self.task_id = None


class ConsoleStageReporter:
    """Prints one status line per stage with click.

    Args:
        quiet: Suppress step and success lines (warnings are always shown).
    """

    def __init__(self, quiet: bool = False) -> None:
        self.quiet = quiet

    def step(self, message: str) -> None:
        if not self.quiet:
            click.secho(f"  {message}", dim=ReclaimColors.STEP_DIM)

    def success(self, message: str) -> None:
        if not self.quiet:
            click.secho(f"{ReclaimColors.SUCCESS_MARK} {message}", fg=ReclaimColors.SUCCESS_FG)

    def warning(self, message: str) -> None:
        click.secho(
            f"{ReclaimColors.WARNING_MARK} {message}", fg=ReclaimColors.WARNING_FG, err=True
        )

    def progress(self) -> ProgressCallback | None:
        """Spinner for polling loops, or None in quiet mode."""
        if self.quiet:
            return None
        return RichProgressCallback()
