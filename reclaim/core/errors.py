"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all reclaim CLI commands.
"""

from typing import NoReturn

import click

from reclaim.domain.entities import RunOutcome


class ReclaimCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise ReclaimCliError(
            "Aborted during close_gate: could not stop network helper",
            hint="Run from an elevated prompt",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
        """
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def run_aborted_error(outcome: RunOutcome) -> NoReturn:
    """Raise error for a run that ended in the aborted state.

    Args:
        outcome: The aborted run outcome.

    Raises:
        ReclaimCliError: Always raises, naming the failed stage and reason.
    """
    stage = outcome.stage.value if outcome.stage else "unknown stage"
    raise ReclaimCliError(
        f"Aborted during {stage}: {outcome.reason}",
        hint=outcome.hint,
    )


def invalid_config_error(error: ValueError) -> NoReturn:
    """Raise error when the resolved run configuration is invalid.

    Raises:
        ReclaimCliError: Always raises with config hint.
    """
    raise ReclaimCliError(
        f"Invalid configuration: {error}",
        hint="Check your flags and 'reclaim config show'",
    )
