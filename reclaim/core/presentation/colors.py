"""Centralized color definitions for all reclaim output."""

from typing import Literal

ClickColor = Literal["black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"]


class ReclaimColors:
    """Color palette for console output, as click color names."""

    SUCCESS_FG: ClickColor = "green"
    WARNING_FG: ClickColor = "yellow"
    ERROR_FG: ClickColor = "red"

    STEP_DIM = True  # Stage progress lines are dimmed

    SUCCESS_MARK = "✓"
    WARNING_MARK = "!"
    ERROR_MARK = "✗"
