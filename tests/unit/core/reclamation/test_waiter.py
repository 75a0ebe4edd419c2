"""Unit tests for the port waiter."""

from unittest.mock import MagicMock

import pytest

from reclaim.core.reclaim.waiter import PortWaiter
from tests.helpers.fakes import total_slept


def occupancy(*answers: bool):
    """is_occupied stub answering from a script; the last answer repeats."""
    remaining = list(answers)
    calls = []

    def is_occupied(port: int) -> bool:
        calls.append(port)
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    is_occupied.calls = calls
    return is_occupied


class TestMaxPolls:
    """Tests for the poll budget."""

    @pytest.mark.parametrize(
        "timeout,interval,expected",
        [(10, 1.0, 10), (1, 1.0, 1), (2.5, 1.0, 3), (3, 0.5, 6)],
    )
    def test_max_polls(self, timeout: float, interval: float, expected: int) -> None:
        waiter = PortWaiter(occupancy(False), poll_interval=interval)

        assert waiter.max_polls(timeout) == expected


class TestWaitUntilFree:
    """Tests for the polling loop."""

    def test_returns_after_first_free_observation(self, sleeps: MagicMock) -> None:
        is_occupied = occupancy(True, False)
        waiter = PortWaiter(is_occupied)

        assert waiter.wait_until_free(11434, 10)
        assert len(is_occupied.calls) == 2
        assert total_slept(sleeps) == 1.0

    def test_free_port_returns_without_sleeping(self, sleeps: MagicMock) -> None:
        """An already-free port is detected by the first observation."""
        is_occupied = occupancy(False)
        waiter = PortWaiter(is_occupied)

        assert waiter.wait_until_free(11434, 10)
        assert len(is_occupied.calls) == 1
        sleeps.assert_not_called()

    def test_sleeps_one_interval_between_observations(self, sleeps: MagicMock) -> None:
        waiter = PortWaiter(occupancy(True, True, False), poll_interval=0.5)

        assert waiter.wait_until_free(11434, 10)
        assert [c.args for c in sleeps.call_args_list] == [(0.5,), (0.5,)]

    def test_times_out(self, sleeps: MagicMock) -> None:
        is_occupied = occupancy(True)
        waiter = PortWaiter(is_occupied)

        assert not waiter.wait_until_free(11434, 10)
        assert len(is_occupied.calls) == 10
        # no sleep after the final observation
        assert total_slept(sleeps) == 9.0

    def test_never_polls_more_than_ceil_timeout(self, sleeps: MagicMock) -> None:
        is_occupied = occupancy(True)
        waiter = PortWaiter(is_occupied)

        waiter.wait_until_free(11434, 2.5)

        assert len(is_occupied.calls) == 3

    def test_reports_progress(self, sleeps: MagicMock) -> None:
        progress = MagicMock()
        waiter = PortWaiter(occupancy(True, False))

        waiter.wait_until_free(11434, 10, progress)

        progress.on_start.assert_called_once_with(10, "Waiting for port 11434 to free up")
        assert progress.on_progress.call_count == 2
        progress.on_progress.assert_called_with(2, "free")
        progress.on_complete.assert_called_once()

    def test_progress_completed_on_interrupt(self, sleeps: MagicMock) -> None:
        progress = MagicMock()
        sleeps.side_effect = KeyboardInterrupt
        waiter = PortWaiter(occupancy(True))

        with pytest.raises(KeyboardInterrupt):
            waiter.wait_until_free(11434, 10, progress)

        progress.on_complete.assert_called_once()
