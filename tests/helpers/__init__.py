"""Test helper utilities for the reclaim test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
    assert_success_indicator,
)
from tests.helpers.fakes import (
    CallLog,
    FakeModelServer,
    FakePortInspector,
    FakeServiceController,
    build_usecase,
    total_slept,
)

__all__ = [
    "assert_command_success",
    "assert_command_failed",
    "assert_output_contains",
    "assert_error_message",
    "assert_success_indicator",
    "CallLog",
    "FakeModelServer",
    "FakePortInspector",
    "FakeServiceController",
    "build_usecase",
    "total_slept",
]
