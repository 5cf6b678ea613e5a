from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: an isolated LogContext, a recording broadcast
   subscriber and a console sink that never terminates the process.
"""

import logging
import os
import sys
from typing import Any, Generator, List, Tuple
from unittest.mock import MagicMock

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from rdebug.core.context import LogContext, set_default_context  # noqa: E402
from rdebug.domain.severity import Severity  # noqa: E402
from rdebug.sinks.console import ConsoleSink  # noqa: E402

CONSOLE_TEST_CHANNEL = "tests.rdebug.console"


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
class Recorder:
    """Broadcast subscriber that keeps every delivery."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []

    def __call__(self, location: Any, moment: Any, level: int, log_id: int, message: str) -> None:
        self.calls.append((location, moment, level, log_id, message))

    @property
    def messages(self) -> List[str]:
        return [c[4] for c in self.calls]

    @property
    def levels(self) -> List[int]:
        return [c[2] for c in self.calls]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def terminator() -> MagicMock:
    """Stand-in for the process abort of Emergency records."""
    return MagicMock(name="terminator")


@pytest.fixture
def console_sink(terminator: MagicMock, caplog: pytest.LogCaptureFixture) -> ConsoleSink:
    """
    Console sink writing to a propagating test channel captured by caplog.

    Returns:
        ConsoleSink: Sink whose Emergency path calls the `terminator` mock.
    """
    caplog.set_level(logging.DEBUG, logger=CONSOLE_TEST_CHANNEL)
    return ConsoleSink(channel=logging.getLogger(CONSOLE_TEST_CHANNEL), terminator=terminator)


@pytest.fixture
def context(terminator: MagicMock) -> Generator[LogContext, None, None]:
    """
    Provide a fully verbose context without console output whose Emergency
    path calls the `terminator` mock.

    It is also installed as the process default context for the duration
    of the test so records without an explicit context stay isolated.
    """
    ctx = LogContext(global_level=Severity.ALL, console=False, terminator=terminator)
    set_default_context(ctx)
    yield ctx
    sink = ctx.file_sink
    if sink is not None:
        sink.close()
    set_default_context(None)
