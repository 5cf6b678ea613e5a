from __future__ import annotations

"""
Unit tests for the LogContext dispatcher and sink registry.

Verifies:
1. Global and per-sink threshold gating over every combination.
2. Fixed sink order and failure isolation.
3. Emergency termination after all sinks ran.
4. Supersede/release semantics of the active-sink slots.
"""

import itertools
from pathlib import Path
from typing import Any, List
from unittest.mock import MagicMock

import pytest

from rdebug.core.context import LogContext, default_context, set_default_context
from rdebug.domain.constants import BROADCAST_SLOT, FILE_SLOT
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity, allows
from rdebug.domain.values import SourceLocation
from rdebug.sinks.broadcast import BroadcastSink
from rdebug.sinks.console import ConsoleSink
from rdebug.sinks.rotating_file import RotatingFileSink

HERE = SourceLocation("test_dispatch.py", 1, "test")
REAL_LEVELS = [s for s in Severity if s not in (Severity.SILENT, Severity.ALL)]
THRESHOLDS = list(Severity)


class _FakeSink:
    def __init__(self, name: str, journal: List[str], max_level: Severity = Severity.ALL) -> None:
        self.name = name
        self.journal = journal
        self.max_level = max_level
        self.terminate = MagicMock()

    def publish(self, record: LogRecord) -> None:
        self.journal.append(self.name)

    def write(self, record: LogRecord) -> None:
        self.journal.append(self.name)


def _emit(context: LogContext, severity: Severity, text: str = "msg") -> LogRecord:
    rec = LogRecord(HERE, severity, context=context)
    rec.append(text)
    rec.finalize()
    return rec


@pytest.mark.parametrize(
    "global_level,sink_level",
    list(itertools.product(THRESHOLDS, THRESHOLDS)),
)
def test_delivery_iff_both_thresholds_allow(recorder: Any, terminator: MagicMock, global_level: Severity,
                                           sink_level: Severity) -> None:
    context = LogContext(global_level=global_level, console=False, terminator=terminator)
    BroadcastSink(context, recorder, max_level=sink_level)

    for severity in REAL_LEVELS:
        _emit(context, severity)

    expected = [int(s) for s in REAL_LEVELS if allows(global_level, s) and allows(sink_level, s)]
    assert recorder.levels == expected


def test_warning_threshold_blocks_debug_everywhere(tmp_path: Path, recorder: Any, console_sink: ConsoleSink,
                                                   caplog: pytest.LogCaptureFixture) -> None:
    context = LogContext(global_level=Severity.WARNING, console=console_sink)
    BroadcastSink(context, recorder, max_level=Severity.ALL)
    with RotatingFileSink(context, str(tmp_path / "a.log"), max_level=Severity.ALL) as sink:
        _emit(context, Severity.DEBUG, "too chatty")
        _emit(context, Severity.ERROR, "disk failure")

    assert recorder.messages == ["disk failure"]
    console_lines = [r.getMessage() for r in caplog.records if r.name == "tests.rdebug.console"]
    assert len(console_lines) == 1
    assert console_lines[0].endswith("disk failure")
    content = Path(sink.path).read_text(encoding="utf-8")
    assert "disk failure" in content
    assert "too chatty" not in content


def test_sinks_run_in_fixed_order() -> None:
    journal: List[str] = []
    context = LogContext(global_level=Severity.ALL, console=_FakeSink("console", journal))
    context.activate(FILE_SLOT, _FakeSink("file", journal))
    context.activate(BROADCAST_SLOT, _FakeSink("broadcast", journal))

    _emit(context, Severity.NOTICE)
    assert journal == ["broadcast", "console", "file"]


def test_failing_sink_does_not_stop_the_others(recorder: Any, caplog: pytest.LogCaptureFixture) -> None:
    journal: List[str] = []
    broken = _FakeSink("console", journal)
    broken.write = MagicMock(side_effect=RuntimeError("stream closed"))
    context = LogContext(global_level=Severity.ALL, console=broken)
    context.activate(FILE_SLOT, _FakeSink("file", journal))
    BroadcastSink(context, recorder, max_level=Severity.ALL)

    _emit(context, Severity.ERROR, "still delivered")

    assert recorder.messages == ["still delivered"]
    assert journal == ["file"]
    assert any("stream closed" in r.getMessage() for r in caplog.records)


def test_emergency_terminates_after_every_sink(tmp_path: Path, console_sink: ConsoleSink,
                                               terminator: MagicMock) -> None:
    context = LogContext(global_level=Severity.ALL, console=console_sink)
    sink = RotatingFileSink(context, str(tmp_path / "fatal.log"), max_level=Severity.ALL)

    def _check_file_written() -> None:
        assert "the end" in Path(sink.path).read_text(encoding="utf-8")

    terminator.side_effect = _check_file_written
    _emit(context, Severity.EMERGENCY, "the end")

    terminator.assert_called_once()
    sink.close()


def test_non_emergency_never_terminates(console_sink: ConsoleSink, terminator: MagicMock) -> None:
    context = LogContext(global_level=Severity.ALL, console=console_sink)
    for severity in REAL_LEVELS:
        if severity != Severity.EMERGENCY:
            _emit(context, severity)
    terminator.assert_not_called()


def test_emergency_filtered_by_global_silent_does_not_terminate(console_sink: ConsoleSink,
                                                                terminator: MagicMock) -> None:
    context = LogContext(global_level=Severity.SILENT, console=console_sink)
    _emit(context, Severity.EMERGENCY)
    terminator.assert_not_called()


def test_emergency_without_console_terminates_through_context(tmp_path: Path, terminator: MagicMock) -> None:
    context = LogContext(global_level=Severity.ALL, console=False, terminator=terminator)
    sink = RotatingFileSink(context, str(tmp_path / "headless.log"), max_level=Severity.ALL)

    def _check_file_written() -> None:
        assert "no console" in Path(sink.path).read_text(encoding="utf-8")

    terminator.side_effect = _check_file_written
    _emit(context, Severity.EMERGENCY, "no console")

    terminator.assert_called_once_with()
    sink.close()


def test_emergency_terminates_even_if_console_write_fails(context: LogContext, recorder: Any,
                                                          terminator: MagicMock) -> None:
    channel = MagicMock(name="channel")
    channel.critical.side_effect = RuntimeError("stderr gone")
    context.set_console_sink(ConsoleSink(channel=channel, terminator=terminator))
    BroadcastSink(context, recorder, max_level=Severity.ALL)

    _emit(context, Severity.EMERGENCY, "last words")

    assert recorder.messages == ["last words"]
    terminator.assert_called_once_with()


def test_emergency_rejected_only_by_sink_thresholds_still_terminates(context: LogContext, recorder: Any,
                                                                     terminator: MagicMock) -> None:
    BroadcastSink(context, recorder, max_level=Severity.SILENT)
    _emit(context, Severity.EMERGENCY)
    terminator.assert_called_once_with()


def test_release_only_clears_own_slot(recorder: Any) -> None:
    context = LogContext(global_level=Severity.ALL, console=False)
    first = BroadcastSink(context, recorder, max_level=Severity.ALL)
    second = BroadcastSink(context, recorder, max_level=Severity.ALL)

    assert context.broadcast_sink is second
    first.close()
    assert context.broadcast_sink is second
    second.close()
    assert context.broadcast_sink is None


def test_missing_sinks_are_skipped() -> None:
    context = LogContext(global_level=Severity.ALL, console=False)
    _emit(context, Severity.ERROR)


def test_default_context_is_lazily_shared() -> None:
    set_default_context(None)
    try:
        first = default_context()
        assert default_context() is first
    finally:
        set_default_context(None)


def test_record_without_context_uses_default(context: LogContext, recorder: Any) -> None:
    BroadcastSink(context, recorder, max_level=Severity.ALL)
    with LogRecord(HERE, Severity.NOTICE) as rec:
        rec.append("implicit")
    assert recorder.messages == ["implicit"]
