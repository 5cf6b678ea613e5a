from __future__ import annotations

"""
Unit tests for the LogRecord lifecycle.

Verifies:
1. Value rendering and integer base switching.
2. Exactly-once finalization (explicit, scope guard, exception path).
3. Log id resolution and printf-style entry points.
"""

import os
from unittest.mock import patch

import pytest

from rdebug.core.context import LogContext
from rdebug.domain.record import LogRecord, format_template
from rdebug.domain.severity import Severity
from rdebug.domain.values import Address, Point, Rect, Size, SourceLocation

HERE = SourceLocation("test_record.py", 10, "test_func")


def _record(context: LogContext, severity: Severity = Severity.DEBUG, log_id: int = 0) -> LogRecord:
    return LogRecord(HERE, severity, log_id, context=context)


# -----------------------------------------------------------------------------
# Buffer accumulation
# -----------------------------------------------------------------------------

def test_append_renders_scalars(context: LogContext) -> None:
    rec = _record(context)
    rec.append("x=").append(42).append(" ok=").append(True).append(" f=").append(1.5)
    rec.append(" b=").append(b"bytes").append(" n=").append(None)
    assert rec.message == "x=42 ok=true f=1.5 b=bytes n=(nullptr)"


def test_append_renders_geometry_and_addresses(context: LogContext) -> None:
    rec = _record(context)
    rec.append(Point(1, 2)).append(Size(3, 4)).append(Rect(5, 6, 7, 8)).append(Address(0xBEEF))
    assert rec.message == "@(1,2)@(3x4)@((7,8)+(5,6))0xbeef"


def test_hex_base_applies_to_following_integers_only(context: LogContext) -> None:
    """A numeric value appended after switching to base 16 renders as hex."""
    rec = _record(context)
    rec.append(255).append(" ").hex().append(255).append(" ").append("255")
    assert rec.message == "255 ff 255"
    assert rec.base == 16


def test_other_bases(context: LogContext) -> None:
    rec = _record(context)
    rec.bin().append(5).append(" ").oct().append(8).append(" ").dec().append(-12)
    assert rec.message == "101 10 -12"


def test_invalid_base_rejected(context: LogContext) -> None:
    with pytest.raises(ValueError):
        _record(context).set_base(7)


# -----------------------------------------------------------------------------
# Finalization
# -----------------------------------------------------------------------------

def test_finalize_dispatches_exactly_once(context: LogContext) -> None:
    rec = _record(context)
    with patch.object(context, "dispatch") as dispatch:
        assert rec.finalize() is True
        assert rec.finalize() is False
        assert rec.emit() is False
    dispatch.assert_called_once_with(rec)
    assert rec.finalized


def test_scope_guard_finalizes_once(context: LogContext) -> None:
    with patch.object(context, "dispatch") as dispatch:
        with _record(context) as rec:
            rec.append("inside")
        rec.finalize()
    dispatch.assert_called_once()


def test_scope_guard_finalizes_on_exception(context: LogContext) -> None:
    with patch.object(context, "dispatch") as dispatch:
        with pytest.raises(RuntimeError):
            with _record(context) as rec:
                rec.append("partial")
                raise RuntimeError("boom")
    dispatch.assert_called_once()
    assert dispatch.call_args[0][0].message == "partial"


def test_zero_log_id_resolves_to_process_id(context: LogContext) -> None:
    rec = _record(context)
    rec.with_log_id = True
    with patch.object(context, "dispatch"):
        rec.finalize()
    assert rec.log_id == os.getpid()


def test_id_column_default_follows_the_default_context(context: LogContext) -> None:
    context.with_log_id = False
    rec = LogRecord(HERE, Severity.NOTICE)

    assert rec.with_log_id is False
    with patch.object(context, "dispatch"):
        rec.finalize()
    assert rec.log_id == 0


def test_explicit_log_id_is_kept(context: LogContext) -> None:
    rec = _record(context, log_id=0xABCDEF)
    with patch.object(context, "dispatch"):
        rec.finalize()
    assert rec.log_id == 0xABCDEF


def test_timestamp_captured_at_creation(context: LogContext) -> None:
    rec = _record(context)
    created = rec.timestamp
    with patch.object(context, "dispatch"):
        rec.finalize()
    assert rec.timestamp is created


# -----------------------------------------------------------------------------
# printf-style entry points
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "method,expected",
    [
        ("debug", Severity.DEBUG),
        ("info", Severity.INFORMATIONAL),
        ("note", Severity.NOTICE),
        ("warning", Severity.WARNING),
        ("error", Severity.ERROR),
        ("critical", Severity.CRITICAL),
        ("emergency", Severity.ALERT),
        ("fatal", Severity.EMERGENCY),
    ],
)
def test_entry_points_select_severity(context: LogContext, method: str, expected: Severity) -> None:
    rec = getattr(_record(context), method)("value %d", 7)
    assert rec.severity is expected
    assert rec.message == "value 7"


def test_entry_point_with_log_id(context: LogContext) -> None:
    rec = _record(context).info("tagged", log_id=99)
    assert rec.with_log_id is True
    assert rec.log_id == 99


def test_entry_point_without_log_id_uses_process_id(context: LogContext) -> None:
    rec = _record(context).info("untagged")
    assert rec.with_log_id is False
    assert rec.log_id == os.getpid()


def test_none_template_is_noop(context: LogContext) -> None:
    rec = _record(context).warning(None)
    assert rec.message == ""


def test_filtered_severity_skips_formatting(context: LogContext) -> None:
    context.set_global_level(Severity.WARNING)
    rec = _record(context).debug("hidden %s", "text")
    assert rec.message == ""


def test_long_messages_are_never_truncated(context: LogContext) -> None:
    payload = "x" * 5000
    rec = _record(context).info("start %s end", payload)
    assert rec.message == f"start {payload} end"


def test_format_template_mismatch_does_not_raise() -> None:
    assert format_template("%d items", ("many",)) == "%d items ('many',)"
    assert format_template("100%", ()) == "100%"
    assert format_template("%(name)s", ({"name": "n"},)) == "n"
