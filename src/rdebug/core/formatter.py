from __future__ import annotations

"""
Line Formatter.

Pure rendering helpers shared by every sink: the canonical text line, the
four-character level tags, the log-id column and the timestamp.
"""

from datetime import datetime
from typing import Dict, Tuple

from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity

_LEVEL_TAGS: Dict[Severity, str] = {
    Severity.DEBUG: "Debg",
    Severity.INFORMATIONAL: "Info",
    Severity.NOTICE: "Note",
    Severity.WARNING: "Warn",
    Severity.ERROR: "Err!",
    Severity.CRITICAL: "Crit",
    Severity.ALERT: "Alrt",
    Severity.EMERGENCY: "Emrg",
}

_LOW32 = 0xFFFFFFFF


def level_tag(severity: int) -> str:
    """Map a severity to its 4-character tag; unknown values read as Emrg."""
    try:
        return _LEVEL_TAGS.get(Severity(severity), "Emrg")
    except ValueError:
        return "Emrg"


def timestamp(moment: datetime) -> str:
    """Render `yyyy-MM-dd HH:mm:ss,mmm` in the instant's own (local) time."""
    return moment.strftime("%Y-%m-%d %H:%M:%S") + f",{moment.microsecond // 1000:03d}"


def log_id_field(log_id: int, width: int = 8) -> str:
    """
    Render the log-id column.

    Args:
        log_id: Unsigned 64-bit id.
        width: 8 for zero-padded decimal, 16 for the split hex form
            `0xHHHHHHHH:HHHHHHHH`, anything else for plain decimal.

    Returns:
        str: The rendered id.
    """
    if width == 8:
        return f"{log_id:08d}"
    if width == 16:
        return f"0x{(log_id >> 32) & _LOW32:08x}:{log_id & _LOW32:08x}"
    return str(log_id)


def parse_log_id_field(text: str) -> int:
    """
    Rebuild a 64-bit id from its 16-wide split hex rendering.

    Raises:
        ValueError: If the text is not in `0xHHHHHHHH:HHHHHHHH` form.
    """
    high, low = _split_hex_field(text)
    return (int(high, 16) << 32) | int(low, 16)


def render_line(
        record: LogRecord,
        include_log_id: bool,
        include_location: bool = False,
        id_width: int = 8,
) -> str:
    """
    Build the canonical line (without trailing newline) for a record.

    Format: `<timestamp> [<tag>] <id>, <message>` when the id is included,
    `<timestamp> [<tag>] <message>` otherwise, optionally followed by
    ` {from <func> in <file>:<line>}`.
    """
    head = f"{timestamp(record.timestamp)} [{level_tag(record.severity)}]"
    if include_log_id:
        line = f"{head} {log_id_field(record.log_id, id_width)}, {record.message}"
    else:
        line = f"{head} {record.message}"

    if include_location:
        loc = record.location
        line += f" {{from {loc.func or 'func'} in {loc.file or 'file'}:{loc.line}}}"
    return line


def _split_hex_field(text: str) -> Tuple[str, str]:
    body = text.strip()
    if not body.lower().startswith("0x") or ":" not in body:
        raise ValueError(f"Not a split hex log id: {text!r}")
    high, low = body[2:].split(":", 1)
    if len(high) != 8 or len(low) != 8:
        raise ValueError(f"Not a split hex log id: {text!r}")
    return high, low
