from __future__ import annotations

"""
rdebug: leveled logging core.

Severity-tagged records are formatted, filtered against a global and a
per-sink threshold, and fanned out to a subscriber broadcast, the console
and a size/count-bounded rotating file.

The module-level helpers (debug, info, ...) log through the process
default context.
"""

from typing import Any, Optional

from rdebug.core.context import LogContext, default_context, set_default_context
from rdebug.core.formatter import level_tag, log_id_field, parse_log_id_field, render_line, timestamp
from rdebug.core.logger import Logger, get_logger
from rdebug.domain.config import RDebugConfig, load_config, save_config, validate_config
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity, allows, parse_severity
from rdebug.domain.values import Address, Point, Rect, Size, SourceLocation
from rdebug.errors import RDebugError, SinkOpenError
from rdebug.infra.bootstrap import configure_rdebug, shutdown
from rdebug.sinks.broadcast import BroadcastSink
from rdebug.sinks.console import ConsoleSink
from rdebug.sinks.rotating_file import RotatingFileSink

__version__ = "1.0.0"

__all__ = [
    "Address",
    "BroadcastSink",
    "ConsoleSink",
    "LogContext",
    "LogRecord",
    "Logger",
    "Point",
    "RDebugConfig",
    "RDebugError",
    "Rect",
    "RotatingFileSink",
    "Severity",
    "SinkOpenError",
    "Size",
    "SourceLocation",
    "allows",
    "configure_rdebug",
    "critical",
    "debug",
    "default_context",
    "emergency",
    "error",
    "fatal",
    "get_logger",
    "info",
    "level_tag",
    "load_config",
    "log_id_field",
    "note",
    "parse_log_id_field",
    "parse_severity",
    "render_line",
    "save_config",
    "set_default_context",
    "shutdown",
    "timestamp",
    "validate_config",
    "warning",
]


def debug(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().debug(template, *args, log_id=log_id, stacklevel=2)


def info(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().info(template, *args, log_id=log_id, stacklevel=2)


def note(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().note(template, *args, log_id=log_id, stacklevel=2)


def warning(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().warning(template, *args, log_id=log_id, stacklevel=2)


def error(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().error(template, *args, log_id=log_id, stacklevel=2)


def critical(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().critical(template, *args, log_id=log_id, stacklevel=2)


def emergency(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().emergency(template, *args, log_id=log_id, stacklevel=2)


def fatal(template: Optional[str], *args: Any, log_id: Optional[int] = None) -> Optional[LogRecord]:
    return Logger().fatal(template, *args, log_id=log_id, stacklevel=2)
