from __future__ import annotations

"""
Logger Facade.

Convenience entry points bound to a LogContext. Each printf-style call
captures the caller's source location, builds a LogRecord, formats the
template into it and finalizes it before returning. `stream()` hands out a
record for incremental building inside a `with` block instead.
"""

import sys
from typing import Any, Optional

from rdebug.core.context import LogContext, default_context
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity
from rdebug.domain.values import SourceLocation


def _caller(depth: int) -> SourceLocation:
    """Location of the frame `depth` levels above this function."""
    try:
        frame = sys._getframe(depth)
    except ValueError:
        return SourceLocation()
    code = frame.f_code
    return SourceLocation(code.co_filename, frame.f_lineno, code.co_name)


class Logger:
    """
    Printf-style logging bound to one context.

    Args:
        context: Target context; the process default one when omitted.
    """

    def __init__(self, context: Optional[LogContext] = None) -> None:
        self._context = context

    @property
    def context(self) -> LogContext:
        if self._context is None:
            self._context = default_context()
        return self._context

    def stream(self, severity: Severity = Severity.DEBUG, log_id: int = 0) -> LogRecord:
        """
        Start a record for incremental building.

        Usage:
            with log.stream(Severity.NOTICE) as rec:
                rec.append("value=").hex().append(255)
        """
        return LogRecord(_caller(2), severity, log_id, context=self.context)

    def debug(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
              stacklevel: int = 1) -> Optional[LogRecord]:
        return self._log("debug", template, args, log_id, stacklevel)

    def info(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
             stacklevel: int = 1) -> Optional[LogRecord]:
        return self._log("info", template, args, log_id, stacklevel)

    def note(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
             stacklevel: int = 1) -> Optional[LogRecord]:
        return self._log("note", template, args, log_id, stacklevel)

    def warning(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
                stacklevel: int = 1) -> Optional[LogRecord]:
        return self._log("warning", template, args, log_id, stacklevel)

    def error(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
              stacklevel: int = 1) -> Optional[LogRecord]:
        return self._log("error", template, args, log_id, stacklevel)

    def critical(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
                 stacklevel: int = 1) -> Optional[LogRecord]:
        return self._log("critical", template, args, log_id, stacklevel)

    def emergency(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
                  stacklevel: int = 1) -> Optional[LogRecord]:
        """Alert-level message; does not terminate the process."""
        return self._log("emergency", template, args, log_id, stacklevel)

    def fatal(self, template: Optional[str], *args: Any, log_id: Optional[int] = None,
              stacklevel: int = 1) -> Optional[LogRecord]:
        """Emergency-level message; the console sink terminates the process."""
        return self._log("fatal", template, args, log_id, stacklevel)

    def _log(
            self,
            method: str,
            template: Optional[str],
            args: tuple,
            log_id: Optional[int],
            stacklevel: int,
    ) -> Optional[LogRecord]:
        if template is None:
            return None

        # _caller -> _log -> public method -> caller
        record = LogRecord(_caller(2 + stacklevel), context=self.context)
        with record:
            getattr(record, method)(template, *args, log_id=log_id)
        return record


def get_logger(context: Optional[LogContext] = None) -> Logger:
    """Acquire a Logger bound to `context` (or the process default one)."""
    return Logger(context)
