from __future__ import annotations

"""
Log Record Lifecycle.

A LogRecord is an ephemeral, per-statement builder. It accumulates a message
body fragment by fragment and, exactly once, resolves its log id and hands
itself to the dispatcher of its LogContext. Finalization is driven either by
the `with` statement (scope guard) or by an explicit `emit()` call; a
finalized flag guarantees single dispatch on every path.
"""

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional

from rdebug.domain.constants import NULL_STRING, VALID_BASES
from rdebug.domain.severity import Severity, allows
from rdebug.domain.values import SourceLocation

if TYPE_CHECKING:
    from rdebug.core.context import LogContext

logger = logging.getLogger(__name__)

_RADIX_SPEC = {2: "b", 8: "o", 16: "x"}


class LogRecord:
    """
    One logical log statement.

    Attributes:
        location: Immutable call-site coordinates.
        severity: Current severity (printf entry points may change it).
        timestamp: Local creation instant; never refreshed at dispatch time.
        log_id: 64-bit correlation id, 0 while unset.
        with_log_id: Whether the id column is rendered/resolved. Starts from
            the owning context's default.
    """

    def __init__(
            self,
            location: SourceLocation,
            severity: Severity = Severity.DEBUG,
            log_id: int = 0,
            *,
            context: Optional[LogContext] = None,
    ) -> None:
        self.location = location
        self.severity = Severity(severity)
        self.timestamp = datetime.now()
        self.log_id = int(log_id) & 0xFFFFFFFFFFFFFFFF
        self._base = 10
        self._parts: List[str] = []
        self._finalized = False
        self._context = context
        self.with_log_id = self.context.with_log_id

    # -------------------------------------------------------------------------
    # SCOPE GUARD
    # -------------------------------------------------------------------------

    def __enter__(self) -> LogRecord:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        self.finalize()
        return False

    # -------------------------------------------------------------------------
    # BUFFER ACCUMULATION
    # -------------------------------------------------------------------------

    @property
    def message(self) -> str:
        """The accumulated message body."""
        return "".join(self._parts)

    @property
    def base(self) -> int:
        return self._base

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def context(self) -> LogContext:
        """The owning context, falling back to the process default one."""
        if self._context is None:
            from rdebug.core.context import default_context
            self._context = default_context()
        return self._context

    def append(self, value: Any) -> LogRecord:
        """
        Append the textual representation of a value to the message body.

        Integers honour the current base, bools render as true/false,
        byte sequences are decoded as UTF-8, None stands for an absent string.

        Args:
            value: Scalar, string, bytes, Address or geometry value.

        Returns:
            LogRecord: self, for chaining.
        """
        self._parts.append(self._render(value))
        return self

    def set_base(self, base: int) -> LogRecord:
        """
        Select the radix used for integers appended from now on.

        Raises:
            ValueError: If base is not one of 2, 8, 10, 16.
        """
        if base not in VALID_BASES:
            raise ValueError(f"Unsupported integer base: {base}")
        self._base = base
        return self

    def hex(self) -> LogRecord:
        return self.set_base(16)

    def dec(self) -> LogRecord:
        return self.set_base(10)

    def oct(self) -> LogRecord:
        return self.set_base(8)

    def bin(self) -> LogRecord:
        return self.set_base(2)

    def _render(self, value: Any) -> str:
        if value is None:
            return NULL_STRING
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return _format_int(int(value), self._base)
        if isinstance(value, float):
            return f"{value:g}"
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).decode("utf-8", errors="replace")
        return str(value)

    # -------------------------------------------------------------------------
    # PRINTF-STYLE ENTRY POINTS
    # -------------------------------------------------------------------------

    def debug(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.DEBUG, template, args, log_id)

    def info(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.INFORMATIONAL, template, args, log_id)

    def note(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.NOTICE, template, args, log_id)

    def warning(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.WARNING, template, args, log_id)

    def error(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.ERROR, template, args, log_id)

    def critical(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.CRITICAL, template, args, log_id)

    def emergency(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        # Most severe level that does not terminate the process
        return self._write(Severity.ALERT, template, args, log_id)

    def fatal(self, template: Optional[str], *args: Any, log_id: Optional[int] = None) -> LogRecord:
        return self._write(Severity.EMERGENCY, template, args, log_id)

    def _write(
            self,
            severity: Severity,
            template: Optional[str],
            args: tuple,
            log_id: Optional[int],
    ) -> LogRecord:
        """
        Shared body of the printf-style entry points.

        Switches the record severity, resolves the id and renders the
        template into the buffer unless the global threshold rejects it.
        """
        self.with_log_id = log_id is not None
        self.log_id = (int(log_id or 0) & 0xFFFFFFFFFFFFFFFF) or os.getpid()
        self.severity = severity

        if not allows(self.context.global_level, severity):
            return self
        if template is None:
            return self

        self._parts.append(format_template(template, args))
        return self

    # -------------------------------------------------------------------------
    # FINALIZATION
    # -------------------------------------------------------------------------

    def finalize(self) -> bool:
        """
        Resolve the log id and dispatch the record, at most once.

        Returns:
            bool: True if this call dispatched, False if already finalized.
        """
        if self._finalized:
            return False
        self._finalized = True

        if self.log_id == 0 and self.with_log_id:
            self.log_id = os.getpid()

        self.context.dispatch(self)
        return True

    emit = finalize

    def __repr__(self) -> str:
        return (
            f"LogRecord(severity={self.severity.name}, log_id={self.log_id}, "
            f"message={self.message!r})"
        )


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def format_template(template: str, args: tuple) -> str:
    """
    Render a printf-style template. Never raises and never truncates.

    Args:
        template: %-style format string.
        args: Positional values for the placeholders.

    Returns:
        str: The rendered text, or the template followed by the raw args
        when they do not match the placeholders.
    """
    if not args:
        return template
    if len(args) == 1 and isinstance(args[0], dict) and args[0]:
        args = args[0]
    try:
        return template % args
    except (TypeError, ValueError, KeyError) as e:
        logger.debug(f"Template/argument mismatch in {template!r}: {e}")
        return f"{template} {args!r}"


def _format_int(value: int, base: int) -> str:
    if base == 10:
        return str(value)
    return format(value, _RADIX_SPEC[base])
