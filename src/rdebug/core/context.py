from __future__ import annotations

"""
Logging Context and Dispatcher.

The LogContext replaces process-wide singletons with one explicit registry:
it owns the global threshold, the context-wide code-location flag and the
"at most one active sink of each kind" slots. `dispatch()` fans a finalized
record out to the broadcast, console and file sinks, in that fixed order.

All registry mutations go through a re-entrant lock so level changes, sink
(de)registration and concurrent log calls observe a consistent snapshot.
Sink work itself runs synchronously on the caller's thread.
"""

import logging
import os
import threading
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from rdebug.domain.constants import (
    BROADCAST_SLOT,
    CONSOLE_SLOT,
    FILE_SLOT,
    LEVEL_ENV_VAR,
    SYSLOG_LEVEL_MAX,
    SYSLOG_WITH_NUMERIC_8DIGITS_ID,
)
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity, allows, parse_severity
from rdebug.sinks.console import ConsoleSink, abort_process

if TYPE_CHECKING:
    from rdebug.sinks.broadcast import BroadcastSink
    from rdebug.sinks.rotating_file import RotatingFileSink

logger = logging.getLogger(__name__)

# Fixed dispatch order
_SLOTS = (BROADCAST_SLOT, CONSOLE_SLOT, FILE_SLOT)

_default_context: Optional[LogContext] = None
_default_lock = threading.Lock()


class LogContext:
    """
    Registry of the global threshold and the active sinks.

    Args:
        global_level: Initial global threshold. Defaults to the RDEBUG_LEVEL
            environment variable, then to SYSLOG_LEVEL_MAX.
        console: Console sink to install. True installs a default
            ConsoleSink, False/None leaves the console slot empty.
        terminator: Ends the process after an Emergency record when no
            console sink is installed; defaults to aborting the process.
    """

    def __init__(
            self,
            global_level: Optional[Severity] = None,
            console: Any = True,
            terminator: Optional[Callable[[], None]] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._terminator = terminator or abort_process
        if global_level is None:
            global_level = parse_severity(os.environ.get(LEVEL_ENV_VAR), SYSLOG_LEVEL_MAX)
        self._global_level = Severity(global_level)
        self._code_locations = False
        self.with_log_id = SYSLOG_WITH_NUMERIC_8DIGITS_ID
        self._slots = {name: None for name in _SLOTS}

        if console is True:
            console = ConsoleSink()
        if console:
            self._slots[CONSOLE_SLOT] = console

    # -------------------------------------------------------------------------
    # GLOBAL THRESHOLD
    # -------------------------------------------------------------------------

    @property
    def global_level(self) -> Severity:
        with self._lock:
            return self._global_level

    def set_global_level(self, level: Severity) -> None:
        with self._lock:
            self._global_level = Severity(level)

    # -------------------------------------------------------------------------
    # CODE LOCATIONS (file sink rendering)
    # -------------------------------------------------------------------------

    @property
    def code_locations(self) -> bool:
        with self._lock:
            return self._code_locations

    def enable_code_locations(self, enable: bool = True) -> None:
        with self._lock:
            self._code_locations = bool(enable)

    # -------------------------------------------------------------------------
    # SINK REGISTRY
    # -------------------------------------------------------------------------

    @property
    def broadcast_sink(self) -> Optional[BroadcastSink]:
        with self._lock:
            return self._slots[BROADCAST_SLOT]

    @property
    def console_sink(self) -> Optional[ConsoleSink]:
        with self._lock:
            return self._slots[CONSOLE_SLOT]

    @property
    def file_sink(self) -> Optional[RotatingFileSink]:
        with self._lock:
            return self._slots[FILE_SLOT]

    def set_console_sink(self, sink: Optional[ConsoleSink]) -> None:
        with self._lock:
            self._slots[CONSOLE_SLOT] = sink

    def activate(self, slot: str, sink: Any) -> None:
        """Make `sink` the active one of its kind, superseding any previous one."""
        with self._lock:
            self._slots[slot] = sink

    def clear(self, slot: str) -> None:
        with self._lock:
            self._slots[slot] = None

    def release(self, slot: str, sink: Any) -> bool:
        """
        Clear a slot only if `sink` still occupies it.

        Returns:
            bool: True if the slot was cleared.
        """
        with self._lock:
            if self._slots[slot] is sink:
                self._slots[slot] = None
                return True
            return False

    # -------------------------------------------------------------------------
    # DISPATCH
    # -------------------------------------------------------------------------

    def dispatch(self, record: LogRecord) -> None:
        """
        Offer a finalized record to every active sink.

        Each sink is gated by the global threshold and its own threshold.
        A failing sink is reported and skipped. An Emergency record that
        passes the global threshold terminates the process once every sink
        ran: through the console sink when one is installed, through the
        context terminator otherwise.
        """
        with self._lock:
            global_level = self._global_level
            snapshot: List[Tuple[str, Any]] = [(name, self._slots[name]) for name in _SLOTS]

        severity = record.severity
        if not allows(global_level, severity):
            return

        for name, sink in snapshot:
            if sink is None or not allows(sink.max_level, severity):
                continue
            try:
                if name == BROADCAST_SLOT:
                    sink.publish(record)
                else:
                    sink.write(record)
            except Exception as e:
                logger.warning(f"Sink '{name}' failed to handle record: {e}", exc_info=True)

        if severity != Severity.EMERGENCY:
            return

        console = dict(snapshot)[CONSOLE_SLOT]
        if console is not None:
            console.terminate(record)
        else:
            logger.debug(f"Emergency record {record.log_id} received; terminating.")
            self._terminator()


# -----------------------------------------------------------------------------
# PROCESS DEFAULT CONTEXT
# -----------------------------------------------------------------------------

def default_context() -> LogContext:
    """Return the lazily created process-wide context."""
    global _default_context
    with _default_lock:
        if _default_context is None:
            _default_context = LogContext()
        return _default_context


def set_default_context(context: Optional[LogContext]) -> None:
    """Install (or with None, drop) the process-wide context."""
    global _default_context
    with _default_lock:
        _default_context = context
