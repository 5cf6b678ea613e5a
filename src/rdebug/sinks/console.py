from __future__ import annotations

"""
Console Sink.

Writes rendered lines to a stdlib logging channel, choosing the stream class
by severity: Alert/Critical/Error go to the error stream, Warning to the warn
stream, everything else to the debug stream. Emergency is written to the
critical stream and then terminates the process (fatal-abort contract).
"""

import logging
import os
import sys
from typing import Callable, Optional

from rdebug.core.formatter import render_line
from rdebug.domain.constants import CONSOLE_CHANNEL, CONSOLE_ID_WIDTH
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity
from rdebug.infra.handlers import ensure_console_handler

logger = logging.getLogger(__name__)

_ERROR_CLASS = (Severity.ALERT, Severity.CRITICAL, Severity.ERROR)
_DEBUG_CLASS = (Severity.NOTICE, Severity.INFORMATIONAL, Severity.DEBUG)


def abort_process() -> None:
    """Flush the standard streams and abort the interpreter."""
    logging.shutdown()
    sys.stdout.flush()
    sys.stderr.flush()
    os.abort()


class ConsoleSink:
    """
    Severity-routed console output.

    Args:
        channel: Logger acting as the console stream. When omitted the
            `rdebug.console` channel is used and given a tagged stderr handler.
        terminator: Called after an Emergency record; defaults to aborting
            the process.
    """

    def __init__(
            self,
            channel: Optional[logging.Logger] = None,
            terminator: Optional[Callable[[], None]] = None,
    ) -> None:
        if channel is None:
            channel = logging.getLogger(CONSOLE_CHANNEL)
            ensure_console_handler(channel)
        self._channel = channel
        self._terminator = terminator or abort_process

    @property
    def max_level(self) -> Severity:
        # Only the global threshold gates the console
        return Severity.ALL

    @property
    def channel(self) -> logging.Logger:
        return self._channel

    def write(self, record: LogRecord) -> None:
        line = render_line(record, include_log_id=record.with_log_id, id_width=CONSOLE_ID_WIDTH)
        severity = record.severity

        if severity == Severity.EMERGENCY:
            self._channel.critical(line)
        elif severity in _ERROR_CLASS:
            self._channel.error(line)
        elif severity == Severity.WARNING:
            self._channel.warning(line)
        elif severity in _DEBUG_CLASS:
            self._channel.debug(line)

    def terminate(self, record: LogRecord) -> None:
        """Run the fatal-abort contract for an Emergency record."""
        logger.debug(f"Emergency record {record.log_id} received; terminating.")
        self._terminator()
