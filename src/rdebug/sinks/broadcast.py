from __future__ import annotations

"""
Broadcast Sink.

Publishes finalized records to at most one in-process subscriber, typically
a viewer that wants the raw message together with its time stamp, location
and level. Delivery is synchronous on the logging thread.
"""

import threading
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

from rdebug.domain.constants import BROADCAST_SLOT, SYSLOG_LEVEL_MAX
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity, allows
from rdebug.domain.values import SourceLocation

if TYPE_CHECKING:
    from rdebug.core.context import LogContext

# (location, timestamp, severity ordinal, log id, message)
Subscriber = Callable[[SourceLocation, datetime, int, int, str], Any]


class BroadcastSink:
    """
    Single-subscriber fan-out of log records.

    Constructing a sink with a non-Silent threshold makes it the active
    broadcast of its context; a Silent one empties the slot.

    Args:
        context: Registry the sink belongs to.
        subscriber: Callable receiving each accepted record.
        max_level: Own verbosity threshold.
    """

    def __init__(
            self,
            context: LogContext,
            subscriber: Optional[Subscriber] = None,
            max_level: Severity = SYSLOG_LEVEL_MAX,
    ) -> None:
        self._context = context
        self._lock = threading.Lock()
        self._subscriber = subscriber
        self._max_level = Severity(max_level)

        if self._max_level <= Severity.SILENT:
            context.clear(BROADCAST_SLOT)
        else:
            context.activate(BROADCAST_SLOT, self)

    def __enter__(self) -> BroadcastSink:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        self.close()
        return False

    @property
    def max_level(self) -> Severity:
        return self._max_level

    def set_max_level(self, level: Severity) -> None:
        self._max_level = Severity(level)

    @property
    def active(self) -> bool:
        return self._context.broadcast_sink is self

    def connect(self, subscriber: Subscriber) -> None:
        """Install the subscriber, replacing the previous one."""
        with self._lock:
            self._subscriber = subscriber

    def disconnect(self) -> None:
        with self._lock:
            self._subscriber = None

    def publish(self, record: LogRecord) -> None:
        """
        Deliver a record to the subscriber if one is connected and the own
        threshold accepts it. No subscriber is a silent outcome, not an error.
        """
        with self._lock:
            subscriber = self._subscriber
        if subscriber is None or not allows(self._max_level, record.severity):
            return
        subscriber(
            record.location,
            record.timestamp,
            int(record.severity),
            record.log_id,
            record.message,
        )

    def close(self) -> None:
        """Leave the active slot, unless a newer sink already superseded us."""
        self._context.release(BROADCAST_SLOT, self)
