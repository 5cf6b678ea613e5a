from __future__ import annotations

"""
Rotating File Sink.

Owns one append-only log file and keeps it bounded in size and count:

- Before every write the live file size is compared against
  `max_size - ROTATION_RESERVE`; an oversized file is closed with a marker,
  shifted into the numbered backup chain and reopened.
- Backups are named `<base>.<N>.<ext>`, N = 1 being the newest. The chain is
  contiguous and never grows past `max_backups - 1` entries; the oldest
  backup is overwritten once the cap is reached.
- Every line is flushed immediately, trading throughput for crash-forensic
  durability. Open, rotate, write and close are serialized per instance.
"""

import logging
import os
import sys
import threading
from typing import IO, TYPE_CHECKING, Any, Optional

from rdebug.core.formatter import render_line
from rdebug.domain.constants import (
    CLOSED_MARKER,
    DEFAULT_MAX_BACKUPS,
    DEFAULT_MAX_SIZE,
    FILE_ID_WIDTH,
    FILE_SLOT,
    MIN_FILE_SIZE,
    OPENED_MARKER,
    ROTATED_MARKER,
    ROTATION_RESERVE,
    SYSLOG_LEVEL_MAX,
)
from rdebug.domain.record import LogRecord
from rdebug.domain.severity import Severity, allows
from rdebug.domain.values import SourceLocation
from rdebug.errors import SinkOpenError
from rdebug.infra.fs import backup_path, ensure_parent_dir, file_size, handle_size, normalize_path

if TYPE_CHECKING:
    from rdebug.core.context import LogContext

logger = logging.getLogger(__name__)


class RotatingFileSink:
    """
    Size- and count-bounded log file.

    Args:
        context: Registry the sink belongs to.
        path: Log file path; empty means `<tempdir>/<binary>.log`.
        max_level: Own verbosity threshold. Silent leaves the sink inactive
            and never touches the file system.
        max_backups: Backup retention; at most `max_backups - 1` numbered
            backups are kept.
        max_size: Size limit in bytes, never below 64 KiB.

    Raises:
        SinkOpenError: If the log file cannot be opened.
    """

    def __init__(
            self,
            context: LogContext,
            path: str = "",
            max_level: Severity = SYSLOG_LEVEL_MAX,
            max_backups: int = DEFAULT_MAX_BACKUPS,
            max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        self._context = context
        self._lock = threading.Lock()
        self._handle: Optional[IO[str]] = None
        self._max_level = Severity(max_level)
        self._max_backups = int(max_backups)
        self._max_size = max(int(max_size), MIN_FILE_SIZE)
        self._path = normalize_path(path)

        if self._max_level <= Severity.SILENT:
            context.clear(FILE_SLOT)
            return

        with self._lock:
            # Resume of an oversized previous run
            if file_size(self._path) > self._limit():
                self._shift_backups()
            self._open("CTor", OPENED_MARKER)

        context.activate(FILE_SLOT, self)
        logger.debug(f"RotatingFileSink: Logging to {self._path}")

    def __enter__(self) -> RotatingFileSink:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        self.close()
        return False

    # -------------------------------------------------------------------------
    # PROPERTIES & RUNTIME MUTATORS
    # -------------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self._path

    @property
    def max_level(self) -> Severity:
        return self._max_level

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def max_backups(self) -> int:
        return self._max_backups

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    @property
    def active(self) -> bool:
        return self._context.file_sink is self

    def set_max_level(self, level: Severity) -> None:
        self._max_level = Severity(level)

    def set_max_size(self, max_size: int) -> None:
        """Takes effect on the next rotation decision."""
        self._max_size = max(int(max_size), MIN_FILE_SIZE)

    def set_max_backups(self, max_backups: int) -> None:
        """Takes effect on the next rotation."""
        self._max_backups = int(max_backups)

    def enable_code_locations(self, enable: bool = True) -> None:
        """Append `{from <func> in <file>:<line>}` to every following line, context-wide."""
        self._context.enable_code_locations(enable)

    # -------------------------------------------------------------------------
    # WRITE PATH
    # -------------------------------------------------------------------------

    def write(self, record: LogRecord) -> None:
        """
        Append a record, rotating first when the file is oversized.

        Writes against a closed sink are silently dropped.

        Raises:
            SinkOpenError: If the file cannot be reopened after a rotation.
        """
        if not allows(self._max_level, record.severity):
            return

        with self._lock:
            if self._handle is None:
                return
            self._rotate_if_needed()
            self._write_line(record)

    def rotate_if_needed(self) -> bool:
        """
        Roll the file over if it grew past `max_size - ROTATION_RESERVE`.

        Returns:
            bool: True if a rotation took place.
        """
        with self._lock:
            return self._rotate_if_needed()

    def rotate(self) -> None:
        """Force a rollover regardless of the current size."""
        with self._lock:
            if self._handle is None:
                self._shift_backups()
                return
            self._rollover()

    def close(self) -> None:
        """
        Write the closed marker, release the handle and leave the active slot
        unless a newer sink already superseded this one. Idempotent.
        """
        try:
            with self._lock:
                if self._handle is not None:
                    self._close("DTor", CLOSED_MARKER)
        finally:
            self._context.release(FILE_SLOT, self)

    # -------------------------------------------------------------------------
    # INTERNALS (lock held)
    # -------------------------------------------------------------------------

    def _limit(self) -> int:
        return self._max_size - ROTATION_RESERVE

    def _rotate_if_needed(self) -> bool:
        if self._handle is None or handle_size(self._handle) <= self._limit():
            return False
        self._rollover()
        return True

    def _rollover(self) -> None:
        self._close("Rotator", ROTATED_MARKER)
        self._shift_backups()
        self._open("Rotator", ROTATED_MARKER)
        logger.debug(f"RotatingFileSink: Rotated {self._path}")

    def _shift_backups(self) -> None:
        """
        Install the primary file as backup 1, moving every backup one slot up.

        Probes slots 1..max_backups-1 for the first free one (K), or settles
        on the last slot when all exist, then renames slot N-1 into slot N for
        N = K..1. With the cap reached the oldest backup is overwritten.
        """
        if self._max_backups <= 1:
            # No retention: start over with an empty file
            self._discard(self._path)
            return

        last = self._max_backups - 1
        free = 1
        while free < last and os.path.exists(backup_path(self._path, free)):
            free += 1

        for index in range(free, 0, -1):
            used = backup_path(self._path, index - 1)
            if not os.path.exists(used):
                continue
            try:
                os.replace(used, backup_path(self._path, index))
            except OSError as e:
                logger.warning(f"RotatingFileSink: Cannot move {used} to slot {index}: {e}")

    def _discard(self, path: str) -> None:
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            logger.warning(f"RotatingFileSink: Cannot discard {path}: {e}")

    def _open(self, where: str, reason: str) -> None:
        try:
            ensure_parent_dir(self._path)
            self._handle = open(self._path, "a", encoding="utf-8", errors="backslashreplace")
        except OSError as e:
            self._handle = None
            raise SinkOpenError(self._path, str(e)) from e
        self._write_marker(where, reason)

    def _close(self, where: str, reason: str) -> None:
        try:
            self._write_marker(where, reason)
        finally:
            handle, self._handle = self._handle, None
            handle.close()

    def _write_marker(self, where: str, reason: str) -> None:
        # Markers bypass every threshold
        here = SourceLocation(__file__, sys._getframe(1).f_lineno, where)
        marker = LogRecord(here, Severity.NOTICE, 0, context=self._context)
        marker.append(reason)
        self._write_line(marker)

    def _write_line(self, record: LogRecord) -> None:
        line = render_line(
            record,
            include_log_id=True,
            include_location=self._context.code_locations,
            id_width=FILE_ID_WIDTH,
        )
        self._handle.write(line + "\n")
        self._handle.flush()
