from __future__ import annotations

"""
Exception Hierarchy.

Errors surfaced by the logging core. Filtering outcomes (threshold rejection,
missing subscriber) are never errors; only genuine resource failures are.
"""


class RDebugError(Exception):
    """Base class for all errors raised by rdebug."""


class SinkOpenError(RDebugError, OSError):
    """
    Raised when the rotating file sink cannot open its log file.

    Attributes:
        path: The log file path that failed to open.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot open log file '{path}': {reason}")
        self.path = path
