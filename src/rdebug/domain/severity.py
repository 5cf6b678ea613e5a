from __future__ import annotations

"""
Severity Scale.

Defines the BSD-syslog severity ordinals plus the two sentinel thresholds
(Silent, All) and the verbosity comparison rule. Lower ordinals are MORE
severe; a threshold lets a record through when its ordinal is greater than
or equal to the record's.
"""

from enum import IntEnum
from typing import Any, Dict, Optional


class Severity(IntEnum):
    """
    Ordered syslog severities. The integer values are part of the public
    interface (config files, subscriber callbacks) and must stay stable.
    """
    SILENT = -1
    EMERGENCY = 0
    ALERT = 1
    CRITICAL = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFORMATIONAL = 6
    DEBUG = 7
    ALL = 255


# Case-insensitive aliases accepted by parse_severity()
_ALIASES: Dict[str, Severity] = {
    "SILENT": Severity.SILENT,
    "NONE": Severity.SILENT,
    "OFF": Severity.SILENT,
    "EMERGENCY": Severity.EMERGENCY,
    "EMERG": Severity.EMERGENCY,
    "EMRG": Severity.EMERGENCY,
    "FATAL": Severity.EMERGENCY,
    "ALERT": Severity.ALERT,
    "ALRT": Severity.ALERT,
    "CRITICAL": Severity.CRITICAL,
    "CRIT": Severity.CRITICAL,
    "ERROR": Severity.ERROR,
    "ERR": Severity.ERROR,
    "ERR!": Severity.ERROR,
    "WARNING": Severity.WARNING,
    "WARN": Severity.WARNING,
    "NOTICE": Severity.NOTICE,
    "NOTE": Severity.NOTICE,
    "INFORMATIONAL": Severity.INFORMATIONAL,
    "INFO": Severity.INFORMATIONAL,
    "DEBUG": Severity.DEBUG,
    "DEBG": Severity.DEBUG,
    "ALL": Severity.ALL,
}


def allows(threshold: int, severity: int) -> bool:
    """
    Decide whether a record of the given severity passes a threshold.

    Args:
        threshold: Configured maximum verbosity (a Severity or its int value).
        severity: Severity of the record being offered.

    Returns:
        bool: True when `threshold >= severity`. SILENT rejects everything,
        ALL accepts every real severity.
    """
    if threshold <= Severity.SILENT:
        return False
    return int(threshold) >= int(severity)


def parse_severity(value: Any, default: Optional[Severity] = None) -> Optional[Severity]:
    """
    Convert a config/CLI representation into a Severity.

    Accepts Severity members, their integer values (also as digit strings)
    and the names/aliases in _ALIASES.

    Args:
        value: Raw value to interpret.
        default: Returned when the value cannot be interpreted.

    Returns:
        Optional[Severity]: The parsed severity or the default.
    """
    if isinstance(value, Severity):
        return value
    if isinstance(value, bool) or value is None:
        return default

    if isinstance(value, int):
        try:
            return Severity(value)
        except ValueError:
            return default

    text = str(value).strip().upper()
    if not text:
        return default
    if text.lstrip("-").isdigit():
        return parse_severity(int(text), default)
    return _ALIASES.get(text, default)
