from __future__ import annotations

"""
Domain Constants.

Centralizes the build/deploy-time defaults of the logging core: the default
verbosity threshold, log-id rendering preferences, rotation limits and the
marker lines written by the rotating file sink.
"""

from rdebug.domain.severity import Severity

# -----------------------------------------------------------------------------
# THRESHOLD DEFAULTS
# -----------------------------------------------------------------------------

# Default verbosity for the global threshold and every sink, overridable
# through the RDEBUG_LEVEL environment variable or the runtime setters.
SYSLOG_LEVEL_MAX: Severity = Severity.WARNING
LEVEL_ENV_VAR = "RDEBUG_LEVEL"

# Records start with the numeric id column enabled
SYSLOG_WITH_NUMERIC_8DIGITS_ID = True

# -----------------------------------------------------------------------------
# FILE SINK LIMITS
# -----------------------------------------------------------------------------

MIN_FILE_SIZE = 0x10000
DEFAULT_MAX_SIZE = 2 * 1024 * 1024
DEFAULT_MAX_BACKUPS = 5

# Room kept free below max_size so the closing marker always fits
ROTATION_RESERVE = 128

OPENED_MARKER = "========== logfile opened =========="
CLOSED_MARKER = "========== logfile closed =========="
ROTATED_MARKER = "~~~~~~~~~~ logfile rotated ~~~~~~~~~~"

# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

CONSOLE_ID_WIDTH = 8
FILE_ID_WIDTH = 0
VALID_BASES = (2, 8, 10, 16)
NULL_STRING = "(nullptr)"

CONSOLE_CHANNEL = "rdebug.console"

# -----------------------------------------------------------------------------
# SINK REGISTRY SLOTS
# -----------------------------------------------------------------------------

BROADCAST_SLOT = "broadcast"
CONSOLE_SLOT = "console"
FILE_SLOT = "file"
