from __future__ import annotations

"""
Configuration Domain Management.

Defines the immutable configuration of a logging context and its JSON
persistence. Raw dictionaries (config files, CLI overrides) are validated
and coerced into an RDebugConfig, collecting human-readable warnings
instead of failing on malformed input.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from rdebug.domain.constants import (
    DEFAULT_MAX_BACKUPS,
    DEFAULT_MAX_SIZE,
    LEVEL_ENV_VAR,
    MIN_FILE_SIZE,
    SYSLOG_LEVEL_MAX,
    SYSLOG_WITH_NUMERIC_8DIGITS_ID,
)
from rdebug.domain.severity import Severity, parse_severity

logger = logging.getLogger(__name__)

_LEVEL_FIELDS = ("global_level", "file_level", "broadcast_level")
_BOOL_FIELDS = ("console", "code_locations", "with_log_id")


# -----------------------------------------------------------------------------
# Configuration Model
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RDebugConfig:
    """
    Immutable specification of a logging context.

    Attributes:
        global_level: Global verbosity threshold applied before every sink.
        console: Whether the console sink is installed.
        file_path: Rotating log file path. None disables the file sink,
            an empty string selects `<tempdir>/<binary>.log`.
        file_level: Own threshold of the rotating file sink.
        max_backups: Backup retention of the file sink.
        max_size: Rotation size limit in bytes (floor 64 KiB).
        code_locations: Append the call-site suffix to file lines.
        broadcast_level: Own threshold of the broadcast sink.
        with_log_id: Default for the id column of stream-built records.
    """
    global_level: Severity = SYSLOG_LEVEL_MAX
    console: bool = True

    file_path: Optional[str] = None
    file_level: Severity = SYSLOG_LEVEL_MAX
    max_backups: int = DEFAULT_MAX_BACKUPS
    max_size: int = DEFAULT_MAX_SIZE
    code_locations: bool = False

    broadcast_level: Severity = SYSLOG_LEVEL_MAX
    with_log_id: bool = SYSLOG_WITH_NUMERIC_8DIGITS_ID

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; levels are written as their integer values."""
        data = asdict(self)
        for field in _LEVEL_FIELDS:
            data[field] = int(data[field])
        return data


def get_default_config() -> RDebugConfig:
    """
    Build the default configuration, honouring the RDEBUG_LEVEL override
    for the global threshold.
    """
    level = parse_severity(os.environ.get(LEVEL_ENV_VAR), SYSLOG_LEVEL_MAX)
    return RDebugConfig(global_level=level)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(path: Optional[str]) -> RDebugConfig:
    """
    Load a configuration file merged over the defaults.

    Missing or corrupted files are not fatal: the defaults are returned and
    the problem is logged.

    Args:
        path: JSON file path; None returns the defaults.

    Returns:
        RDebugConfig: The validated configuration.
    """
    if not path:
        return get_default_config()
    if not os.path.exists(path):
        logger.debug(f"Config file {path} not found. Using defaults.")
        return get_default_config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config {path}: {e}. Using defaults.")
        return get_default_config()

    cfg, warnings = validate_config(data)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")
    return cfg


def save_config(cfg: RDebugConfig, path: str) -> None:
    """
    Persist a configuration as JSON.

    Args:
        cfg: Configuration to store.
        path: Target file path.
    """
    try:
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cfg.to_dict(), f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[RDebugConfig, List[str]]:
    """
    Validate and coerce a raw configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises on invalid values instead of falling back.

    Returns:
        Tuple[RDebugConfig, List[str]]: The normalized configuration and
        a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        return defaults, warnings

    known = set(defaults.to_dict())
    for key in config:
        if key not in known:
            warnings.append(f"Unknown field '{key}' ignored.")

    values: Dict[str, Any] = {}
    for field in _LEVEL_FIELDS:
        values[field] = _as_level(config.get(field), getattr(defaults, field), field, warnings, strict)
    for field in _BOOL_FIELDS:
        values[field] = _as_bool(config.get(field), getattr(defaults, field), field, warnings, strict)

    values["file_path"] = _as_optional_str(config.get("file_path", defaults.file_path), "file_path", warnings, strict)
    values["max_backups"] = _as_int(config.get("max_backups"), defaults.max_backups, "max_backups", warnings, strict)
    values["max_size"] = _as_int(config.get("max_size"), defaults.max_size, "max_size", warnings, strict)

    if values["max_size"] < MIN_FILE_SIZE:
        warnings.append(f"Field 'max_size' raised from {values['max_size']} to {MIN_FILE_SIZE}.")
        values["max_size"] = MIN_FILE_SIZE

    return replace(defaults, **values), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_level(value: Any, fallback: Severity, field: str, warnings: List[str], strict: bool) -> Severity:
    """Accept severity names, aliases and the public integer values."""
    if value is None:
        return fallback
    level = parse_severity(value)
    if level is not None:
        return level

    msg = f"Invalid field '{field}': unknown severity {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce integers, also from numeric strings."""
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and not strict:
        try:
            return int(value.strip(), 0)
        except ValueError:
            pass

    msg = f"Invalid field '{field}': expected int, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_optional_str(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[str]:
    """Validate an optional path string; empty strings are kept (default path)."""
    if value is None or isinstance(value, str):
        return value.strip() if isinstance(value, str) else None

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} File sink disabled.")
    return None
