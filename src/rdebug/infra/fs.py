from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Path helpers for the rotating file sink: default log location, numbered
backup naming and safe size probing. Acts as a thin abstraction over the
'os', 'sys' and 'tempfile' modules so the sink stays platform neutral.
"""

import os
import sys
import tempfile
from typing import IO, Optional

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_binary_name() -> str:
    """
    Resolve the file name of the running program.

    Frozen executables report the interpreter binary itself; scripts report
    argv[0]. Falls back to the interpreter name for `-c` / interactive runs.

    Returns:
        str: Bare file name, extension included.
    """
    if getattr(sys, "frozen", False):
        return os.path.basename(sys.executable)

    argv0 = sys.argv[0] if sys.argv else ""
    name = os.path.basename(argv0)
    if not name or name == "-c":
        name = os.path.basename(sys.executable) or "python"
    return name


def get_default_log_path() -> str:
    """
    Calculate `<platform-temp-dir>/<binary-name>.log`.

    Returns:
        str: Absolute path to the default log file.
    """
    return os.path.join(tempfile.gettempdir(), f"{get_binary_name()}.log")


def normalize_path(path: Optional[str]) -> str:
    """
    Normalize a log path, expanding `~` and environment variables.

    An empty or missing path resolves to the default log path.
    """
    p = (path or "").strip()
    if not p:
        return get_default_log_path()
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))


def backup_path(path: str, index: int) -> str:
    """
    Name the backup slot `index` of a log file: `<base>.<index>.<ext>`.

    Slot 0 is the primary file itself. Files without an extension get
    `<base>.<index>`.

    Args:
        path: Primary log file path.
        index: Backup slot number.

    Returns:
        str: Path of the slot.
    """
    if index == 0:
        return path
    base, ext = os.path.splitext(path)
    return f"{base}.{index}{ext}"

# -----------------------------------------------------------------------------
# FILESYSTEM PROBES
# -----------------------------------------------------------------------------

def file_size(path: str) -> int:
    """Size of a file in bytes, -1 if it does not exist or is unreadable."""
    try:
        return os.path.getsize(path)
    except OSError:
        return -1


def handle_size(handle: IO[str]) -> int:
    """Size of the file behind an open handle, -1 if it cannot be probed."""
    try:
        return os.fstat(handle.fileno()).st_size
    except (OSError, ValueError):
        return -1


def ensure_parent_dir(path: str) -> None:
    """
    Create the parent directory hierarchy for a target file.

    Args:
        path: Absolute path to the target file.
    """
    parent = os.path.dirname(os.path.abspath(path))
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)
