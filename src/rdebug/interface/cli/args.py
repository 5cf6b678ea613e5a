from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the demo runner and translates the raw
argparse namespace into configuration overrides understood by
`validate_config`.
"""

import argparse
from typing import Any, Dict

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the rdebug demo.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="rdebug-demo",
        description="Emit sample messages at every severity through rdebug sinks.",
    )

    # --- Configuration Sources ---
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="JSON configuration file merged over the defaults.",
    )

    # --- Thresholds ---
    p.add_argument(
        "-l", "--level",
        dest="global_level",
        default=None,
        help="Global threshold (name like 'warning' or value -1..7, 255).",
    )
    p.add_argument(
        "--file-level",
        dest="file_level",
        default=None,
        help="Own threshold of the rotating file sink.",
    )

    # --- Rotating File ---
    p.add_argument(
        "-f", "--log-file",
        dest="file_path",
        default=None,
        help="Log file path. Use '' for <tempdir>/<binary>.log.",
    )
    p.add_argument(
        "--max-size",
        dest="max_size",
        type=int,
        default=None,
        help="Rotation size in bytes (minimum 65536).",
    )
    p.add_argument(
        "--max-backups",
        dest="max_backups",
        type=int,
        default=None,
        help="Backup retention count.",
    )
    p.add_argument(
        "--code-locations",
        action="store_true",
        help="Append '{from <func> in <file>:<line>}' to file lines.",
    )

    # --- Console & Broadcast ---
    p.add_argument(
        "--no-console",
        action="store_true",
        help="Disable the console sink.",
    )
    p.add_argument(
        "--subscribe",
        action="store_true",
        help="Print broadcast deliveries to stdout.",
    )

    # --- Execution ---
    p.add_argument(
        "-n", "--count",
        type=int,
        default=1,
        help="How many times the demo job runs.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    return p


# -----------------------------------------------------------------------------
# NAMESPACE MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate parsed arguments into configuration overrides.

    Only options the user actually supplied are returned, so config-file
    values survive unless explicitly overridden.

    Args:
        args: Parsed namespace.

    Returns:
        Dict[str, Any]: Overrides keyed by RDebugConfig field names.
    """
    overrides: Dict[str, Any] = {}

    for field in ("global_level", "file_level", "file_path", "max_size", "max_backups"):
        value = getattr(args, field, None)
        if value is not None:
            overrides[field] = value

    if args.code_locations:
        overrides["code_locations"] = True
    if args.no_console:
        overrides["console"] = False

    return overrides
