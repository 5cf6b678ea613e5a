from __future__ import annotations

"""
Command Line Demo Application.

Orchestrates the demo lifecycle: configuration loading and merging (defaults,
JSON file, CLI overrides), context bootstrap, an optional stdout subscriber on
the broadcast sink, and a job that emits messages at every non-fatal
severity in both printf and stream style.
"""

import json
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rdebug.core.context import LogContext
from rdebug.core.logger import Logger
from rdebug.domain.config import load_config, validate_config
from rdebug.domain.severity import Severity
from rdebug.domain.values import SourceLocation
from rdebug.infra.bootstrap import configure_rdebug, shutdown
from rdebug.interface.cli import args as cli_args
from rdebug.sinks.broadcast import BroadcastSink

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the demo workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, 2 for invalid configuration).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Resolve configuration hierarchy
    base_conf = load_config(args.config_path).to_dict()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    cfg, warnings = validate_config(raw_conf)

    for w in warnings:
        print(f"WARNING: {w}", file=sys.stderr)

    if args.dump_config:
        print(json.dumps(cfg.to_dict(), ensure_ascii=False, indent=2))
        return 0

    if args.count < 0:
        print("ERROR: --count must not be negative", file=sys.stderr)
        return 2

    # 2. Context bootstrap
    context = LogContext(global_level=cfg.global_level, console=cfg.console)
    configure_rdebug(cfg, context)

    subscriber: Optional[BroadcastSink] = None
    if args.subscribe:
        subscriber = BroadcastSink(context, _print_delivery, max_level=cfg.broadcast_level)

    # 3. Job execution
    try:
        log = Logger(context)
        for _ in range(args.count):
            run_job(log)
    finally:
        if subscriber is not None:
            subscriber.close()
        shutdown(context)

    print("=== Good Bye! ===")
    return 0

# -----------------------------------------------------------------------------
# DEMO JOB
# -----------------------------------------------------------------------------

def run_job(log: Logger) -> None:
    """Emit one round of sample messages at every non-fatal severity."""
    with log.stream(Severity.DEBUG) as rec:
        rec.append("running...")

    i = 8
    while i >= 0:
        with log.stream(Severity.DEBUG) as rec:
            rec.append("loop ").append(i).append(" performed")
        i -= 1

    with log.stream(Severity.INFORMATIONAL) as rec:
        rec.append("stream: 255 in hex is ").hex().append(255).dec().append(", as bool ").append(True)

    log.debug("printf: Debug Message %d", 1)
    log.info("printf: Info Message %s", "text")
    log.note("printf: Notice Message with id", log_id=0x1234)
    log.warning("printf: Warning Message %.2f", 3.14159)
    log.error("printf: Error Message")
    log.critical("printf: Critical Message")
    log.emergency("printf: Alert Message (non-fatal)")


def _print_delivery(
        location: SourceLocation,
        moment: datetime,
        level: int,
        log_id: int,
        message: str,
) -> None:
    print(f"[broadcast] level={level} id={log_id} {location.func}: {message}")


def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    merged.update(overrides)
    return merged
