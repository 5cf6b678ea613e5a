from __future__ import annotations

"""
Logging Context Bootstrap.

Maintains the idempotent lifecycle of a LogContext: applies an RDebugConfig
(thresholds, console, rotating file), remembers that the context has been
configured, and registers an exit hook so the file sink writes its closed
marker on interpreter shutdown.
"""

import atexit
import logging
import sys
from typing import Optional

from rdebug.core.context import LogContext, default_context
from rdebug.domain.config import RDebugConfig
from rdebug.errors import SinkOpenError
from rdebug.sinks.console import ConsoleSink
from rdebug.sinks.rotating_file import RotatingFileSink

logger = logging.getLogger(__name__)

# Internal state flags for idempotency and lifecycle tracking
_CONFIGURED_FLAG_ATTR: str = "_rdebug_configured"
_EXIT_HOOK_ATTR: str = "_rdebug_exit_hook"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_rdebug(
        cfg: RDebugConfig,
        context: Optional[LogContext] = None,
        *,
        force: bool = False,
) -> LogContext:
    """
    Apply a configuration to a context, once.

    Re-running without `force` returns the context untouched. With `force`
    the previous file sink is closed before the new one is opened. A log
    file that cannot be opened leaves the context running without file sink
    and reports the failure on stderr.

    Args:
        cfg: Configuration to apply.
        context: Target context; the process default one when omitted.
        force: If True, bypass the idempotency check.

    Returns:
        LogContext: The configured context.
    """
    ctx = context if context is not None else default_context()

    already_configured = bool(getattr(ctx, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return ctx

    # 1. Thresholds and rendering defaults
    ctx.set_global_level(cfg.global_level)
    ctx.with_log_id = cfg.with_log_id
    ctx.enable_code_locations(cfg.code_locations)

    # 2. Console
    if not cfg.console:
        ctx.set_console_sink(None)
    elif ctx.console_sink is None:
        ctx.set_console_sink(ConsoleSink())

    # 3. Broadcast keeps its subscriber, only the threshold follows the config
    broadcast = ctx.broadcast_sink
    if broadcast is not None:
        broadcast.set_max_level(cfg.broadcast_level)

    # 4. Rotating file
    _close_file_sink(ctx)
    if cfg.file_path is not None:
        _create_file_sink(ctx, cfg)

    setattr(ctx, _CONFIGURED_FLAG_ATTR, True)
    if not getattr(ctx, _EXIT_HOOK_ATTR, False):
        atexit.register(shutdown, ctx)
        setattr(ctx, _EXIT_HOOK_ATTR, True)

    logger.debug(f"Context configured: global level {ctx.global_level.name}")
    return ctx


def shutdown(context: Optional[LogContext] = None) -> None:
    """
    Close the file and broadcast sinks of a context. Safe to call twice.

    Args:
        context: Target context; the process default one when omitted.
    """
    ctx = context if context is not None else default_context()
    _close_file_sink(ctx)

    broadcast = ctx.broadcast_sink
    if broadcast is not None:
        broadcast.close()

    setattr(ctx, _CONFIGURED_FLAG_ATTR, False)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _create_file_sink(ctx: LogContext, cfg: RDebugConfig) -> Optional[RotatingFileSink]:
    """
    Open the rotating file sink described by the config.

    Returns:
        Optional[RotatingFileSink]: The sink, or None if the file cannot be opened.
    """
    try:
        return RotatingFileSink(
            ctx,
            cfg.file_path or "",
            max_level=cfg.file_level,
            max_backups=cfg.max_backups,
            max_size=cfg.max_size,
        )
    except SinkOpenError as e:
        sys.stderr.write(f"WARNING: Log file persistence failure at '{e.path}': {e}\n")
        return None


def _close_file_sink(ctx: LogContext) -> None:
    sink = ctx.file_sink
    if sink is not None:
        sink.close()
