from __future__ import annotations

"""
Stdlib Logging Handlers and Low-Level Utilities.

Provides the stderr handler behind the console channel and the tagging
mechanism that lets rdebug distinguish its own handlers from handlers
injected by the host application or other libraries.
"""

import logging
import sys
from typing import Optional

# Internal attribute used to tag and identify our own handlers
_HANDLER_TAG_ATTR: str = "_rdebug_handler"

CONSOLE_FMT = "%(message)s"


# ==============================================================================
# INTERNAL LOGGING UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    """
    Mark a handler as an internally-managed rdebug handler.

    Args:
        handler: The logging handler instance to tag.
    """
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    """
    Verify if a handler was installed by rdebug.

    Args:
        handler: The handler to inspect.

    Returns:
        bool: True if the handler carries our internal tag.
    """
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def ensure_console_handler(channel: logging.Logger) -> Optional[logging.Handler]:
    """
    Attach a tagged stderr StreamHandler to the console channel, once.

    The channel stops propagating so console lines are not duplicated by
    handlers the host application installed on the root logger.

    Args:
        channel: Logger used as the console stream.

    Returns:
        Optional[logging.Handler]: The new handler, or None if one of ours
        was already attached.
    """
    channel.setLevel(logging.DEBUG)
    channel.propagate = False
    if any(_is_our_handler(h) for h in channel.handlers):
        return None

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(logging.DEBUG)
    sh.setFormatter(logging.Formatter(CONSOLE_FMT))
    _tag_handler(sh)
    channel.addHandler(sh)
    return sh


def remove_our_handlers(channel: logging.Logger) -> None:
    """Detach and close every rdebug-managed handler of a logger."""
    for h in list(channel.handlers):
        if _is_our_handler(h):
            channel.removeHandler(h)
            h.close()
