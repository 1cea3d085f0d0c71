from __future__ import annotations

"""
Logging Core Orchestrator.

Owns the process-wide logging setup. The root logger gets a single
QueueHandler; a QueueListener thread drains the queue into the sinks, so a
slow log file never stalls the event loop that awaits backend calls.
"""

import atexit
import logging
import os
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from assetlib.infra.fs import get_user_data_dir
from assetlib.infra.logging.config import LoggingConfig
from assetlib.infra.logging.handlers import build_sinks, is_tagged, tag

_CONFIGURED_FLAG_ATTR: str = "_assetlib_configured"
_QUEUE_LISTENER_ATTR: str = "_assetlib_queue_listener"

DEFAULT_LOG_FILENAME = "assetlib.log"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_default_log_path(file_name: str = DEFAULT_LOG_FILENAME) -> str:
    """Location of the diagnostic log: ``<user data dir>/logs/<file_name>``."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Install AssetLib logging on the root logger.

    Only the first call has an effect; pass ``force`` to tear the previous
    setup down (tagged handlers and the listener thread) and apply ``cfg``.
    If anything goes wrong, a plain stderr handler is installed instead.

    Args:
        cfg: Logging settings.
        force: Replace an existing setup.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    _teardown(root)
    try:
        _install(root, cfg)
    except Exception as e:
        _teardown(root)
        fallback = tag(logging.StreamHandler(sys.stderr))
        fallback.setFormatter(logging.Formatter("FALLBACK %(levelname)s %(name)s: %(message)s"))
        root.addHandler(fallback)
        root.warning(f"Logging setup failed ({e}); records go to stderr only.")
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Read the tail of the diagnostic log.

    Args:
        n_lines: Number of trailing lines to return.
        log_path: File to read instead of ``get_default_log_path()``.

    Returns:
        str: The trailing lines, or a one-line notice if the file is missing
        or unreadable.
    """
    path = log_path or get_default_log_path()
    if not os.path.exists(path):
        return "Log file not found."

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            lines = f.readlines()
    except OSError as e:
        return f"Error retrieving logs: {e}"
    return "".join(lines[-n_lines:])


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _install(root: logging.Logger, cfg: LoggingConfig) -> None:
    root.setLevel(cfg.numeric_level())
    for name in cfg.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    sinks = build_sinks(cfg)
    if not sinks:
        return

    records: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = QueueListener(records, *sinks, respect_handler_level=True)
    listener.start()
    atexit.register(_stop_listener, listener)

    root.addHandler(tag(QueueHandler(records)))
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)


def _teardown(root: logging.Logger) -> None:
    """Stop the listener thread and detach every tagged handler."""
    _stop_listener(getattr(root, _QUEUE_LISTENER_ATTR, None))
    setattr(root, _QUEUE_LISTENER_ATTR, None)

    for handler in list(root.handlers):
        if is_tagged(handler):
            root.removeHandler(handler)
            handler.close()


def _stop_listener(listener: Optional[QueueListener]) -> None:
    # QueueListener.stop() fails on a listener that is not running
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
