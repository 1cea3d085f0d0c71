from __future__ import annotations

"""
Logging Sinks.

Builds the handlers that the queue listener writes to. Every handler created
here is tagged, so a later reconfiguration removes exactly these and leaves
handlers installed by test runners or host applications alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List

from assetlib.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_assetlib_handler"


def tag(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def is_tagged(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sinks(cfg: LoggingConfig) -> List[logging.Handler]:
    """
    Create the console and file handlers requested by ``cfg``.

    A log file that cannot be opened is reported on stderr and skipped; the
    remaining sinks are still returned.
    """
    level = cfg.numeric_level()
    sinks: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        sinks.append(console)

    if cfg.log_file:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
            rotating = RotatingFileHandler(
                cfg.log_file,
                maxBytes=int(cfg.max_bytes),
                backupCount=int(cfg.backup_count),
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"assetlib: log file '{cfg.log_file}' unavailable ({e}); continuing without it\n")
        else:
            rotating.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
            sinks.append(rotating)

    for sink in sinks:
        sink.setLevel(level)
        tag(sink)
    return sinks
