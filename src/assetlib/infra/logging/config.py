from __future__ import annotations

"""
Logging Configuration Models.

Settings consumed by ``configure_logging``. The CLI builds one from its
``--debug`` flag; embedding applications may build their own.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

# Transport libraries that are noisy at DEBUG (connection pool chatter)
_CHATTY_LIBRARIES: Tuple[str, ...] = ("urllib3", "requests", "asyncio")


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem initialization.

    Attributes:
        level: Threshold for AssetLib records, as a level name.
        console: Write records to stderr.
        log_file: Rotating log file; None keeps logging in memory only.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files to keep.
        console_fmt: Record layout on stderr.
        file_fmt: Record layout in the log file.
        datefmt: Timestamp layout in the log file.
        quiet_loggers: Third-party loggers held at WARNING regardless of
            ``level``.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 512 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)-8s %(name)s: %(message)s"
    file_fmt: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    quiet_loggers: Tuple[str, ...] = field(default=_CHATTY_LIBRARIES)

    @classmethod
    def for_cli(cls, debug: bool = False, log_file: Optional[str] = None) -> "LoggingConfig":
        """Console settings for the command line: warnings only unless debugging."""
        return cls(level="DEBUG" if debug else "WARNING", console=True, log_file=log_file)

    def numeric_level(self) -> int:
        """Resolve ``level`` to its numeric value; unknown names mean INFO."""
        value = logging.getLevelName(str(self.level or "").strip().upper())
        return value if isinstance(value, int) else logging.INFO
