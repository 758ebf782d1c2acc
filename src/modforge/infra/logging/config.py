from __future__ import annotations

"""
Logging Configuration Models.

Defines the settings accepted by `configure_logging` and the mapping of
textual severity names to numeric logging levels.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Immutable settings for the logging subsystem.

    Attributes:
        level: Minimum severity level to capture.
        console: Emit records on stderr.
        log_file: Optional path of a rotating build log.
        build_id: Identifier injected into every record as `%(build_id)s`.
        max_bytes: Size threshold before the build log rotates.
        backup_count: Number of rotated build logs to keep.
        console_fmt: Record layout on the terminal.
        file_fmt: Record layout in the build log.
        datefmt: Timestamp layout in the build log.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None
    build_id: str = "-"

    max_bytes: int = 1024 * 1024
    backup_count: int = 5

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(build_id)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
