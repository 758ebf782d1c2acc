from __future__ import annotations

"""
Logging Handlers and Filters.

Builds the handlers attached by `configure_logging` and tags them so that a
later reconfiguration only removes what this package installed.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from modforge.infra.fs import ensure_parent_dir

_HANDLER_TAG_ATTR: str = "_modforge_handler"


# ==============================================================================
# FILTERS
# ==============================================================================

class BuildIdFilter(logging.Filter):
    """Stamp each record with the identifier of the running build."""

    def __init__(self, build_id: str) -> None:
        super().__init__()
        self.build_id = build_id

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "build_id"):
            record.build_id = self.build_id
        return True


# ==============================================================================
# HANDLER UTILITIES
# ==============================================================================

def _tag_handler(handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_TAG_ATTR, True)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def _create_rotating_file_handler(
        log_file: str,
        level_int: int,
        formatter: logging.Formatter,
        max_bytes: int,
        backup_count: int,
) -> Optional[RotatingFileHandler]:
    """
    Open the rotating build log.

    Args:
        log_file: Target path of the build log.
        level_int: Numeric logging level.
        formatter: Formatter applied to file records.
        max_bytes: Rollover threshold in bytes.
        backup_count: Number of archived logs to keep.

    Returns:
        Optional[RotatingFileHandler]: The handler, or None if the file cannot be opened.
    """
    try:
        ensure_parent_dir(log_file)
        fh = RotatingFileHandler(
            log_file,
            maxBytes=int(max_bytes),
            backupCount=int(backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: cannot open build log '{log_file}': {e}\n")
        return None

    fh.setLevel(level_int)
    fh.setFormatter(formatter)
    _tag_handler(fh)
    return fh
