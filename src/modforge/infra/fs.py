from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, lazy directory creation, build-directory
housekeeping and the small read/write/copy primitives used by the build
pipeline. Every helper propagates I/O errors.
"""

import asyncio
import functools
import logging
import os
import re
import shutil
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
T = TypeVar("T")

# Generated build directories are named after a numeric build identifier
_BUILD_ID_RX = re.compile(r"^[0-9]+$")

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty or malformed.

    Args:
        path: Raw input path string.
        fallback: Default path to use if resolution fails.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    try:
        p = os.path.expandvars(os.path.expanduser(p))
        return os.path.abspath(p)
    except Exception:
        return os.path.abspath(fallback)


def is_build_id(name: str) -> bool:
    """Check whether a directory entry follows the numeric build naming."""
    return _BUILD_ID_RX.match(name) is not None

# -----------------------------------------------------------------------------
# DIRECTORY MANAGEMENT API
# -----------------------------------------------------------------------------

def ensure_parent_dir(file_path: PathLike) -> None:
    """
    Create the missing ancestors of a file, one path segment at a time.

    Args:
        file_path: Target file whose parent hierarchy must exist.

    Raises:
        OSError: If a segment cannot be created.
    """
    parent = Path(file_path).parent
    missing: List[Path] = []
    while not parent.exists():
        missing.append(parent)
        if parent.parent == parent:
            break
        parent = parent.parent

    for segment in reversed(missing):
        segment.mkdir(mode=0o755, exist_ok=True)


def clean_build_dir(build_dir: PathLike, static_names: Iterable[str]) -> List[str]:
    """
    Remove stale generated entries from the build directory.

    An entry is removed when its name is part of the static list or when it
    is a purely numeric build identifier. Hand-placed entries are preserved.
    The directory is created when missing.

    Args:
        build_dir: Directory holding every build.
        static_names: Generated top-level file names (e.g. root HTML pages).

    Returns:
        List[str]: Names of the removed entries.
    """
    root = Path(build_dir)
    if not root.exists():
        root.mkdir(parents=True)
        return []

    static = set(static_names)
    removed: List[str] = []

    for name in sorted(os.listdir(root)):
        if name not in static and not is_build_id(name):
            continue

        target = root / name
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        removed.append(name)

    if removed:
        logger.debug(f"Removed {len(removed)} stale build entries from {root}")
    return removed

# -----------------------------------------------------------------------------
# FILE I/O API
# -----------------------------------------------------------------------------

def read_text(path: PathLike) -> str:
    """Read UTF-8 text, keeping line endings as they are on disk."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: PathLike, content: str) -> None:
    """Write text content, creating the parent hierarchy lazily."""
    ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def copy_file(src: PathLike, dst: PathLike) -> None:
    """Copy a file byte-for-byte, creating the parent hierarchy lazily."""
    ensure_parent_dir(dst)
    shutil.copyfile(src, dst)

# -----------------------------------------------------------------------------
# ASYNC OFFLOADING
# -----------------------------------------------------------------------------

async def run_blocking(func: Callable[..., T], *args: Any) -> T:
    """
    Run a blocking filesystem call on the loop's default executor.

    The calling coroutine yields until the call completes, so sibling
    branches keep progressing in the meantime.

    Args:
        func: Blocking callable.
        *args: Positional arguments forwarded to `func`.

    Returns:
        T: Whatever `func` returns. Exceptions propagate unchanged.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args))
