from __future__ import annotations

"""
Asynchronous Source Tree Walker.

Enumerates directories recursively and hands every plain file to a
`FileHandler`. The walker has no knowledge of file types: classification,
metadata extraction and compilation all live in the handlers. Each
directory listing and each handler call is an independent branch tracked
by a `JoinBarrier`; `fetch()` returns once the barrier releases.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Set, Tuple

from modforge.core.walker.barrier import JoinBarrier
from modforge.domain.errors import MissingDirectoryError
from modforge.domain.models import SourceTree
from modforge.infra.fs import run_blocking

logger = logging.getLogger(__name__)


# ==============================================================================
# HANDLER INTERFACE
# ==============================================================================

class FileHandler(ABC):
    """
    Per-file hook invoked by the walker.
    """

    @abstractmethod
    async def handle_file(self, rel_path: str) -> None:
        """
        Process a single file discovered by the walker.

        Args:
            rel_path: POSIX path relative to the project root.
        """
        pass


# ==============================================================================
# TREE WALKER
# ==============================================================================

class TreeWalker:
    """
    Recursive directory enumerator with a completion barrier.

    One walker may run several traversals one after the other; every call
    to `fetch()` uses a fresh barrier.
    """

    def __init__(self, root: Path, handler: FileHandler) -> None:
        """
        Args:
            root: Project root that every relative path is resolved against.
            handler: Receiver of every discovered file.
        """
        self.root = Path(root)
        self.handler = handler
        self.barrier: Optional[JoinBarrier] = None
        self._tasks: Set[asyncio.Task] = set()
        self._file_count = 0

    async def fetch(self, tree: SourceTree) -> int:
        """
        Traverse the source tree and wait for every branch to complete.

        Args:
            tree: Root directories and explicit files to traverse.

        Returns:
            int: Number of files handed to the handler.

        Raises:
            MissingDirectoryError: If a directory to list does not exist.
            Exception: Any failure raised by the handler.
        """
        barrier = JoinBarrier()
        barrier.on_release(
            lambda b: logger.debug(f"Barrier released: {b.finished}/{b.started} branches reported")
        )
        self.barrier = barrier
        self._file_count = 0

        logger.debug(f"Traversal started: dirs={list(tree.dirs)} files={list(tree.files)}")

        for rel_dir in tree.dirs:
            self._spawn(barrier, self._parse_dir, barrier, _clean(rel_dir))

        for rel_file in tree.files:
            self._spawn(barrier, self._parse_file, _clean(rel_file))

        try:
            await barrier.wait()
        except BaseException:
            await self._cancel_outstanding()
            raise

        logger.debug(
            f"Traversal complete: {self._file_count} files, "
            f"{barrier.started} branches"
        )
        return self._file_count

    # --------------------------------------------------------------------------
    # Branches
    # --------------------------------------------------------------------------

    async def _parse_dir(self, barrier: JoinBarrier, rel_dir: str) -> None:
        """List a directory and spawn one branch per visible entry."""
        abs_dir = self.root / rel_dir
        entries = await run_blocking(_scan_dir, abs_dir)
        if entries is None:
            raise MissingDirectoryError(rel_dir)

        for name, is_dir in entries:
            child = f"{rel_dir}/{name}" if rel_dir else name
            if is_dir:
                self._spawn(barrier, self._parse_dir, barrier, child)
            else:
                self._spawn(barrier, self._parse_file, child)

    async def _parse_file(self, rel_path: str) -> None:
        self._file_count += 1
        await self.handler.handle_file(rel_path)

    # --------------------------------------------------------------------------
    # Scheduling
    # --------------------------------------------------------------------------

    def _spawn(
            self,
            barrier: JoinBarrier,
            branch: Callable[..., Awaitable[None]],
            *args: object,
    ) -> None:
        """Increment the barrier, then schedule the guarded branch."""
        barrier.add()
        task = asyncio.ensure_future(self._guard(barrier, branch(*args)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    @staticmethod
    async def _guard(barrier: JoinBarrier, branch: Awaitable[None]) -> None:
        try:
            await branch
        except asyncio.CancelledError:
            raise
        except Exception as e:
            barrier.fail(e)
        else:
            barrier.done()

    async def _cancel_outstanding(self) -> None:
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


def _clean(rel_path: str) -> str:
    return rel_path.replace("\\", "/").strip("/")


def _scan_dir(abs_dir: Path) -> Optional[List[Tuple[str, bool]]]:
    """
    List the visible entries of a directory as (name, is_dir) pairs.

    Dotfiles are invisible to the build, as is anything that is neither a
    directory nor a regular file. Returns None when the directory is missing.
    """
    if not abs_dir.is_dir():
        return None

    entries: List[Tuple[str, bool]] = []
    for name in sorted(os.listdir(abs_dir)):
        if name.startswith("."):
            continue
        child = abs_dir / name
        if child.is_dir():
            entries.append((name, True))
        elif child.is_file():
            entries.append((name, False))
    return entries
