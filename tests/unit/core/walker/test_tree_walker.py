from __future__ import annotations

"""
Unit tests for the asynchronous TreeWalker.

Uses a recording handler to verify which files reach the handler, the
completion count, dotfile filtering and failure propagation.
"""

import asyncio
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from modforge.core.walker.tree_walker import FileHandler, TreeWalker
from modforge.domain.errors import MissingDirectoryError, TraversalError
from modforge.domain.models import SourceTree


class RecordingHandler(FileHandler):
    """Collects every path it receives, yielding to the loop in between."""

    def __init__(self, fail_on: str = "") -> None:
        self.seen: List[str] = []
        self.fail_on = fail_on

    async def handle_file(self, rel_path: str) -> None:
        await asyncio.sleep(0)
        if rel_path == self.fail_on:
            raise ValueError(f"cannot handle {rel_path}")
        self.seen.append(rel_path)


def test_walker_visits_every_visible_file(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-01: Nested files are handed over once; the count matches."""
    root = make_tree({
        "views/a.js": "",
        "views/sub/b.js": "",
        "views/sub/deeper/c.css": "",
        "other/d.js": "",
        "top.html": "",
    })
    handler = RecordingHandler()
    walker = TreeWalker(root, handler)

    count = asyncio.run(walker.fetch(SourceTree(dirs=("views",), files=("top.html",))))

    assert count == 4
    assert sorted(handler.seen) == [
        "top.html",
        "views/a.js",
        "views/sub/b.js",
        "views/sub/deeper/c.css",
    ]
    assert walker.barrier is not None and walker.barrier.released
    assert walker.barrier.pending == 0


def test_walker_skips_dotfiles(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-02: Dot-prefixed files and directories never reach the handler."""
    root = make_tree({
        "views/.hidden.js": "",
        "views/.git/config": "",
        "views/shown.js": "",
    })
    handler = RecordingHandler()

    count = asyncio.run(TreeWalker(root, handler).fetch(SourceTree(dirs=("views",))))

    assert count == 1
    assert handler.seen == ["views/shown.js"]


def test_walker_empty_directory_completes(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-03: Empty roots and an empty tree both complete with zero files."""
    root = make_tree({"keep.txt": ""})
    (root / "empty").mkdir()
    handler = RecordingHandler()
    walker = TreeWalker(root, handler)

    assert asyncio.run(walker.fetch(SourceTree(dirs=("empty",)))) == 0
    assert asyncio.run(walker.fetch(SourceTree())) == 0
    assert handler.seen == []


def test_walker_missing_root_raises(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-04: A missing root directory fails the traversal with its path."""
    root = make_tree({"views/a.js": ""})
    walker = TreeWalker(root, RecordingHandler())

    with pytest.raises(MissingDirectoryError) as exc_info:
        asyncio.run(walker.fetch(SourceTree(dirs=("views", "nowhere"))))

    assert exc_info.value.rel_path == "nowhere"
    assert isinstance(exc_info.value, FileNotFoundError)
    assert isinstance(exc_info.value, TraversalError)


def test_walker_propagates_handler_failure(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-05: A failing handler surfaces from fetch() instead of stalling."""
    root = make_tree({f"views/f{i}.js": "" for i in range(10)})
    handler = RecordingHandler(fail_on="views/f3.js")

    async def scenario() -> None:
        await asyncio.wait_for(
            TreeWalker(root, handler).fetch(SourceTree(dirs=("views",))),
            timeout=5,
        )

    with pytest.raises(ValueError, match="f3.js"):
        asyncio.run(scenario())


def test_walker_is_reusable(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-06: Consecutive traversals use fresh barriers and counts."""
    root = make_tree({"a/x.js": "", "b/y.js": "", "b/z.js": ""})
    walker = TreeWalker(root, RecordingHandler())

    first = asyncio.run(walker.fetch(SourceTree(dirs=("a",))))
    first_barrier = walker.barrier
    second = asyncio.run(walker.fetch(SourceTree(dirs=("b",))))

    assert (first, second) == (1, 2)
    assert walker.barrier is not first_barrier


class RendezvousHandler(FileHandler):
    """Holds the first file until a sibling branch has been handled."""

    def __init__(self, waiter: str, releaser: str) -> None:
        self.waiter = waiter
        self.releaser = releaser
        self.order: List[str] = []
        self._released = asyncio.Event()

    async def handle_file(self, rel_path: str) -> None:
        self.order.append(f"start {rel_path}")
        if rel_path == self.waiter:
            await self._released.wait()
        elif rel_path == self.releaser:
            self._released.set()
        self.order.append(f"end {rel_path}")


def test_walker_branches_interleave(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-07: A waiting handler does not block its siblings or other roots."""
    root = make_tree({"views/a.js": "", "plugins/deep/b.js": ""})
    handler = RendezvousHandler(waiter="views/a.js", releaser="plugins/deep/b.js")

    async def scenario() -> int:
        return await asyncio.wait_for(
            TreeWalker(root, handler).fetch(SourceTree(dirs=("views", "plugins"))),
            timeout=5,
        )

    assert asyncio.run(scenario()) == 2
    assert handler.order.index("end plugins/deep/b.js") < handler.order.index("end views/a.js")
