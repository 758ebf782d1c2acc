from __future__ import annotations

"""
Routing File Compiler.

Single-pass cleanup of routing tables: block comments, comment-only lines
and blank lines are removed. No path-token substitution is performed.
"""

import re

from modforge.core.compilers.base import Compiler

_BLOCK_COMMENT_RX = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RX = re.compile(r"^\s*//")


class RoutesCompiler(Compiler):
    """Strips comments from routing scripts."""

    async def _compile(self, source: str) -> str:
        text = _BLOCK_COMMENT_RX.sub("", source)
        lines = [
            line.rstrip()
            for line in text.splitlines()
            if line.strip() and not _LINE_COMMENT_RX.match(line)
        ]
        return "\n".join(lines) + "\n" if lines else ""
