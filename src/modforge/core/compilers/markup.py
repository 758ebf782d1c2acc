from __future__ import annotations

"""
Markup Compiler.

Compiles HTML documents in three steps:
1. Replaces the basepath token everywhere with the configured base path.
2. Compiles every `{css}...{/css}` style island through the style compiler
   and splices the result back in place.
3. Returns the document with its original line structure.

Newlines are encoded as a sentinel while islands are searched, so that an
island spanning several lines is matched and replaced as one single-line
unit without disturbing the lines around it. The sentinel is chosen so
that it never occurs in the document itself.
"""

import logging
import posixpath
import re
from pathlib import Path
from typing import Optional

from modforge.core.compilers.base import Compiler
from modforge.core.compilers.style import StyleCompiler
from modforge.domain import constants as const

logger = logging.getLogger(__name__)

_BASEPATH_RX = re.compile(re.escape(const.BASEPATH_TOKEN), re.IGNORECASE)
_ISLAND_RX = re.compile(
    re.escape(const.STYLE_ISLAND_OPEN) + r"(.*?)" + re.escape(const.STYLE_ISLAND_CLOSE),
    re.IGNORECASE,
)


def substitute_basepath(text: str, basepath: str) -> str:
    """
    Replace every basepath token, regardless of case.

    Args:
        text: Template text.
        basepath: Replacement value, used verbatim.

    Returns:
        str: The substituted text.
    """
    return _BASEPATH_RX.sub(lambda _m: basepath, text)


class MarkupCompiler(Compiler):
    """
    HTML compiler with basepath substitution and style islands.
    """

    def __init__(
            self,
            file: Optional[str] = None,
            content: Optional[str] = None,
            root: Optional[Path] = None,
            basepath: Optional[str] = None,
    ) -> None:
        """
        Args:
            file: Source path relative to `root`.
            content: Literal markup.
            root: Project root.
            basepath: Value of the basepath token; defaults to the directory
                of `file`, or '/' for literal content.
        """
        super().__init__(file=file, content=content, root=root)
        self.basepath = basepath if basepath is not None else self._default_basepath()

    async def _compile(self, source: str) -> str:
        text = substitute_basepath(source, self.basepath)
        sentinel = _free_sentinel(text)
        text = text.replace("\n", sentinel)
        text = await self._compile_islands(text, sentinel)
        return text.replace(sentinel, "\n")

    async def _compile_islands(self, text: str, sentinel: str) -> str:
        """Compile islands one at a time until none remain."""
        count = 0
        while True:
            m = _ISLAND_RX.search(text)
            if not m:
                break

            block = m.group(1).replace(sentinel, "\n")
            css = await StyleCompiler(content=block, basepath=self.basepath).parse()
            text = text[:m.start()] + css + text[m.end():]
            count += 1

        if count:
            logger.debug(f"Compiled {count} style island(s) in {self.file or '<content>'}")
        return text

    def _default_basepath(self) -> str:
        if not self.file:
            return "/"
        directory = posixpath.dirname(self.file.replace("\\", "/"))
        directory = re.sub(r"/+", "/", directory).rstrip("/")
        return directory or "/"


def _free_sentinel(text: str) -> str:
    """Newline sentinel that does not occur in `text`."""
    sentinel = const.NEWLINE_SENTINEL
    n = 0
    while sentinel in text:
        n += 1
        sentinel = f"{const.NEWLINE_SENTINEL[:-2]}{n}]]"
    return sentinel
