from __future__ import annotations

"""
Stylesheet Compiler.

Substitutes the basepath token and compacts the stylesheet: comments are
removed and insignificant whitespace is collapsed.
"""

import re
from pathlib import Path
from typing import Optional

from modforge.core.compilers.base import Compiler
from modforge.domain import constants as const

_COMMENT_RX = re.compile(r"/\*.*?\*/", re.DOTALL)
_SPACE_RX = re.compile(r"\s+")
_PUNCT_RX = re.compile(r"\s*([{};,>])\s*")
_DECLARATIONS_RX = re.compile(r"\{([^{}]*)\}")
_COLON_RX = re.compile(r"\s*:\s*")
_BASEPATH_RX = re.compile(re.escape(const.BASEPATH_TOKEN), re.IGNORECASE)


class StyleCompiler(Compiler):
    """Compacts CSS text."""

    def __init__(
            self,
            file: Optional[str] = None,
            content: Optional[str] = None,
            root: Optional[Path] = None,
            basepath: Optional[str] = None,
    ) -> None:
        super().__init__(file=file, content=content, root=root)
        self.basepath = basepath

    async def _compile(self, source: str) -> str:
        css = source
        if self.basepath is not None:
            css = _BASEPATH_RX.sub(lambda _m: self.basepath or "", css)

        css = _COMMENT_RX.sub("", css)
        css = _SPACE_RX.sub(" ", css)
        css = _PUNCT_RX.sub(r"\1", css)
        # Selectors keep the space before a pseudo-class
        css = _DECLARATIONS_RX.sub(lambda m: "{" + _COLON_RX.sub(":", m.group(1)) + "}", css)
        css = css.replace(";}", "}")
        return css.strip()
