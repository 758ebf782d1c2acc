from __future__ import annotations

"""
Script Template Compiler.

Applies the markup compiler's text-templating stage to scripts: the
basepath token is substituted, and `{tpl <path>}` directives are replaced
by the referenced template partial, compiled as markup and embedded as a
JSON string literal.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

from modforge.core.compilers.base import Compiler
from modforge.core.compilers.markup import MarkupCompiler, substitute_basepath

logger = logging.getLogger(__name__)

_PARTIAL_RX = re.compile(r"\{tpl\s+([^\s}]+)\s*\}")


class TemplateCompiler(Compiler):
    """Templating stage of the script pipeline."""

    def __init__(
            self,
            file: Optional[str] = None,
            content: Optional[str] = None,
            root: Optional[Path] = None,
            basepath: str = "/",
    ) -> None:
        super().__init__(file=file, content=content, root=root)
        self.basepath = basepath

    async def _compile(self, source: str) -> str:
        text = substitute_basepath(source, self.basepath)

        parts = []
        last = 0
        for m in _PARTIAL_RX.finditer(text):
            parts.append(text[last:m.start()])
            parts.append(await self._inline_partial(m.group(1)))
            last = m.end()
        parts.append(text[last:])
        return "".join(parts)

    async def _inline_partial(self, rel_path: str) -> str:
        markup = await MarkupCompiler(
            file=rel_path,
            root=self.root,
            basepath=self.basepath,
        ).parse()
        logger.debug(f"Inlined partial {rel_path} into {self.file or '<content>'}")
        return json.dumps(markup, ensure_ascii=False)
