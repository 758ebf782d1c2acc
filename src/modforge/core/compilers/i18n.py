from __future__ import annotations

"""
Locale Bundle Compiler.

Merges the translation files of one locale (`locales/<locale>/*.l10n.js`,
each a JSON object of key/string pairs) into a single script that registers
one loader module per translation file.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from modforge.core.compilers.base import Compiler
from modforge.domain import constants as const
from modforge.infra.fs import read_text, run_blocking

logger = logging.getLogger(__name__)

_SUFFIX = ".l10n.js"


class I18nCompiler(Compiler):
    """
    Compiles every translation file of a locale into one bundle.
    """

    def __init__(self, locale: str, root: Optional[Path] = None) -> None:
        """
        Args:
            locale: Locale identifier, e.g. 'en_US'.
            root: Project root containing the locales directory.
        """
        super().__init__(file=f"{const.LOCALES_DIR}/{locale}", root=root)
        self.locale = locale

    async def _load(self) -> str:
        if self._content is None:
            modules = await run_blocking(self._collect)
            self._content = json.dumps(modules, ensure_ascii=False)
        return self._content

    def _collect(self) -> Dict[str, Dict[str, str]]:
        directory = self._resolve(self.file or "")
        if not directory.is_dir():
            logger.warning(f"Locale '{self.locale}' has no directory, bundle is empty: {directory}")
            return {}

        modules: Dict[str, Dict[str, str]] = {}
        for path in sorted(directory.iterdir()):
            if not path.is_file() or not path.name.endswith(_SUFFIX):
                continue
            strings = json.loads(read_text(path))
            if not isinstance(strings, dict):
                raise ValueError(f"Translation file must hold a JSON object: {path}")
            modules[path.name[: -len(_SUFFIX)]] = strings
        return modules

    async def _compile(self, source: str) -> str:
        modules = json.loads(source)
        namespace = json.dumps(f"I18n.{self.locale}")

        chunks = []
        for name, strings in modules.items():
            module_id = json.dumps(f"i18n/{self.locale}/{name}")
            payload = json.dumps(strings, ensure_ascii=False, separators=(",", ":"))
            chunks.append(
                f"YUI.add({module_id}, function (Y) {{\n"
                f"Y.namespace({namespace})[{json.dumps(name)}] = {payload};\n"
                f"}});\n"
            )

        logger.debug(f"Locale '{self.locale}' bundled {len(chunks)} module(s)")
        return "".join(chunks)
