from __future__ import annotations

"""
Base Definitions for Leaf Compilers.

Every compiler is a text transform built either from a file (read lazily on
the first `parse()`) or from literal content. `parse()` resolves to the
transformed text and hands it to the optional callback exactly once.
Compilers have no error channel: failures propagate to the caller.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional

from modforge.infra.fs import read_text, run_blocking

logger = logging.getLogger(__name__)


class Compiler(ABC):
    """
    Abstract text transform with a single completion.
    """

    def __init__(
            self,
            file: Optional[str] = None,
            content: Optional[str] = None,
            root: Optional[Path] = None,
    ) -> None:
        """
        Args:
            file: Source path, relative to `root` when given.
            content: Literal source text; takes precedence over `file`.
            root: Directory that relative file paths are resolved against.

        Raises:
            ValueError: If neither a file nor content is provided.
        """
        if file is None and content is None:
            raise ValueError(f"{type(self).__name__} needs a file or literal content.")
        self.file = file
        self.root = Path(root) if root is not None else None
        self._content = content

    async def parse(self, callback: Optional[Callable[[str], Any]] = None) -> str:
        """
        Run the transform.

        Args:
            callback: Optional receiver of the result, called exactly once.
                Coroutine functions are awaited.

        Returns:
            str: The transformed text.
        """
        source = await self._load()
        result = await self._compile(source)

        if callback is not None:
            outcome = callback(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    @abstractmethod
    async def _compile(self, source: str) -> str:
        """
        Transform the loaded source text.

        Args:
            source: Raw input text.

        Returns:
            str: Transformed text.
        """
        pass

    async def _load(self) -> str:
        if self._content is None:
            self._content = await run_blocking(read_text, self._resolve(self.file or ""))
            logger.debug(f"{type(self).__name__} loaded {self.file}")
        return self._content

    def _resolve(self, rel_path: str) -> Path:
        return self.root / rel_path if self.root is not None else Path(rel_path)
