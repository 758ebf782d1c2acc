from __future__ import annotations

"""
Module Wrapping Compiler.

Turns an annotated script into a loader registration. Scripts declaring
`@module <name>` are wrapped into a `YUI.add()` call carrying their
`@requires` list, unless they already register themselves. Release builds
also drop single-line `Y.log(...)` debug statements.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

from modforge.core.compilers.base import Compiler
from modforge.core.maker.extraction import extract_module_name, extract_requires

_REGISTRATION_RX = re.compile(r"\bYUI\.add\s*\(")
_DEBUG_CALL_RX = re.compile(r"^([ \t]*)Y\.log\(")
_QUOTES = "\"'`"


def strip_debug_calls(script: str) -> str:
    """
    Remove single-line `Y.log(...);` statements.

    Only the call itself goes: a line holding nothing else is dropped with
    its line break, and statements sharing the line are kept. Calls that
    span several lines are left in place.

    Args:
        script: Script source.

    Returns:
        str: The script without its debug statements.
    """
    out = []
    for line in script.splitlines(keepends=True):
        m = _DEBUG_CALL_RX.match(line)
        end = _statement_end(line, m.end()) if m else -1
        if end < 0:
            out.append(line)
            continue

        rest = line[end:]
        if rest.strip():
            out.append(m.group(1) + rest.lstrip(" \t"))
    return "".join(out)


def _statement_end(line: str, start: int) -> int:
    """Index past the `);` closing the call opened before `start`, or -1."""
    depth = 1
    quote = ""
    i = start
    while i < len(line):
        ch = line[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in _QUOTES:
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                tail = line[i + 1:]
                stripped = tail.lstrip(" \t")
                if not stripped.startswith(";"):
                    return -1
                return i + 1 + (len(tail) - len(stripped)) + 1
        i += 1
    return -1


class ModuleCompiler(Compiler):
    """
    Loader registration wrapper.
    """

    def __init__(
            self,
            file: Optional[str] = None,
            content: Optional[str] = None,
            root: Optional[Path] = None,
            debug: bool = False,
            version: str = "",
    ) -> None:
        """
        Args:
            file: Source path relative to `root`.
            content: Literal script text, usually the template stage output.
            root: Project root.
            debug: Keep debug statements.
            version: Version string announced with the registration.
        """
        super().__init__(file=file, content=content, root=root)
        self.debug = debug
        self.version = version

    async def _compile(self, source: str) -> str:
        script = source if self.debug else strip_debug_calls(source)

        name = extract_module_name(script)
        if not name or _REGISTRATION_RX.search(script):
            return script

        details: Dict[str, Any] = {}
        requires = extract_requires(script)
        if requires is not None:
            details["requires"] = list(requires)

        body = script if script.endswith("\n") else script + "\n"
        return (
            f"YUI.add({json.dumps(name)}, function (Y) {{\n"
            f"{body}"
            f"}}, {json.dumps(self.version)}, {json.dumps(details)});\n"
        )
