from __future__ import annotations

"""
Module Metadata Extraction.

Derives loader descriptors from source files using the project's
conventions: header annotations for scripts, directory layout for
stylesheets and locale folders for translation files.
"""

import posixpath
import re
from typing import List, Optional, Tuple

from modforge.core.pipeline.components.filters import locale_parts
from modforge.domain.errors import AnnotationError, StyleAssetPathError
from modforge.domain.models import ModuleDescriptor, ModuleKind

# -----------------------------------------------------------------------------
# ANNOTATION PATTERNS
# -----------------------------------------------------------------------------

_MODULE_RX = re.compile(r"@module[ \t]+([^\s*]+)")
_REQUIRES_RX = re.compile(r"@requires\b[ \t]*([^\r\n]*)")
_DEPENDENCY_NAME_RX = re.compile(r"^[\w@./-]+$")
_STYLE_GROUP_RX = re.compile(r"([^/]+)/assets/")

_STYLE_PREFIX = "css_"
_PLUGIN_MARKER = "plugins_"
_LOCALE_PREFIX = "l10n_"

# -----------------------------------------------------------------------------
# SCRIPT ANNOTATIONS
# -----------------------------------------------------------------------------

def extract_module_name(text: str) -> Optional[str]:
    """
    Read the `@module <name>` header annotation.

    Args:
        text: Script source.

    Returns:
        Optional[str]: The module name, or None if the script is unannotated.
    """
    m = _MODULE_RX.search(text)
    return m.group(1) if m else None


def extract_requires(text: str) -> Optional[Tuple[str, ...]]:
    """
    Read the `@requires` header annotation.

    Accepts both `@requires [a, "b"]` and `@requires a, b`. Whitespace and
    quotes around the items are insignificant; a trailing comment closer is
    ignored.

    Args:
        text: Script source.

    Returns:
        Optional[Tuple[str, ...]]: Dependency names, or None if undeclared.

    Raises:
        AnnotationError: On an unterminated list or an invalid item.
    """
    m = _REQUIRES_RX.search(text)
    if not m:
        return None

    raw = m.group(1).strip()
    if raw.startswith("["):
        # Bracketed lists may span several comment lines
        start = m.start(1) + m.group(1).index("[") + 1
        end = text.find("]", start)
        if end < 0:
            raise AnnotationError(f"Unterminated @requires list: {m.group(0).strip()}")
        raw = text[start:end]
    elif raw.endswith("*/"):
        raw = raw[:-2].rstrip()

    # Drop the comment continuation markers of multi-line lists
    raw = " ".join(line.strip().lstrip("*") for line in raw.splitlines())

    items: List[str] = []
    for chunk in raw.split(","):
        item = chunk.strip().strip("'\"").strip()
        if not item:
            continue
        if not _DEPENDENCY_NAME_RX.match(item):
            raise AnnotationError(f"Invalid dependency name in @requires: {chunk.strip()!r}")
        items.append(item)

    return tuple(items)


def describe_script(rel_path: str, text: str) -> Optional[ModuleDescriptor]:
    """
    Build the descriptor of an annotated script.

    Args:
        rel_path: Script path relative to the project root.
        text: Script source.

    Returns:
        Optional[ModuleDescriptor]: None when the script has no `@module` header.
    """
    name = extract_module_name(text)
    if not name:
        return None
    return ModuleDescriptor(
        name=name,
        path=rel_path,
        dependencies=extract_requires(text),
        kind=ModuleKind.SCRIPT,
    )

# -----------------------------------------------------------------------------
# PATH CONVENTIONS
# -----------------------------------------------------------------------------

def style_module_name(rel_path: str) -> str:
    """
    Derive a stylesheet module name from its location.

    'widgets/assets/button.css' becomes 'css_widgets_button' and
    'plugins/widgets/assets/button.css' becomes 'css_plugins_widgets_button'.

    Args:
        rel_path: Stylesheet path relative to the project root.

    Returns:
        str: Loader module name.

    Raises:
        StyleAssetPathError: If the path has no `<group>/assets/` segment.
    """
    m = _STYLE_GROUP_RX.search(rel_path)
    if not m:
        raise StyleAssetPathError(rel_path)

    stem = posixpath.basename(rel_path).split(".")[0]
    marker = _PLUGIN_MARKER if rel_path.startswith("plugins/") else ""
    return f"{_STYLE_PREFIX}{marker}{m.group(1)}_{stem}"


def describe_style(rel_path: str) -> ModuleDescriptor:
    return ModuleDescriptor(
        name=style_module_name(rel_path),
        path=rel_path,
        kind=ModuleKind.STYLE,
    )


def describe_locale(rel_path: str) -> ModuleDescriptor:
    """Describe 'locales/fr_FR/main.l10n.js' as module 'l10n_fr_FR_main'."""
    locale, name = locale_parts(rel_path)
    return ModuleDescriptor(
        name=f"{_LOCALE_PREFIX}{locale}_{name}",
        path=rel_path,
        kind=ModuleKind.SCRIPT,
    )
