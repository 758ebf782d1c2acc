from __future__ import annotations

"""
File Filtering and Classification Engine.

Implements glob-based exclusion rules matched against project-relative
paths, and the naming conventions that route each file to its handler:
file kinds by extension, routing files, test files, template partials and
locale files.
"""

import posixpath
import re
from typing import Iterable, List, Tuple

from modforge.domain.models import FileKind

# -----------------------------------------------------------------------------
# REGEX AND FILENAME CONSTANTS
# -----------------------------------------------------------------------------

_SCRIPT_EXTENSIONS = {".js"}
_STYLE_EXTENSIONS = {".css"}
_MARKUP_EXTENSIONS = {".html", ".htm"}

_LOCALE_RX = re.compile(r"(?:^|/)locales/([^/]+)/(?:[^/]+/)*([^/]+)\.l10n\.js$")
_ROUTES_RX = re.compile(r"routes\.js$")
_TEST_RX = re.compile(r"(?:^|[/_.-])test\.js$")
_PARTIAL_RX = re.compile(r"\.tpl\.html?$")

# -----------------------------------------------------------------------------
# EXCLUSION RULES
# -----------------------------------------------------------------------------

def glob_to_regex(pattern: str) -> str:
    """
    Translate an exclusion glob into an anchored regex.

    Every character is literal except `*`, which matches any run of
    characters that does not cross a path separator.

    Args:
        pattern: Glob such as 'config/*_config.js'.

    Returns:
        str: Equivalent regex source.
    """
    parts = [re.escape(chunk) for chunk in pattern.strip().strip("/").split("*")]
    return "^" + "[^/]*".join(parts) + "$"


def compile_exclusions(patterns: Iterable[str]) -> List[re.Pattern]:
    """
    Compile exclusion globs, ignoring blank entries.

    Args:
        patterns: Raw glob strings.

    Returns:
        List[re.Pattern]: Compiled, anchored patterns.
    """
    return [re.compile(glob_to_regex(p)) for p in patterns if p and p.strip()]


def is_excluded(rel_path: str, exclusions: List[re.Pattern]) -> bool:
    """
    Check whether a relative path is matched by any exclusion rule.

    Args:
        rel_path: POSIX path relative to the project root.
        exclusions: Patterns produced by `compile_exclusions`.

    Returns:
        bool: True if the file must not be dispatched.
    """
    return any(rx.match(rel_path) for rx in exclusions)

# -----------------------------------------------------------------------------
# FILE CLASSIFICATION LOGIC
# -----------------------------------------------------------------------------

def classify(rel_path: str) -> FileKind:
    """
    Compute the file kind of a path from its extension and location.

    Locale files are scripts living under `locales/<locale>/` with a
    `.l10n.js` suffix; they are recognised before plain scripts.

    Args:
        rel_path: POSIX path relative to the project root.

    Returns:
        FileKind: The category driving dispatch.
    """
    if _LOCALE_RX.search(rel_path):
        return FileKind.LOCALE

    _, ext = posixpath.splitext(rel_path)
    ext = ext.lower()

    if ext in _SCRIPT_EXTENSIONS:
        return FileKind.SCRIPT
    if ext in _STYLE_EXTENSIONS:
        return FileKind.STYLE
    if ext in _MARKUP_EXTENSIONS:
        return FileKind.MARKUP
    return FileKind.STATIC


def is_routes_file(file_name: str) -> bool:
    return _ROUTES_RX.search(file_name) is not None


def is_test_file(file_name: str) -> bool:
    """Test suites ('test.js', 'button_test.js', 'button.test.js') never ship in a build."""
    return _TEST_RX.search(file_name) is not None


def is_template_partial(file_name: str) -> bool:
    """Partials ('item.tpl.html') are inlined by the template compiler."""
    return _PARTIAL_RX.search(file_name) is not None


def locale_parts(rel_path: str) -> Tuple[str, str]:
    """
    Split a locale file path into its locale and bundle name.

    Args:
        rel_path: Path such as 'locales/fr_FR/main.l10n.js'.

    Returns:
        Tuple[str, str]: (locale, name), e.g. ('fr_FR', 'main').

    Raises:
        ValueError: If the path is not a locale file.
    """
    m = _LOCALE_RX.search(rel_path)
    if not m:
        raise ValueError(f"Not a locale file: {rel_path}")
    return m.group(1), m.group(2)
