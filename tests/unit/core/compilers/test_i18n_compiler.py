from __future__ import annotations

"""
Unit tests for the I18nCompiler.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Callable, Dict

import pytest

from modforge.core.compilers.i18n import I18nCompiler


def test_i18n_bundle_registers_each_module(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-01: One registration per translation file, in name order."""
    root = make_tree({
        "locales/fr_FR/main.l10n.js": json.dumps({"hello": "Bonjour"}),
        "locales/fr_FR/admin.l10n.js": json.dumps({"quit": "Quitter"}),
        "locales/fr_FR/notes.txt": "ignored",
    })
    out = asyncio.run(I18nCompiler("fr_FR", root=root).parse())

    assert out == (
        'YUI.add("i18n/fr_FR/admin", function (Y) {\n'
        'Y.namespace("I18n.fr_FR")["admin"] = {"quit":"Quitter"};\n'
        '});\n'
        'YUI.add("i18n/fr_FR/main", function (Y) {\n'
        'Y.namespace("I18n.fr_FR")["main"] = {"hello":"Bonjour"};\n'
        '});\n'
    )


def test_i18n_missing_locale_is_empty(
        make_tree: Callable[[Dict[str, str]], Path],
        caplog: pytest.LogCaptureFixture,
) -> None:
    """TC-02: A locale without a directory yields an empty bundle and a warning."""
    root = make_tree({"locales/en_US/main.l10n.js": "{}"})

    with caplog.at_level(logging.WARNING):
        out = asyncio.run(I18nCompiler("de_DE", root=root).parse())

    assert out == ""
    assert "de_DE" in caplog.text


def test_i18n_rejects_non_object_files(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-03: Translation files must hold JSON objects."""
    root = make_tree({"locales/en_US/main.l10n.js": "[1, 2]"})

    with pytest.raises(ValueError):
        asyncio.run(I18nCompiler("en_US", root=root).parse())
