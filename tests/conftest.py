from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A file-tree writer and a complete sample application used by the
   maker, builder and CLI tests.
"""

import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Sample Application
# -----------------------------------------------------------------------------
APP_CONFIG: Dict[str, Any] = {
    "app": "demo",
    "appmainview": "home",
    "basepath": "/static",
    "locales": ["en_US", {"locale": "fr_FR"}],
    "exclude": ["views/*/draft.js"],
    "bundles": [
        {"path": "views"},
        {"path": "plugins"},
        {"path": "locales"},
        {"path": "vendor", "destination": "shared"},
    ],
    "copyright": {"name": "Demo", "version": "1.0", "text": "All rights reserved."},
    "lang": "en",
}

CORE_CONFIG: Dict[str, Any] = {
    "base": "/core/",
    "modules": {"ys_core": {"path": "core.js"}},
    "copyright": {"name": "Core", "version": "2.0", "text": "Core runtime."},
}

SAMPLE_FILES: Dict[str, str] = {
    "config/app_config.js": json.dumps(APP_CONFIG),
    "config/tests_config.js": json.dumps({"lang": "fr"}),
    "runtime/core/core_config.js": json.dumps(CORE_CONFIG),
    "runtime/build/loader.js": "var loader = true;\n",
    "runtime/build/init.js": "var init = true;\n",
    "index.html": (
        "<html>\n<head>\n<style>{css}\nbody {\n  margin: 0;\n}\n{/css}</style>\n"
        "<script src=\"{$basepath}/config/config.js\"></script>\n</head>\n</html>\n"
    ),
    "views/home/home.js": (
        "/**\n * @module home\n * @requires [ \"node\", 'ys_core' ]\n */\n"
        "Y.log(\"booting\");\n"
        "var root = \"{$basepath}/views\";\n"
    ),
    "views/home/list.js": (
        "/**\n * @module list\n * @requires home\n */\n"
        "var tpl = {tpl views/home/item.tpl.html};\n"
    ),
    "views/home/item.tpl.html": "<li>{$BASEPATH}/item</li>",
    "views/home/home_test.js": "/** @module home_test */\n",
    "views/home/draft.js": "/** @module draft */\n",
    "views/home/routes.js": "// routing table\nvar routes = {\n  home: '/'\n};\n",
    "views/home/assets/home.css": "/* home */\n.home {\n  color: red;\n}\n",
    "views/home/.hidden.js": "/** @module hidden */\n",
    "plugins/popup/popup.js": "/** @module popup @requires home */\nvar popup = 1;\n",
    "plugins/popup/assets/popup.css": ".popup { top: 0; }\n",
    "locales/en_US/main.l10n.js": json.dumps({"hello": "Hello"}),
    "locales/fr_FR/main.l10n.js": json.dumps({"hello": "Bonjour"}),
    "vendor/lib.txt": "plain vendor data\n",
    "vendor/util.js": "var util = {};\n",
    "build/keep.txt": "hand placed\n",
    "build/123/stale.js": "old\n",
    "build/index.html": "old page\n",
}


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Write a mapping of relative paths to text contents under root."""
    for rel_path, content in files.items():
        target = root / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """
    Return a writer creating files under a fresh project directory.

    Returns:
        Callable: Function mapping {relative path: content} to the project root.
    """
    root = tmp_path / "project"
    root.mkdir()
    return lambda files: write_tree(root, files)


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """
    Create a complete sample application.

    Returns:
        Path: Root directory of the application.
    """
    root = tmp_path / "app"
    root.mkdir()
    return write_tree(root, SAMPLE_FILES)


@pytest.fixture
def build_settings(sample_project: Path) -> Dict[str, Any]:
    """
    Return validated-looking build settings for the sample application.

    Returns:
        Dict[str, Any]: Settings with a fixed build identifier.
    """
    return {
        "project_path": str(sample_project),
        "build_dir": "build",
        "runtime_dir": "runtime",
        "variant": "prod",
        "build_id": "900",
        "debug": False,
        "exclude_patterns": [],
    }
