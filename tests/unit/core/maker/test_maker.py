from __future__ import annotations

"""
Unit tests for the ModuleMaker.

Runs the maker over the sample application and over small ad-hoc trees,
then checks the manifest and the generated loader configuration.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from modforge.core.maker.maker import ModuleMaker
from modforge.domain import constants as const
from modforge.domain.config import load_app_descriptor, load_core_descriptor
from modforge.domain.errors import AnnotationError, StyleAssetPathError
from modforge.domain.models import BuildContext, BuildVariant, SourceTree

MANIFEST_TREE = SourceTree(dirs=("locales", "plugins", "views", "config"))


def _read_loader_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    prefix = f"{const.LOADER_GLOBAL}="
    assert text.startswith(prefix) and text.endswith(";")
    return json.loads(text[len(prefix):-1])


def _context(root: Path, variant: BuildVariant = BuildVariant.PRODUCTION) -> BuildContext:
    return BuildContext(
        build_id="900",
        build_dir=root / "build",
        output_root=root / "build" / "900",
        variant=variant,
        base_path="/static/900",
    )


def test_maker_collects_sample_modules(sample_project: Path) -> None:
    """TC-01: Scripts, styles and locale files are described; others skipped."""
    maker = ModuleMaker(
        sample_project,
        exclude=const.GENERATED_CONFIG_FILES + ["views/*/draft.js"],
    )
    manifest = asyncio.run(maker.fetch(MANIFEST_TREE))

    assert set(manifest) == {
        "home",
        "list",
        "popup",
        "css_home_home",
        "css_plugins_popup_popup",
        "l10n_en_US_main",
        "l10n_fr_FR_main",
    }
    assert manifest.get("home").dependencies == ("node", "ys_core")
    assert manifest.get("popup").dependencies == ("home",)
    assert manifest.get("list").path == "views/home/list.js"
    assert "hidden" not in manifest
    assert "home_test" not in manifest
    assert maker.counters["excluded"] == 3


def test_maker_fails_on_style_outside_assets(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-02: A stylesheet without an assets/ segment aborts the traversal."""
    root = make_tree({
        "views/ok/assets/ok.css": "",
        "views/home/home.css": "",
    })
    maker = ModuleMaker(root)

    with pytest.raises(StyleAssetPathError):
        asyncio.run(maker.fetch(SourceTree(dirs=("views",))))


def test_maker_propagates_malformed_annotation(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-03: Malformed @requires annotations surface from fetch()."""
    root = make_tree({"views/bad.js": "/** @module bad\n @requires [a, b */"})

    with pytest.raises(AnnotationError):
        asyncio.run(ModuleMaker(root).fetch(SourceTree(dirs=("views",))))


def test_maker_name_collision_keeps_one_entry(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-04: Two files announcing the same module produce one entry."""
    root = make_tree({
        "views/a.js": "/** @module shared */",
        "views/b.js": "/** @module shared */",
    })
    manifest = asyncio.run(ModuleMaker(root).fetch(SourceTree(dirs=("views",))))

    assert len(manifest) == 1
    assert manifest.get("shared").path in ("views/a.js", "views/b.js")


def test_maker_fresh_manifest_per_fetch(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-05: Each traversal starts from an empty manifest."""
    root = make_tree({
        "a/one.js": "/** @module one */",
        "b/two.js": "/** @module two */",
    })
    maker = ModuleMaker(root)

    asyncio.run(maker.fetch(SourceTree(dirs=("a",))))
    second = asyncio.run(maker.fetch(SourceTree(dirs=("b",))))

    assert list(second) == ["two"]


def test_write_config_document(sample_project: Path) -> None:
    """TC-06: The loader document merges app keys, core group and manifest."""
    app = load_app_descriptor(sample_project)
    core = load_core_descriptor(sample_project / "runtime")
    maker = ModuleMaker(sample_project, exclude=const.GENERATED_CONFIG_FILES)
    asyncio.run(maker.fetch(MANIFEST_TREE))

    path = maker.write_config(_context(sample_project), app, core)

    assert path == sample_project / "build" / "900" / "config" / "config.js"
    doc = _read_loader_config(path)
    assert doc["app"] == "demo"
    assert doc["appmainview"] == "home"
    assert doc["lang"] == "en"

    core_group = doc["groups"]["core"]
    assert core_group["base"] == "/static/900/"
    assert core_group["modules"] == {"ys_core": {"path": "core.js"}}
    assert "copyright" not in core_group

    app_group = doc["groups"]["demo"]
    assert app_group["base"] == "/static/900/"
    assert app_group["modules"]["home"] == {
        "path": "views/home/home.js",
        "requires": ["node", "ys_core"],
    }
    assert app_group["modules"]["css_home_home"]["type"] == "css"
    assert "requires" not in app_group["modules"]["l10n_fr_FR_main"]


def test_write_config_defaults_and_test_variant(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-07: Defaults apply and the test variant writes tconfig.js."""
    root = make_tree({
        "config/app_config.js": "{}",
        "runtime/core/core_config.js": "{}",
    })
    app = load_app_descriptor(root, BuildVariant.TEST)
    core = load_core_descriptor(root / "runtime")
    maker = ModuleMaker(root)
    asyncio.run(maker.fetch(SourceTree()))

    path = maker.write_config(_context(root, BuildVariant.TEST), app, core, base="/cdn/")

    assert path.name == "tconfig.js"
    doc = _read_loader_config(path)
    assert doc["app"] == "app"
    assert doc["appmainview"] == "main"
    assert doc["groups"]["app"] == {"modules": {}, "base": "/cdn/"}
