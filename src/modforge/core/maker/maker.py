from __future__ import annotations

"""
Module Maker.

Walks the manifest roots of a project and turns every relevant source file
into a loader `ModuleDescriptor`. The resulting `ManifestDocument` is
merged with the core and application descriptors by `write_config` into
the configuration script loaded by the client before any module.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from modforge.core.maker.extraction import describe_locale, describe_script, describe_style
from modforge.core.pipeline.components.filters import (
    classify,
    compile_exclusions,
    is_excluded,
    is_test_file,
)
from modforge.core.walker.tree_walker import FileHandler, TreeWalker
from modforge.domain import constants as const
from modforge.domain.config import AppDescriptor, CoreDescriptor
from modforge.domain.models import BuildContext, FileKind, ManifestDocument, SourceTree
from modforge.infra.fs import read_text, run_blocking, write_text

logger = logging.getLogger(__name__)


class ModuleMaker(FileHandler):
    """
    Manifest builder layered on top of the tree walker.

    The maker owns a walker whose per-file hook is `handle_file`. A fresh
    manifest is allocated for every `fetch()`.
    """

    def __init__(
            self,
            root: Path,
            exclude: Iterable[str] = (),
    ) -> None:
        """
        Args:
            root: Project root.
            exclude: Glob patterns of files that must not produce modules.
        """
        self.root = Path(root)
        self._exclusions = compile_exclusions(exclude)
        self._walker = TreeWalker(self.root, self)
        self.manifest = ManifestDocument()
        self.counters: Dict[str, int] = {}

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    async def fetch(self, tree: SourceTree) -> ManifestDocument:
        """
        Walk the given roots and return the finalized manifest.

        Args:
            tree: Roots contributing modules.

        Returns:
            ManifestDocument: Every module discovered during this traversal.
        """
        self.manifest = ManifestDocument()
        self.counters = {"described": 0, "excluded": 0, "ignored": 0}

        await self._walker.fetch(tree)

        logger.info(
            f"Manifest assembled: {len(self.manifest)} modules "
            f"({self.counters['excluded']} excluded, {self.counters['ignored']} ignored)"
        )
        return self.manifest

    async def handle_file(self, rel_path: str) -> None:
        if is_excluded(rel_path, self._exclusions):
            self.counters["excluded"] += 1
            return

        kind = classify(rel_path)

        if kind is FileKind.SCRIPT and not is_test_file(rel_path):
            text = await run_blocking(read_text, self.root / rel_path)
            descriptor = describe_script(rel_path, text)
            if descriptor is None:
                logger.debug(f"No @module annotation, skipped: {rel_path}")
        elif kind is FileKind.STYLE:
            descriptor = describe_style(rel_path)
        elif kind is FileKind.LOCALE:
            descriptor = describe_locale(rel_path)
        else:
            descriptor = None

        if descriptor is None:
            self.counters["ignored"] += 1
            return

        self.manifest.add(descriptor)
        self.counters["described"] += 1

    # -------------------------------------------------------------------------
    # Loader Configuration
    # -------------------------------------------------------------------------

    def loader_config(
            self,
            app: AppDescriptor,
            core: CoreDescriptor,
            base: str,
    ) -> Dict[str, Any]:
        """
        Merge the descriptors and the manifest into the loader document.

        Args:
            app: Application descriptor, passed through as the document base.
            core: Core runtime descriptor, published as the `core` group.
            base: Base URL of both groups.

        Returns:
            Dict[str, Any]: The loader configuration object.
        """
        document: Dict[str, Any] = copy.deepcopy(app.raw)
        document["app"] = app.app_name
        document["appmainview"] = app.main_view

        groups = document.get("groups")
        if not isinstance(groups, dict):
            groups = {}
        document["groups"] = groups

        groups[const.CORE_GROUP] = core.loader_group(base)

        app_group = groups.get(app.app_name)
        if not isinstance(app_group, dict):
            app_group = {}
        app_group["modules"] = self.manifest.to_loader_modules()
        app_group["base"] = base
        groups[app.app_name] = app_group

        return document

    def write_config(
            self,
            context: BuildContext,
            app: AppDescriptor,
            core: CoreDescriptor,
            base: Optional[str] = None,
    ) -> Path:
        """
        Serialize the loader configuration script into the output tree.

        Args:
            context: Current build; selects the output root and file name.
            app: Application descriptor.
            core: Core runtime descriptor.
            base: Group base URL, defaults to the build's base path.

        Returns:
            Path: Location of the written configuration script.
        """
        group_base = base if base is not None else _as_directory(context.base_path)
        document = self.loader_config(app, core, group_base)

        file_name = const.LOADER_TEST_CONFIG_FILE if context.is_test else const.LOADER_CONFIG_FILE
        target = Path(context.output_root) / const.CONFIG_DIR / file_name

        payload = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
        write_text(target, f"{const.LOADER_GLOBAL}={payload};")

        logger.info(f"Loader configuration written to {target}")
        return target


def _as_directory(url: str) -> str:
    return url.rstrip("/") + "/"
