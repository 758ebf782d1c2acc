from __future__ import annotations

"""
Build Orchestrator.

Coordinates a complete build of a client application:
1. Loads the application and core descriptors (fatal when missing).
2. Removes stale generated entries from the build directory.
3. Allocates the versioned output root.
4. Walks config, bundle roots and root-level pages, compiling or copying
   every file into its destination.
5. Assembles the module manifest and writes the loader configuration.
6. Compiles one bundle per configured locale.
7. Copies the runtime bootstrap files, stamped with the core copyright.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Tuple

from modforge.core.build.copyright import select_copyright, stamp
from modforge.core.build.destinations import destination_path, is_root_markup
from modforge.core.compilers.i18n import I18nCompiler
from modforge.core.compilers.markup import MarkupCompiler
from modforge.core.compilers.module import ModuleCompiler
from modforge.core.compilers.routes import RoutesCompiler
from modforge.core.compilers.style import StyleCompiler
from modforge.core.compilers.template import TemplateCompiler
from modforge.core.maker.maker import ModuleMaker
from modforge.core.pipeline.components.filters import (
    classify,
    compile_exclusions,
    is_excluded,
    is_routes_file,
    is_template_partial,
    is_test_file,
)
from modforge.core.walker.tree_walker import FileHandler, TreeWalker
from modforge.domain import constants as const
from modforge.domain.config import load_app_descriptor, load_core_descriptor
from modforge.domain.models import BuildContext, BuildResult, BuildVariant, FileKind, SourceTree
from modforge.infra.fs import clean_build_dir, copy_file, read_text, run_blocking, write_text

logger = logging.getLogger(__name__)


def new_build_id() -> str:
    """Time-derived build identifier, in milliseconds."""
    return str(int(time.time() * 1000))


class Builder(FileHandler):
    """
    Per-file compile/copy dispatcher wrapped by the build pre/post steps.
    """

    def __init__(self, settings: Dict[str, Any]) -> None:
        """
        Args:
            settings: Validated build settings (see `validate_settings`).

        Raises:
            ConfigurationError: If a descriptor is missing or malformed.
                Nothing is written to disk in that case.
        """
        self.project_root = Path(settings["project_path"])
        self.runtime_dir = str(settings.get("runtime_dir") or const.RUNTIME_DIR).strip("/")
        self.runtime_root = self.project_root / self.runtime_dir
        variant = BuildVariant.parse(settings.get("variant") or BuildVariant.PRODUCTION.value)

        self.app = load_app_descriptor(self.project_root, variant)
        self.core = load_core_descriptor(self.runtime_root)

        build_id = str(settings.get("build_id") or "") or new_build_id()
        build_dir = self.project_root / (settings.get("build_dir") or const.BUILD_DIR)
        self.context = BuildContext(
            build_id=build_id,
            build_dir=build_dir,
            output_root=build_dir / build_id,
            variant=variant,
            base_path=f"{self.app.basepath}/{build_id}",
            debug=bool(settings.get("debug")),
        )

        self.exclude: List[str] = (
            list(const.GENERATED_CONFIG_FILES)
            + list(self.app.exclude)
            + list(settings.get("exclude_patterns") or [])
        )
        self._exclusions = compile_exclusions(self.exclude)

        self.root_pages = self._find_root_pages()
        self.tree = SourceTree(
            dirs=(const.CONFIG_DIR, *self.app.bundle_paths),
            files=tuple(self.root_pages),
        )

        self._walker = TreeWalker(self.project_root, self)
        self.counters: Dict[str, int] = {}
        self._reset_counters()

        logger.debug(
            f"Builder ready: build_id={build_id}, variant={variant.value}, "
            f"bundles={self.app.bundle_paths}"
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    async def build(self) -> BuildResult:
        """
        Run the full build.

        Returns:
            BuildResult: Summary of the produced build.
        """
        ctx = self.context
        logger.info(f"Build {ctx.build_id} started ({ctx.variant.value}) in {self.project_root}")
        self._reset_counters()

        removed = clean_build_dir(ctx.build_dir, self.root_pages)
        if removed:
            logger.info(f"Cleaned {len(removed)} stale entries from {ctx.build_dir}")

        Path(ctx.output_root).mkdir(parents=True, exist_ok=True)

        files = await self._walker.fetch(self.tree)
        logger.info(f"Processed {files} files from {len(self.tree.dirs)} roots")

        config_path, modules = await self.make_config()
        bundles = await self._compile_locales()
        self._copy_bootstrap()

        logger.info(
            f"Build {ctx.build_id} complete: {self.counters['compiled']} compiled, "
            f"{self.counters['copied']} copied, {self.counters['skipped']} skipped, "
            f"{self.counters['excluded']} excluded"
        )
        return BuildResult(
            ok=True,
            build_id=ctx.build_id,
            output_root=str(ctx.output_root),
            config_path=str(config_path),
            locale_bundles=[str(p) for p in bundles],
            counters=dict(self.counters),
            modules=modules,
        )

    async def make_config(self) -> Tuple[Path, int]:
        """
        Assemble the module manifest and write the loader configuration.

        Returns:
            Tuple[Path, int]: Written configuration path and module count.
        """
        roots = tuple(
            d for d in const.MANIFEST_ROOTS if (self.project_root / d).is_dir()
        )
        maker = ModuleMaker(self.project_root, exclude=self.exclude)
        manifest = await maker.fetch(SourceTree(dirs=roots))
        config_path = maker.write_config(self.context, self.app, self.core)
        return config_path, len(manifest)

    def run(self, *, config_only: bool = False) -> BuildResult:
        """
        Drive `build()` or `make_config()` on a fresh event loop.

        Args:
            config_only: Only regenerate the loader configuration.

        Returns:
            BuildResult: Summary of the run.
        """
        if not config_only:
            return asyncio.run(self.build())

        config_path, modules = asyncio.run(self.make_config())
        return BuildResult(
            ok=True,
            build_id=self.context.build_id,
            output_root=str(self.context.output_root),
            config_path=str(config_path),
            modules=modules,
        )

    # -------------------------------------------------------------------------
    # Per-file Dispatch
    # -------------------------------------------------------------------------

    async def handle_file(self, rel_path: str) -> None:
        if is_excluded(rel_path, self._exclusions):
            self.counters["excluded"] += 1
            return

        if is_test_file(rel_path) or is_template_partial(rel_path):
            self.counters["skipped"] += 1
            logger.debug(f"Skipped {rel_path}")
            return

        kind = classify(rel_path)
        target = destination_path(rel_path, self.context, self.app.relocations)

        if kind is FileKind.SCRIPT:
            content = await self._compile_script(rel_path)
            await run_blocking(write_text, target, self._stamp(rel_path, content))
        elif kind is FileKind.STYLE:
            content = await StyleCompiler(
                file=rel_path,
                root=self.project_root,
                basepath=self.context.base_path,
            ).parse()
            await run_blocking(write_text, target, self._stamp(rel_path, content))
        elif kind is FileKind.MARKUP:
            if is_root_markup(rel_path):
                target = Path(self.context.build_dir) / rel_path
            content = await MarkupCompiler(
                file=rel_path,
                root=self.project_root,
                basepath=self.context.base_path,
            ).parse()
            await run_blocking(write_text, target, content)
        else:
            await run_blocking(copy_file, self.project_root / rel_path, target)
            self.counters["copied"] += 1
            return

        self.counters["compiled"] += 1

    async def _compile_script(self, rel_path: str) -> str:
        if is_routes_file(rel_path):
            return await RoutesCompiler(file=rel_path, root=self.project_root).parse()

        templated = await TemplateCompiler(
            file=rel_path,
            root=self.project_root,
            basepath=self.context.base_path,
        ).parse()
        return await ModuleCompiler(
            content=templated,
            debug=self.context.debug,
            version=self.context.build_id,
        ).parse()

    def _stamp(self, rel_path: str, content: str) -> str:
        copyright = select_copyright(rel_path, self.app, self.core, self.runtime_dir)
        return stamp(content, copyright)

    # -------------------------------------------------------------------------
    # Post-traversal Steps
    # -------------------------------------------------------------------------

    async def _compile_locales(self) -> List[Path]:
        bundles: List[Path] = []
        locale_dir = Path(self.context.output_root) / const.LOCALES_DIR

        for locale in self.app.locales:
            target = locale_dir / f"{locale}.js"
            await I18nCompiler(locale, root=self.project_root).parse(
                lambda content, target=target: run_blocking(write_text, target, content)
            )
            bundles.append(target)
            logger.debug(f"Locale bundle written: {target}")

        return bundles

    def _copy_bootstrap(self) -> None:
        source_dir = self.runtime_root / const.BOOTSTRAP_SUBDIR
        target_dir = Path(self.context.output_root) / self.runtime_dir / const.BOOTSTRAP_SUBDIR

        for name in const.BOOTSTRAP_FILES:
            content = read_text(source_dir / name)
            write_text(target_dir / name, stamp(content, self.core.copyright))
        logger.debug(f"Bootstrap files copied to {target_dir}")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find_root_pages(self) -> List[str]:
        if not self.project_root.is_dir():
            return []
        return sorted(
            p.name for p in self.project_root.iterdir()
            if p.is_file() and not p.name.startswith(".") and p.suffix.lower() == ".html"
        )

    def _reset_counters(self) -> None:
        self.counters = {"compiled": 0, "copied": 0, "skipped": 0, "excluded": 0}


def run_build(settings: Dict[str, Any], *, config_only: bool = False) -> BuildResult:
    """
    Synchronous entry point running a build on a fresh event loop.

    Args:
        settings: Validated build settings.
        config_only: Only regenerate the loader configuration of the build.

    Returns:
        BuildResult: Summary of the produced build.
    """
    return Builder(settings).run(config_only=config_only)
