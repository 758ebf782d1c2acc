from __future__ import annotations

"""
Build Domain Data Models.

Defines the immutable value objects exchanged between the walker, the
module maker and the build orchestrator, plus the mutable manifest that a
single traversal accumulates.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# CLASSIFICATION ENUMS
# -----------------------------------------------------------------------------

class ModuleKind(Enum):
    """Asset type announced to the client loader."""
    SCRIPT = "js"
    STYLE = "css"


class FileKind(Enum):
    """Closed set of file categories recognised at dispatch time."""
    SCRIPT = "script"
    STYLE = "style"
    MARKUP = "markup"
    LOCALE = "locale"
    STATIC = "static"


class BuildVariant(Enum):
    """Target environment of a build."""
    DEVELOPMENT = "dev"
    TEST = "tests"
    PRODUCTION = "prod"

    @classmethod
    def parse(cls, value: str) -> "BuildVariant":
        """
        Resolve a variant from its short name.

        Args:
            value: One of 'dev', 'tests' or 'prod' (case-insensitive).

        Returns:
            BuildVariant: The matching variant.

        Raises:
            ValueError: If the name is unknown.
        """
        key = (value or "").strip().lower()
        for variant in cls:
            if variant.value == key:
                return variant
        raise ValueError(f"Unknown build variant: {value!r}")


# -----------------------------------------------------------------------------
# TRAVERSAL INPUTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SourceTree:
    """
    Roots of one traversal, relative to the project root.

    Attributes:
        dirs: Directories walked recursively.
        files: Individual files handed straight to the file handler.
    """
    dirs: Tuple[str, ...] = ()
    files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BundleRelocation:
    """Redirects every file under `source_prefix` to `destination_root`."""
    source_prefix: str
    destination_root: str

    def matches(self, rel_path: str) -> bool:
        """Check whether the leading path segments equal the source prefix."""
        prefix_parts = [p for p in self.source_prefix.split("/") if p]
        path_parts = rel_path.split("/")
        return bool(prefix_parts) and path_parts[:len(prefix_parts)] == prefix_parts


@dataclass(frozen=True)
class Copyright:
    """Copyright metadata stamped on top of generated files."""
    name: str
    version: str
    text: str

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Copyright"]:
        if not data:
            return None
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            text=str(data.get("text", "")),
        )


# -----------------------------------------------------------------------------
# MANIFEST MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ModuleDescriptor:
    """
    Loader metadata extracted from one source file.

    Attributes:
        name: Module name used by the client loader.
        path: Source path relative to the project root.
        dependencies: Required module names, or None when undeclared.
        kind: Script or stylesheet.
    """
    name: str
    path: str
    dependencies: Optional[Tuple[str, ...]] = None
    kind: ModuleKind = ModuleKind.SCRIPT

    def to_loader_entry(self) -> Dict[str, Any]:
        """Render the descriptor in the loader's module-map format."""
        entry: Dict[str, Any] = {"path": self.path}
        if self.dependencies is not None:
            entry["requires"] = list(self.dependencies)
        if self.kind is ModuleKind.STYLE:
            entry["type"] = ModuleKind.STYLE.value
        return entry


@dataclass
class ManifestDocument:
    """
    Module map accumulated during a single traversal.

    Later descriptors silently replace earlier ones with the same name.
    """
    modules: Dict[str, ModuleDescriptor] = field(default_factory=dict)

    def add(self, descriptor: ModuleDescriptor) -> None:
        previous = self.modules.get(descriptor.name)
        if previous is not None:
            logger.debug(
                f"Module '{descriptor.name}' redefined: {previous.path} -> {descriptor.path}"
            )
        self.modules[descriptor.name] = descriptor

    def get(self, name: str) -> Optional[ModuleDescriptor]:
        return self.modules.get(name)

    def to_loader_modules(self) -> Dict[str, Dict[str, Any]]:
        return {name: d.to_loader_entry() for name, d in self.modules.items()}

    def __contains__(self, name: object) -> bool:
        return name in self.modules

    def __iter__(self) -> Iterator[str]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)


# -----------------------------------------------------------------------------
# BUILD MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class BuildContext:
    """
    Read-only parameters of one build invocation.

    Attributes:
        build_id: Opaque identifier, numeric when time-derived.
        build_dir: Directory holding every build.
        output_root: Versioned output directory (`build_dir/build_id`).
        variant: Target environment.
        base_path: Public URL prefix substituted for path tokens.
        debug: Keep debug statements in compiled scripts.
    """
    build_id: str
    build_dir: Path
    output_root: Path
    variant: BuildVariant = BuildVariant.PRODUCTION
    base_path: str = "/"
    debug: bool = False

    @property
    def is_test(self) -> bool:
        return self.variant is BuildVariant.TEST


@dataclass(frozen=True)
class BuildResult:
    """
    Summary of a completed build.

    Attributes:
        ok: Flag indicating success.
        build_id: Identifier of the produced build.
        output_root: Versioned output directory.
        config_path: Path of the generated loader configuration.
        locale_bundles: Compiled locale bundle paths.
        counters: Per-category file counters.
        modules: Number of modules announced to the loader.
    """
    ok: bool
    build_id: str
    output_root: str
    config_path: str = ""
    locale_bundles: List[str] = field(default_factory=list)
    counters: Dict[str, int] = field(default_factory=dict)
    modules: int = 0
