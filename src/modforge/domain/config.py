from __future__ import annotations

"""
Configuration Domain Management.

Loads the JSON descriptors that drive a build: the application descriptor
living in the project's `config/` folder (with optional per-variant
overlays) and the core descriptor shipped with the client runtime. Also
provides the default build settings consumed by the CLI.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from modforge.domain import constants as const
from modforge.domain.errors import ConfigurationError
from modforge.domain.models import BuildVariant, BundleRelocation, Copyright

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Descriptor Models
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AppDescriptor:
    """
    Application descriptor, after variant overlays were applied.

    Attributes:
        raw: The merged JSON document, passed through to the loader config.
        app_name: Loader group name of the application.
        main_view: Name of the main view module.
        basepath: Public URL prefix of the application.
        locales: Locale identifiers to compile.
        exclude: Glob patterns excluded from builds.
        bundle_paths: Source roots contributed by bundles.
        relocations: Bundles redirected to another output root.
        copyright: Optional copyright header metadata.
    """
    raw: Dict[str, Any]
    app_name: str = const.DEFAULT_APP_NAME
    main_view: str = const.DEFAULT_MAIN_VIEW
    basepath: str = ""
    locales: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    bundle_paths: List[str] = field(default_factory=list)
    relocations: List[BundleRelocation] = field(default_factory=list)
    copyright: Optional[Copyright] = None


@dataclass(frozen=True)
class CoreDescriptor:
    """
    Core runtime descriptor.

    Attributes:
        raw: The JSON document as read from disk.
        copyright: Optional copyright header metadata for runtime files.
    """
    raw: Dict[str, Any]
    copyright: Optional[Copyright] = None

    def loader_group(self, base: str) -> Dict[str, Any]:
        """Build the `core` loader group, without build-only metadata."""
        group = {k: v for k, v in self.raw.items() if k != "copyright"}
        group.setdefault("modules", {})
        group["base"] = base
        return group


# -----------------------------------------------------------------------------
# Build Settings (Dict-based)
# -----------------------------------------------------------------------------
def get_default_settings() -> Dict[str, Any]:
    """
    Generate the default build settings.
    This dictionary drives the behavior of the Builder.

    Returns:
        Dict[str, Any]: Default settings values.
    """
    return {
        # IO Paths
        "project_path": os.getcwd(),
        "build_dir": const.BUILD_DIR,
        "runtime_dir": const.RUNTIME_DIR,

        # Build Identity
        "variant": BuildVariant.PRODUCTION.value,
        "build_id": "",

        # Compilation
        "debug": False,
        "exclude_patterns": [],
    }


# -----------------------------------------------------------------------------
# Descriptor Loading
# -----------------------------------------------------------------------------
def load_app_descriptor(
        project_root: Path,
        variant: BuildVariant = BuildVariant.PRODUCTION,
) -> AppDescriptor:
    """
    Load the application descriptor and apply the variant overlay.

    Args:
        project_root: Root directory of the client application.
        variant: Target variant; 'dev' and 'tests' merge their own overlay file.

    Returns:
        AppDescriptor: The parsed descriptor.

    Raises:
        ConfigurationError: If the descriptor is missing or not a JSON object.
    """
    config_dir = Path(project_root) / const.CONFIG_DIR
    app_path = config_dir / const.APP_CONFIG_FILE

    if not app_path.is_file():
        raise ConfigurationError(
            f"App config is missing. Please put a {const.APP_CONFIG_FILE} "
            f"file into your {const.CONFIG_DIR} folder."
        )

    data = _read_json_object(app_path)

    overlay_name = const.VARIANT_CONFIG_FILES.get(variant.value)
    if overlay_name:
        overlay_path = config_dir / overlay_name
        if overlay_path.is_file():
            logger.debug(f"Applying {variant.value} overlay from {overlay_path}")
            data.update(_read_json_object(overlay_path))

    return _build_app_descriptor(data)


def load_core_descriptor(runtime_root: Path) -> CoreDescriptor:
    """
    Load the core runtime descriptor.

    Args:
        runtime_root: Directory of the client runtime inside the project.

    Returns:
        CoreDescriptor: The parsed descriptor.

    Raises:
        ConfigurationError: If the descriptor is missing or not a JSON object.
    """
    core_path = Path(runtime_root) / const.CORE_CONFIG_FILE
    if not core_path.is_file():
        raise ConfigurationError(
            f"Core config is missing. Please restore the {core_path} file."
        )

    data = _read_json_object(core_path)
    return CoreDescriptor(raw=data, copyright=Copyright.from_dict(data.get("copyright")))


# -----------------------------------------------------------------------------
# Private Helpers
# -----------------------------------------------------------------------------
def _read_json_object(path: Path) -> Dict[str, Any]:
    """Parse a descriptor file that must hold a single JSON object."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Unable to read descriptor {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Descriptor {path} must contain a JSON object.")
    return data


def _build_app_descriptor(data: Dict[str, Any]) -> AppDescriptor:
    bundle_paths: List[str] = []
    relocations: List[BundleRelocation] = []

    for bundle in data.get("bundles") or []:
        if not isinstance(bundle, dict) or not bundle.get("path"):
            logger.warning(f"Ignoring malformed bundle entry: {bundle!r}")
            continue
        path = str(bundle["path"]).strip("/")
        bundle_paths.append(path)
        if bundle.get("destination"):
            relocations.append(BundleRelocation(path, str(bundle["destination"]).strip("/")))

    locales: List[str] = []
    for entry in data.get("locales") or []:
        locale = entry.get("locale") if isinstance(entry, dict) else entry
        if locale:
            locales.append(str(locale))

    return AppDescriptor(
        raw=data,
        app_name=data.get("app") or const.DEFAULT_APP_NAME,
        main_view=data.get("appmainview") or const.DEFAULT_MAIN_VIEW,
        basepath=str(data.get("basepath") or "").rstrip("/"),
        locales=locales,
        exclude=[str(p) for p in data.get("exclude") or []],
        bundle_paths=bundle_paths,
        relocations=relocations,
        copyright=Copyright.from_dict(data.get("copyright")),
    )
