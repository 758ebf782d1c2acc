from __future__ import annotations

"""
Output Path Resolution.

Maps a source path to its location in the build tree. Files land under the
versioned output root unless a bundle relocation claims their leading path
segments, in which case they are mirrored under
`build_dir/<destination_root>` instead.
"""

from pathlib import Path
from typing import Iterable

from modforge.domain.models import BuildContext, BundleRelocation


def resolve_output_root(
        rel_path: str,
        context: BuildContext,
        relocations: Iterable[BundleRelocation] = (),
) -> Path:
    """
    Select the root directory a source file is written under.

    Args:
        rel_path: Source path relative to the project root.
        context: Current build.
        relocations: Configured bundle relocations; the last match wins.

    Returns:
        Path: The output root for this file.
    """
    root = Path(context.output_root)
    for relocation in relocations:
        if relocation.matches(rel_path):
            root = Path(context.build_dir) / relocation.destination_root
    return root


def destination_path(
        rel_path: str,
        context: BuildContext,
        relocations: Iterable[BundleRelocation] = (),
) -> Path:
    """Full output path of a source file, mirroring its relative path."""
    return resolve_output_root(rel_path, context, relocations) / rel_path


def is_root_markup(rel_path: str) -> bool:
    """Markup files at the project root are published beside the builds."""
    return "/" not in rel_path.strip("/")
