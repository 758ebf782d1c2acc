from __future__ import annotations

"""
Copyright Header Stamping.
"""

from typing import Optional

from modforge.domain import constants as const
from modforge.domain.config import AppDescriptor, CoreDescriptor
from modforge.domain.models import Copyright


def render_header(copyright: Optional[Copyright]) -> str:
    """
    Render the comment block placed on top of generated files.

    Args:
        copyright: Header metadata, or None when the descriptor has none.

    Returns:
        str: The header, or an empty string.
    """
    if copyright is None:
        return ""
    return const.COPYRIGHT_TEMPLATE.format(
        name=copyright.name,
        version=copyright.version,
        text=copyright.text,
    )


def select_copyright(
        rel_path: str,
        app: AppDescriptor,
        core: CoreDescriptor,
        runtime_dir: str = const.RUNTIME_DIR,
) -> Optional[Copyright]:
    """Runtime files carry the core copyright, everything else the app's."""
    prefix = runtime_dir.strip("/") + "/"
    if rel_path.startswith(prefix):
        return core.copyright
    return app.copyright


def stamp(content: str, copyright: Optional[Copyright]) -> str:
    return render_header(copyright) + content
