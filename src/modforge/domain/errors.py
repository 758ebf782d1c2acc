from __future__ import annotations

"""
Build Domain Error Hierarchy.

Defines the exceptions raised by the traversal, manifest and orchestration
layers. Soft skips (unannotated scripts, excluded files) never raise; every
class below represents a failure that must reach the caller.
"""

# -----------------------------------------------------------------------------
# BASE ERROR
# -----------------------------------------------------------------------------

class ModforgeError(Exception):
    """Root of every error raised deliberately by the build pipeline."""


# -----------------------------------------------------------------------------
# CONFIGURATION ERRORS
# -----------------------------------------------------------------------------

class ConfigurationError(ModforgeError):
    """A core or application descriptor is missing or unreadable."""


# -----------------------------------------------------------------------------
# TRAVERSAL ERRORS
# -----------------------------------------------------------------------------

class TraversalError(ModforgeError):
    """Failure raised while enumerating the source tree."""


class MissingDirectoryError(TraversalError, FileNotFoundError):
    """
    A configured source root does not exist.

    Attributes:
        rel_path: Directory path relative to the project root.
    """

    def __init__(self, rel_path: str) -> None:
        self.rel_path = rel_path
        super().__init__(f"[walker] directory not found: {rel_path}")


class BarrierError(TraversalError):
    """The join barrier received an unbalanced add/done sequence."""


# -----------------------------------------------------------------------------
# MANIFEST ERRORS
# -----------------------------------------------------------------------------

class ManifestError(ModforgeError):
    """Metadata could not be extracted from a source file."""


class StyleAssetPathError(ManifestError):
    """A stylesheet lives outside the mandatory `<group>/assets/` layout."""

    def __init__(self, rel_path: str) -> None:
        self.rel_path = rel_path
        super().__init__(f"Style file has no assets/ segment: {rel_path}")


class AnnotationError(ManifestError):
    """A `@requires` annotation could not be parsed."""
