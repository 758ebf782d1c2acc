from __future__ import annotations

"""
Build Settings Validation Service.

Gatekeeper between untrusted inputs (CLI flags, JSON files) and the
Builder. Coerces types, normalizes paths and injects default values; in
lenient mode every correction is reported as a warning.
"""

import logging
from typing import Any, Dict, List, Tuple

from modforge.domain.config import get_default_settings
from modforge.domain.models import BuildVariant
from modforge.infra.fs import is_build_id, normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_settings(
        raw: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize build settings.

    Args:
        raw: Settings dictionary, possibly partial.
        strict: If True, raise on invalid values instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized settings and warnings.

    Raises:
        TypeError: In strict mode, when a field has the wrong type.
        ValueError: In strict mode, when a field has an invalid value.
    """
    warnings: List[str] = []
    defaults = get_default_settings()

    if not isinstance(raw, dict):
        msg = f"Invalid settings type: expected dict, received {type(raw).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in raw.items() if v is not None})

    for field in ("project_path", "build_dir", "runtime_dir", "variant", "build_id"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["debug"] = _as_bool(merged.get("debug"), defaults["debug"], "debug", warnings, strict)
    merged["exclude_patterns"] = _as_list_str(
        merged.get("exclude_patterns"), defaults["exclude_patterns"], "exclude_patterns", warnings, strict
    )

    # Domain-specific normalization
    merged["project_path"] = normalize_path(merged["project_path"], defaults["project_path"])
    merged["variant"] = _as_variant(merged["variant"], defaults["variant"], warnings, strict)
    merged["build_id"] = _as_build_id(merged["build_id"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback
    if isinstance(value, int) and not isinstance(value, bool) and not strict:
        warnings.append(f"Field '{field}' converted from number {value} to str.")
        return str(value)

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce numbers and keywords into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _as_variant(value: str, fallback: str, warnings: List[str], strict: bool) -> str:
    try:
        return BuildVariant.parse(value).value
    except ValueError:
        if strict:
            raise
        warnings.append(f"Unknown variant '{value}'. Using '{fallback}'.")
        return fallback


def _as_build_id(value: str, warnings: List[str], strict: bool) -> str:
    """Build identifiers must be numeric so that cleaning recognises them."""
    if not value or is_build_id(value):
        return value

    msg = f"Invalid build id '{value}': expected digits only."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} A time-based id will be used.")
    return ""
