from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the `modforge` tool and translates the
parsed namespace into build-settings overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from modforge.domain.models import BuildVariant

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the modforge CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="modforge",
        description="Build a client application into a versioned output tree.",
    )

    # --- Path Management ---
    p.add_argument(
        "-p", "--project",
        dest="project_path",
        help="Root directory of the application (default: current directory).",
        default=None,
    )
    p.add_argument(
        "--build-dir",
        dest="build_dir",
        help="Build directory, relative to the project (default: build).",
        default=None,
    )
    p.add_argument(
        "--runtime-dir",
        dest="runtime_dir",
        help="Client runtime directory, relative to the project (default: runtime).",
        default=None,
    )

    # --- Build Identity ---
    p.add_argument(
        "--variant",
        choices=[v.value for v in BuildVariant],
        default=None,
        help="Target environment: dev, tests or prod (default: prod).",
    )
    p.add_argument(
        "--build-id",
        dest="build_id",
        default=None,
        help="Numeric build identifier (default: current time in milliseconds).",
    )

    # --- Compilation ---
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated globs of files left out of the build.",
    )
    p.add_argument(
        "--config-only",
        action="store_true",
        help="Only regenerate the loader configuration.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Keep debug statements in scripts and elevate logging to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the build result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into build-settings overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Settings overrides; unset flags map to None.
    """
    overrides: Dict[str, Any] = {}

    overrides["project_path"] = args.project_path
    overrides["build_dir"] = args.build_dir
    overrides["runtime_dir"] = args.runtime_dir
    overrides["variant"] = args.variant
    overrides["build_id"] = args.build_id

    if args.exclude_patterns:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)
    if args.debug:
        overrides["debug"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
