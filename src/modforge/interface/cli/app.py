from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of default
settings with CLI overrides, settings validation, build execution and
result rendering.
"""

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from modforge.core.build.builder import Builder, new_build_id
from modforge.core.pipeline.validator import validate_settings
from modforge.domain.config import get_default_settings
from modforge.domain.errors import ConfigurationError, ModforgeError
from modforge.domain.models import BuildResult
from modforge.infra.logging import LoggingConfig, configure_logging, get_logger, shutdown_logging
from modforge.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 build failure, 2 invalid input).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Settings resolution and validation
    overrides = cli_args.args_to_overrides(args)
    raw_settings = _merge_settings(get_default_settings(), overrides)
    settings, warnings = validate_settings(raw_settings, strict=False)
    if args.config_only and not settings["build_id"]:
        print("ERROR: --config-only needs the --build-id of an existing build.", file=sys.stderr)
        return 2
    if not settings["build_id"]:
        settings["build_id"] = new_build_id()

    # 3. Logging bootstrap (console on stderr, optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    logging_conf = LoggingConfig(
        level=log_level,
        console=True,
        log_file=args.log_file,
        build_id=settings["build_id"],
    )
    configure_logging(logging_conf)

    try:
        return _run(args, settings, warnings)
    finally:
        shutdown_logging()


def _run(args: argparse.Namespace, settings: Dict[str, Any], warnings: List[str]) -> int:
    for w in warnings:
        logger.warning(f"Settings Constraint: {w}")

    # Pre-flight project verification
    project_path = settings["project_path"]
    if not os.path.isdir(project_path):
        msg = f"Project directory does not exist: {project_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    try:
        builder = Builder(settings)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    if args.config_only and not builder.context.output_root.is_dir():
        msg = f"Build {settings['build_id']} does not exist: {builder.context.output_root}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    logger.info(f"Targeting project directory: {project_path}")
    try:
        result = builder.run(config_only=bool(args.config_only))
    except KeyboardInterrupt:
        logger.warning("Build interrupted by user.")
        return 130
    except (ModforgeError, OSError, ValueError) as e:
        logger.critical(f"Build failed: {e}", exc_info=True)
        print(f"ERROR: Build failed: {e}", file=sys.stderr)
        return 1

    # Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1


# -----------------------------------------------------------------------------
# SETTINGS MERGING
# -----------------------------------------------------------------------------

def _merge_settings(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of the known override keys into the base settings.

    Args:
        base: Default settings.
        overrides: Values coming from the command line.

    Returns:
        Dict[str, Any]: The merged settings.
    """
    out = dict(base)
    keys_to_merge = [
        "project_path", "build_dir", "runtime_dir",
        "variant", "build_id", "debug", "exclude_patterns",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: BuildResult) -> None:
    """
    Print the build result to standard output.

    Args:
        result: The build result to render.
    """
    print(f"Build {result.build_id} completed.")
    print(f"Output directory: {result.output_root}")
    if result.config_path:
        print(f"Loader configuration: {result.config_path} ({result.modules} modules)")

    labels = {
        "compiled": "Files compiled",
        "copied": "Files copied",
        "skipped": "Files skipped",
        "excluded": "Files excluded",
    }
    for key, label in labels.items():
        if key in result.counters:
            print(f"{label}: {result.counters[key]}")

    if result.locale_bundles:
        print("\nLocale bundles:")
        for path in result.locale_bundles:
            print(f"  - {path}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
