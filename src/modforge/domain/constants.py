from __future__ import annotations

"""
Domain Constants and Source Tree Conventions.

Centralizes the file names, directory names and markers that the build
pipeline relies on to recognise the layout of a client application.
"""

from typing import List, Tuple

# -----------------------------------------------------------------------------
# PROJECT LAYOUT
# -----------------------------------------------------------------------------

CONFIG_DIR = "config"
BUILD_DIR = "build"
RUNTIME_DIR = "runtime"
LOCALES_DIR = "locales"

APP_CONFIG_FILE = "app_config.js"
CORE_CONFIG_FILE = "core/core_config.js"

VARIANT_CONFIG_FILES = {
    "dev": "dev_config.js",
    "tests": "tests_config.js",
}

# Roots scanned when assembling the loader manifest
MANIFEST_ROOTS: Tuple[str, ...] = ("locales", "plugins", "views", "config")

# Runtime files copied verbatim into every build
BOOTSTRAP_FILES: Tuple[str, ...] = ("loader.js", "init.js")
BOOTSTRAP_SUBDIR = "build"

# -----------------------------------------------------------------------------
# GENERATED CONFIGURATION
# -----------------------------------------------------------------------------

LOADER_GLOBAL = "YUI_config"
LOADER_CONFIG_FILE = "config.js"
LOADER_TEST_CONFIG_FILE = "tconfig.js"

DEFAULT_APP_NAME = "app"
DEFAULT_MAIN_VIEW = "main"
CORE_GROUP = "core"

# Generated or descriptor files that must never be compiled into a build
GENERATED_CONFIG_FILES: List[str] = [
    "config/config.js",
    "config/app_config.js",
    "config/dev_config.js",
    "config/tests_config.js",
    "config/tconfig.js",
]

# -----------------------------------------------------------------------------
# TEMPLATE MARKERS
# -----------------------------------------------------------------------------

BASEPATH_TOKEN = "{$basepath}"
NEWLINE_SENTINEL = "[[__BR__]]"
STYLE_ISLAND_OPEN = "{css}"
STYLE_ISLAND_CLOSE = "{/css}"

COPYRIGHT_TEMPLATE = "/*\n{name} {version}\n{text}\n*/\n"
