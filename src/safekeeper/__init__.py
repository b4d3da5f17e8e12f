# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""safekeeper package.

Modules:
- safekeeper.cli: CLI entry point package (safekeeper)
- safekeeper.lib.substitution: Template substitution engine
- safekeeper.lib.errors: Error conditions raised by the engine
- safekeeper.lib.core: Configuration, paths, version
- safekeeper.lib.util: Internal helpers (fs, logging, ansi)
"""

__all__ = [
    "cli",
    "lib",
]

# Version information - single source of truth using importlib.metadata
try:
    from importlib.metadata import version

    __version__ = version("safekeeper")
except Exception:
    # Fallback for development mode when package is not installed
    try:
        import tomllib
        from pathlib import Path

        pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                pyproject_data = tomllib.load(f)
                __version__ = pyproject_data["tool"]["poetry"]["version"]
        else:
            __version__ = "unknown"
    except Exception:
        __version__ = "unknown"
