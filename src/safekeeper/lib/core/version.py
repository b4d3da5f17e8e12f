# SPDX-FileCopyrightText: 2026 Jiri Vyskocil
# SPDX-License-Identifier: Apache-2.0

"""Version and revision information for safekeeper (used by ``--version``)."""

import json
from importlib import metadata
from typing import Any


def get_version_info() -> tuple[str, str | None]:
    """Get version and VCS revision information.

    VERSION DETECTION:
      - Primary: Import __version__ from the installed safekeeper package
      - Fallback: "unknown"

    REVISION DETECTION:
      When installed from a VCS URL (``pip install git+https://...``), pip
      records PEP 610 metadata in direct_url.json. If present, the requested
      revision (or commit id) is reported. Releases report no revision.

    Returns:
        tuple: (version_string, revision) where revision is None for releases
               or when it is not available
    """
    try:
        from safekeeper import __version__

        version = __version__
    except (ImportError, AttributeError):
        version = "unknown"

    return version, _get_pep610_revision()


def _get_pep610_revision(dist_name: str = "safekeeper") -> str | None:
    """Return VCS revision from PEP 610 metadata, if available."""
    try:
        dist = metadata.distribution(dist_name)
        direct_url = dist.read_text("direct_url.json")
    except (
        metadata.PackageNotFoundError,
        FileNotFoundError,
        PermissionError,
        UnicodeDecodeError,
        OSError,
    ):
        return None

    if not direct_url:
        return None

    try:
        data = json.loads(direct_url)
    except json.JSONDecodeError:
        return None

    vcs_info = data.get("vcs_info")
    if not isinstance(vcs_info, dict):
        return None

    def validate_and_strip(value: Any) -> str | None:
        """Validate that value is a non-empty string after stripping whitespace."""
        if isinstance(value, str):
            stripped = value.strip()
            if stripped:
                return stripped
        return None

    # Try requested_revision first, then commit_id
    if result := validate_and_strip(vcs_info.get("requested_revision")):
        return result

    if result := validate_and_strip(vcs_info.get("commit_id")):
        return result

    return None


def format_version_string(version: str, revision: str | None) -> str:
    """Format version and revision into a display string.

    Args:
        version: The version string (e.g., "1.0.0")
        revision: The VCS revision or None

    Returns:
        Formatted string like "1.0.0" or "1.0.0 [main]"
    """
    if revision:
        return f"{version} [{revision}]"
    return version
