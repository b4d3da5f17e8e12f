import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from .paths import config_root as _config_root_base, state_root as _state_root_base

DEFAULT_OUTPUT_MODE = 0o644


# ---------- Global config ----------


def global_config_search_paths() -> list[Path]:
    """Return the ordered list of paths that will be checked for global config.

    Behavior matches global_config_path():
    - If SAFEKEEPER_CONFIG_FILE is set, only that single path is considered.
    - Otherwise, check in order:
        1) ${XDG_CONFIG_HOME:-~/.config}/safekeeper/config.yml
        2) sys.prefix/etc/safekeeper/config.yml
        3) /etc/safekeeper/config.yml
    """
    env_file = os.environ.get("SAFEKEEPER_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    user_cfg = _config_root_base() / "config.yml"
    sp_cfg = Path(sys.prefix) / "etc" / "safekeeper" / "config.yml"
    etc_cfg = Path("/etc/safekeeper/config.yml")
    return [user_cfg, sp_cfg, etc_cfg]


def global_config_path() -> Path:
    """Global config file path (resolved based on search paths).

    Resolution order (first existing wins, except explicit override is returned even
    if missing to make intent visible to the user):
    - SAFEKEEPER_CONFIG_FILE env (returned as-is)
    - ${XDG_CONFIG_HOME:-~/.config}/safekeeper/config.yml (user override)
    - sys.prefix/etc/safekeeper/config.yml (pip wheels)
    - /etc/safekeeper/config.yml (system default)
    If none exist, return the last path (/etc/safekeeper/config.yml).
    """
    candidates = global_config_search_paths()
    if len(candidates) == 1:
        return candidates[0]

    for c in candidates:
        if c.is_file():
            return c.resolve()
    return candidates[-1]


def load_global_config() -> dict[str, Any]:
    cfg_path = global_config_path()
    if not cfg_path.is_file():
        return {}
    data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        return {}
    return data


def get_global_section(key: str) -> dict[str, Any]:
    """Return a top-level section from the global config, defaulting to ``{}``.

    If the value under *key* is not a dict (e.g. the user wrote ``log: "oops"``),
    returns ``{}`` to avoid ``AttributeError`` in callers that expect ``.get()``.
    """
    cfg = load_global_config()
    value = cfg.get(key, {})
    if not isinstance(value, dict):
        return {}
    return value or {}


# ---------- Path resolution ----------


def _resolve_path(
    env_var: str | None,
    config_key: tuple[str, str] | None,
    default: Callable[[], Path],
) -> Path:
    """Resolve a path: env var → global config → computed default."""
    if env_var:
        env = os.environ.get(env_var)
        if env:
            return Path(env).expanduser().resolve()

    if config_key:
        try:
            section = get_global_section(config_key[0])
            val = section.get(config_key[1])
            if val:
                return Path(val).expanduser().resolve()
        except (OSError, UnicodeDecodeError, KeyError, TypeError, yaml.YAMLError):
            pass

    return default().resolve()


def state_root() -> Path:
    """Writable state directory (holds the debug log).

    Precedence:
    - Environment variable SAFEKEEPER_STATE_DIR (handled first)
    - If set in global config (paths.state_root), use it.
    - Otherwise, use safekeeper.lib.core.paths.state_root().
    """
    return _resolve_path("SAFEKEEPER_STATE_DIR", ("paths", "state_root"), _state_root_base)


# ---------- Settings ----------


def get_output_mode() -> int:
    """Return the permission bits for written output files (default 0o644).

    Global config::

      output:
        mode: "0644"   # or an int such as 420

    Values that cannot be parsed as a mode fall back to the default.
    """
    try:
        raw = get_global_section("output").get("mode")
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        return DEFAULT_OUTPUT_MODE
    if raw is None or isinstance(raw, bool):
        return DEFAULT_OUTPUT_MODE
    if isinstance(raw, int):
        mode = raw
    else:
        try:
            mode = int(str(raw).strip(), 8)
        except ValueError:
            return DEFAULT_OUTPUT_MODE
    if not 0 <= mode <= 0o7777:
        return DEFAULT_OUTPUT_MODE
    return mode


def debug_enabled() -> bool:
    """Return whether the debug log is enabled.

    ``SAFEKEEPER_DEBUG`` wins when set (any value other than ``""`` or ``"0"``
    enables it); otherwise ``log.debug`` from the global config is used.
    """
    env = os.environ.get("SAFEKEEPER_DEBUG")
    if env is not None:
        return env not in ("", "0")
    try:
        return bool(get_global_section("log").get("debug", False))
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        return False
