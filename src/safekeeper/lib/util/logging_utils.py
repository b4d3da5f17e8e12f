"""Utility functions for logging."""

import time

from ..core.config import debug_enabled, state_root


def _log_debug(message: str) -> None:
    """Append a simple debug line to the safekeeper log.

    Does nothing unless the debug log is enabled (``SAFEKEEPER_DEBUG`` or
    ``log.debug`` in the global config). Writes timestamped lines to
    ``state_root()/safekeeper.log``. Best-effort: an IO error while logging is
    ignored so it never affects a run or its (silent) standard streams.
    """
    if not debug_enabled():
        return
    try:
        log_path = state_root() / "safekeeper.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        with open(log_path, "a", encoding="utf-8", errors="backslashreplace") as f:
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        pass
