import os
import stat
import tempfile
from pathlib import Path

from ..errors import WriteFailure


def write_atomic(path: Path, content: str, mode: int) -> None:
    """Replace *path* with *content*.

    The data goes to a temporary file next to the real destination (symlinks
    are followed) which is then renamed over it, so the destination is either
    fully rewritten or left untouched. An existing destination keeps its
    permission bits; *mode* applies to newly created files. Surrogate-escaped
    characters are written back as the raw bytes they stand for.
    """
    target = path.resolve()
    try:
        mode = stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise WriteFailure(f"writing output: {path} ({e})") from e

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as e:
        raise WriteFailure(f"writing output: {path} ({e})") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
    except (OSError, UnicodeError) as e:
        tmp_path.unlink(missing_ok=True)
        raise WriteFailure(f"writing output: {path} ({e})") from e
