import logging
import os
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> Path:
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Write `data` to `path` through a temporary file in the same directory.

    - Write and fsync the temporary file
    - Copy the mode of an existing target onto it
    - `os.replace` it over the target

    A crash never leaves a half-written target behind.
    """

    path = Path(path)
    ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, tmp_path)
        else:
            os.chmod(tmp_path, 0o666 & ~_current_umask())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    logger.debug("Atomically wrote %d bytes to %s", len(data), path)


def _current_umask() -> int:
    # mkstemp creates 0600 files; new targets get the mode a plain open() would give
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_bytes(path: Path, data: bytes, atomic: bool = True) -> None:
    if atomic:
        atomic_write_bytes(path, data)
        return
    path = Path(path)
    ensure_dir(path.parent)
    path.write_bytes(data)
