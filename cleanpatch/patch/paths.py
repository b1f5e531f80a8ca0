import logging
from pathlib import Path

from cleanpatch.patch.errors import PathEscapeError

logger = logging.getLogger(__name__)


def strip_path(declared_path: str, strip_count: int) -> str:
    """
    Strip up to `strip_count` leading segments from a diff path.

    The returned fragment starts at the last separator that was stripped, so
    `strip_path("a/b/file.txt", 1)` is `"/b/file.txt"`. When nothing could be
    stripped the whole path comes back. Stripping stops early once no further
    separator is found.
    """
    if strip_count < 0:
        raise ValueError(f"strip_count must be non-negative, got {strip_count}")

    path = declared_path.replace("\\", "/")
    offset = 0
    last_separator: int | None = None

    for _ in range(strip_count):
        index = path.find("/", offset)
        if index < 0 or index == len(path) - 1:
            break
        last_separator = index
        offset = index + 1

    if last_separator is None:
        return path
    return path[last_separator:]


def resolve_destination(base_dir: Path, declared_path: str, strip_count: int) -> Path:
    """
    Resolve a patch's declared path to a file under `base_dir`.

    No existence check is made and `..` segments are kept as they are; use
    `ensure_within` when the result must stay inside `base_dir`.
    """
    fragment = strip_path(declared_path, strip_count)
    destination = Path(base_dir) / fragment.lstrip("/")
    logger.debug("Resolved %s (-p%d) -> %s", declared_path, strip_count, destination)
    return destination


def ensure_within(base_dir: Path, candidate: Path) -> Path:
    """
    Check that `candidate` stays inside `base_dir` once resolved.

    Returns:
        The resolved candidate path.

    Raises:
        PathEscapeError: if the resolved path leaves `base_dir`.
    """
    base_dir = Path(base_dir).resolve()
    resolved = Path(candidate).resolve()

    if not resolved.is_relative_to(base_dir):
        logger.warning("Path escape attempt: %s is not relative to %s", resolved, base_dir)
        raise PathEscapeError(resolved, base_dir)

    return resolved
