import logging
from pathlib import Path

from cleanpatch.config import ApplyConfig
from cleanpatch.patch.content import FileContent
from cleanpatch.patch.errors import (
    ContextMismatchError,
    DestinationAlreadyExistsError,
    DestinationMissingError,
    HunkOffsetMismatchError,
    IoFailureError,
)
from cleanpatch.patch.matcher import apply_hunk
from cleanpatch.patch.models import ChangeKind, Hunk, Patch
from cleanpatch.util.files import write_bytes

logger = logging.getLogger(__name__)


def apply_hunks(
    hunks: tuple[Hunk, ...],
    source: FileContent,
    *,
    path: Path | str = "",
    config: ApplyConfig | None = None,
) -> FileContent:
    """
    Fold `hunks` over `source` and return the patched content.

    Source lines between hunks and after the last one are copied through.
    Each hunk must start at or after the cursor left by the previous one,
    and its new start line must match the output produced so far, so any
    drift between the old and new line numbers is caught.
    """
    config = config or ApplyConfig()
    output: list[str] = []
    cursor = 0
    missing_newline = source.missing_newline

    for hunk in hunks:
        start = hunk.old_index
        if start < cursor or start > len(source):
            raise HunkOffsetMismatchError(
                path,
                hunk.header,
                expected_line=cursor + 1,
                declared_line=hunk.old_start,
            )

        output.extend(source.lines[cursor:start])
        if hunk.new_index != len(output):
            raise HunkOffsetMismatchError(
                path,
                hunk.header,
                expected_line=len(output) + 1,
                declared_line=hunk.new_start,
                side="new",
            )

        hunk_output, cursor = apply_hunk(
            hunk, source, start, path=path, match_mode=config.match_mode
        )
        output.extend(hunk_output)
        if cursor == len(source):
            missing_newline = hunk.new_missing_newline

    if cursor < len(source):
        output.extend(source.lines[cursor:])
        missing_newline = source.missing_newline

    return FileContent(tuple(output), missing_newline and bool(output))


def apply_patch(
    patch: Patch,
    destination: Path,
    *,
    source_path: Path | None = None,
    config: ApplyConfig | None = None,
) -> list[Path]:
    """
    Apply a single file patch.

    Args:
        patch: The patch to apply.
        destination: Resolved path of the file the patch produces (or removes).
        source_path: Resolved old path, used by renames. Defaults to
            `destination`.
        config: Encoding and write options.

    Returns:
        The paths that were written or removed.

    Raises:
        PatchApplyError: if the patch does not apply. Nothing is written for
            this patch in that case.
    """
    config = config or ApplyConfig()
    destination = Path(destination)

    if patch.change_kind == ChangeKind.CREATED:
        if destination.exists():
            raise DestinationAlreadyExistsError(destination)
        content = apply_hunks(patch.hunks, FileContent(), path=destination, config=config)
        _write(destination, content, config)
        logger.debug("Created %s with %d lines", destination, len(content))
        return [destination]

    if patch.change_kind == ChangeKind.DELETED:
        source = _read(destination, config)
        apply_hunks(patch.hunks, source, path=destination, config=config)
        leftover = _first_unconsumed_index(patch.hunks, source)
        if leftover is not None:
            raise ContextMismatchError(
                destination,
                patch.hunks[-1].header if patch.hunks else "@@ -1,0 +0,0 @@",
                line_number=leftover + 1,
                expected=None,
                actual=source.lines[leftover],
                reason="file has lines the deletion does not cover",
            )
        _remove(destination)
        logger.debug("Deleted %s", destination)
        return [destination]

    if patch.change_kind == ChangeKind.RENAMED:
        source_path = Path(source_path) if source_path is not None else destination
        source = _read(source_path, config)
        content = apply_hunks(patch.hunks, source, path=source_path, config=config)
        if source_path == destination:
            _write(destination, content, config)
            return [destination]
        if destination.exists():
            raise DestinationAlreadyExistsError(destination)
        _write(destination, content, config)
        _remove(source_path)
        logger.debug("Renamed %s -> %s", source_path, destination)
        return [source_path, destination]

    source = _read(destination, config)
    content = apply_hunks(patch.hunks, source, path=destination, config=config)
    _write(destination, content, config)
    logger.debug("Modified %s: %d -> %d lines", destination, len(source), len(content))
    return [destination]


def _first_unconsumed_index(hunks: tuple[Hunk, ...], source: FileContent) -> int | None:
    cursor = 0
    for hunk in hunks:
        if hunk.old_index > cursor:
            return cursor
        cursor = hunk.old_index + hunk.compute_counts()[0]
    return cursor if cursor < len(source) else None


def _read(path: Path, config: ApplyConfig) -> FileContent:
    if not path.exists():
        raise DestinationMissingError(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise IoFailureError(path, "read", e) from e
    try:
        text = data.decode(config.encoding)
    except (UnicodeError, LookupError) as e:
        raise IoFailureError(path, "decode", e) from e
    return FileContent.from_text(text)


def _write(path: Path, content: FileContent, config: ApplyConfig) -> None:
    try:
        data = content.to_text().encode(config.encoding)
    except (UnicodeError, LookupError) as e:
        raise IoFailureError(path, "encode", e) from e
    try:
        write_bytes(path, data, atomic=config.atomic_writes)
    except OSError as e:
        raise IoFailureError(path, "write", e) from e


def _remove(path: Path) -> None:
    try:
        path.unlink()
    except OSError as e:
        raise IoFailureError(path, "remove", e) from e
