import logging
from pathlib import Path

from cleanpatch.config import MatchMode
from cleanpatch.patch.content import FileContent
from cleanpatch.patch.errors import ContextMismatchError, HunkOffsetMismatchError
from cleanpatch.patch.models import Hunk, Line, LineKind

logger = logging.getLogger(__name__)


def apply_hunk(
    hunk: Hunk,
    source: FileContent,
    cursor: int,
    *,
    path: Path | str = "",
    match_mode: MatchMode = MatchMode.STRICT,
) -> tuple[list[str], int]:
    """
    Verify one hunk against `source` at `cursor` and produce its output lines.

    Args:
        hunk: The hunk to apply.
        source: Content of the file being patched.
        cursor: 0-based index of the next unconsumed source line. The hunk
            must start exactly there.
        path: File name used in error messages.
        match_mode: Only `MatchMode.STRICT` exists; every context and deleted
            line must equal its source line, trailing newline included.

    Returns:
        The lines the hunk contributes to the new file and the cursor after
        the last source line it consumed.

    Raises:
        HunkOffsetMismatchError: if the hunk does not start at `cursor`.
        ContextMismatchError: on the first line that does not match.
    """
    if match_mode != MatchMode.STRICT:
        raise ValueError(f"Unsupported match mode: {match_mode}")

    if hunk.old_index != cursor:
        raise HunkOffsetMismatchError(
            path,
            hunk.header,
            expected_line=cursor + 1 if hunk.old_count else cursor,
            declared_line=hunk.old_start,
        )

    output: list[str] = []
    for line in hunk.lines:
        if line.kind == LineKind.ADDED:
            output.append(line.text)
            continue

        _check_line(hunk, line, source, cursor, path)
        if line.kind == LineKind.CONTEXT:
            output.append(line.text)
        cursor += 1

    logger.debug(
        "Applied hunk %s to %s: %d lines out, cursor now %d",
        hunk.header,
        path,
        len(output),
        cursor,
    )
    return output, cursor


def _check_line(hunk: Hunk, line: Line, source: FileContent, index: int, path: Path | str) -> None:
    if index >= len(source):
        raise ContextMismatchError(
            path,
            hunk.header,
            line_number=index + 1,
            expected=line.text,
            actual=None,
            reason="file ends before the hunk",
        )

    actual = source.lines[index]
    if actual != line.text:
        raise ContextMismatchError(
            path,
            hunk.header,
            line_number=index + 1,
            expected=line.text,
            actual=actual,
        )

    if line.no_newline_at_eof != source.lacks_newline_at(index):
        reason = (
            "patch expects no newline at end of file"
            if line.no_newline_at_eof
            else "file has no newline at end of file"
        )
        raise ContextMismatchError(
            path,
            hunk.header,
            line_number=index + 1,
            expected=line.text,
            actual=actual,
            reason=reason,
        )
