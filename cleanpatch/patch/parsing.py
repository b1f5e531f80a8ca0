import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from cleanpatch.patch.models import DEV_NULL, ChangeKind, Hunk, Line, LineKind, Patch, PatchSet

logger = logging.getLogger(__name__)

HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$")
GIT_HEADER_RE = re.compile(r"^diff --git (\S+) (\S+)$")
NO_NEWLINE_MARKER = "\\ No newline at end of file"

_LINE_KINDS = {
    " ": LineKind.CONTEXT,
    "-": LineKind.DELETED,
    "+": LineKind.ADDED,
}


class PatchParseError(ValueError):
    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


@dataclass
class _PatchBuilder:
    old_path: str | None = None
    new_path: str | None = None
    created: bool = False
    deleted: bool = False
    renamed: bool = False
    hunks: list[Hunk] = field(default_factory=list)

    def build(self, line_number: int) -> Patch:
        if self.old_path is None and self.new_path is None:
            raise PatchParseError(line_number, "file patch without paths")
        old_path = self.old_path or self.new_path
        new_path = self.new_path or self.old_path

        if self.created or old_path == DEV_NULL:
            kind = ChangeKind.CREATED
        elif self.deleted or new_path == DEV_NULL:
            kind = ChangeKind.DELETED
        elif self.renamed:
            kind = ChangeKind.RENAMED
        else:
            kind = ChangeKind.MODIFIED

        return Patch(old_path=old_path, new_path=new_path, change_kind=kind, hunks=tuple(self.hunks))


def _header_path(line: str) -> str:
    """Path of a `--- `/`+++ ` header, without any tab-separated timestamp."""
    path = line[4:].split("\t", 1)[0]
    return path.rstrip("\r")


def parse_unified_diff(patch_txt: str) -> PatchSet:
    """
    Parse unified diff text into a `PatchSet`.

    Lines before the first file header are kept as the set's extended info.
    Git headers (`diff --git`, `new file mode`, `deleted file mode`,
    `rename from`/`rename to`) are understood so pure renames and empty
    file creations are kept. Paths are returned exactly as declared; prefix
    stripping is left to the path resolver.

    Raises:
        PatchParseError: on malformed hunk headers or hunk bodies.
    """
    lines = patch_txt.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    extended_info: list[str] = []
    patches: list[Patch] = []
    current: _PatchBuilder | None = None
    i = 0

    def finish(line_number: int) -> None:
        nonlocal current
        if current is not None:
            patches.append(current.build(line_number))
            current = None

    while i < len(lines):
        line = lines[i]
        line_number = i + 1

        git_match = GIT_HEADER_RE.match(line.rstrip("\r"))
        if git_match:
            finish(line_number)
            current = _PatchBuilder(old_path=git_match.group(1), new_path=git_match.group(2))
            i += 1
            continue

        if line.startswith("--- ") and i + 1 < len(lines) and lines[i + 1].startswith("+++ "):
            if current is None or current.hunks:
                finish(line_number)
                current = _PatchBuilder()
            current.old_path = _header_path(line)
            current.new_path = _header_path(lines[i + 1])
            i += 2
            continue

        if current is None:
            extended_info.append(line)
            i += 1
            continue

        if line.startswith("@@"):
            hunk, i = _parse_hunk(lines, i)
            current.hunks.append(hunk)
            continue

        if line.startswith("new file mode"):
            current.created = True
        elif line.startswith("deleted file mode"):
            current.deleted = True
        elif line.startswith("rename from ") or line.startswith("rename to "):
            current.renamed = True
        i += 1

    finish(len(lines))
    logger.debug("Parsed %d file patches from unified diff", len(patches))
    return PatchSet(patches=tuple(patches), extended_info=tuple(extended_info))


def _parse_hunk(lines: list[str], start: int) -> tuple[Hunk, int]:
    header = lines[start].rstrip("\r")
    match = HUNK_HEADER_RE.match(header)
    if not match:
        raise PatchParseError(start + 1, f"malformed hunk header: {header!r}")

    old_start = int(match.group(1))
    old_count = int(match.group(2)) if match.group(2) is not None else 1
    new_start = int(match.group(3))
    new_count = int(match.group(4)) if match.group(4) is not None else 1

    body: list[Line] = []
    old_remaining = old_count
    new_remaining = new_count
    i = start + 1

    while i < len(lines):
        line = lines[i]
        if line.startswith("\\"):
            if not body:
                raise PatchParseError(i + 1, "no-newline marker before any hunk line")
            body[-1] = body[-1].model_copy(update={"no_newline_at_eof": True})
            i += 1
            continue

        if old_remaining == 0 and new_remaining == 0:
            break

        prefix = line[:1] if line else " "
        kind = _LINE_KINDS.get(prefix)
        if kind is None:
            raise PatchParseError(i + 1, f"unexpected line in hunk {header}: {line!r}")

        if kind != LineKind.ADDED:
            old_remaining -= 1
        if kind != LineKind.DELETED:
            new_remaining -= 1
        if old_remaining < 0 or new_remaining < 0:
            raise PatchParseError(i + 1, f"hunk {header} has more lines than its header declares")

        body.append(Line(kind=kind, text=line[1:]))
        i += 1

    if old_remaining > 0 or new_remaining > 0:
        raise PatchParseError(i, f"hunk {header} is truncated")

    hunk = Hunk(
        old_start=old_start,
        old_count=old_count,
        new_start=new_start,
        new_count=new_count,
        lines=tuple(body),
        section=match.group(5).strip(),
    )
    return hunk, i


def read_patch_file(path: Path, encoding: str = "utf-8") -> PatchSet:
    text = Path(path).read_bytes().decode(encoding)
    return parse_unified_diff(text)
