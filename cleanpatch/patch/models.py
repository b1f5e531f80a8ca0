from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from cleanpatch.config import ApplyConfig
    from cleanpatch.journal import ApplyJournal

DEV_NULL = "/dev/null"


class LineKind(StrEnum):
    CONTEXT = "context"
    ADDED = "added"
    DELETED = "deleted"


class ChangeKind(StrEnum):
    CREATED = "created"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"


class Line(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: LineKind
    text: str
    no_newline_at_eof: bool = False

    @property
    def in_old(self) -> bool:
        return self.kind != LineKind.ADDED

    @property
    def in_new(self) -> bool:
        return self.kind != LineKind.DELETED


class Hunk(BaseModel):
    """
    A contiguous edit region.

    `old_start`/`new_start` are 1-based. When a side has a count of zero the
    start names the line *after which* the region sits, as diff tools emit
    it (`@@ -0,0 +1,2 @@` for a created file).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: tuple[Line, ...] = ()
    section: str = ""

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"

    @property
    def old_index(self) -> int:
        """0-based index of the first old line covered by this hunk."""
        return self.old_start if self.old_count == 0 else self.old_start - 1

    @property
    def new_index(self) -> int:
        return self.new_start if self.new_count == 0 else self.new_start - 1

    @property
    def new_missing_newline(self) -> bool:
        new_lines = [line for line in self.lines if line.in_new]
        return bool(new_lines) and new_lines[-1].no_newline_at_eof

    def compute_counts(self) -> tuple[int, int]:
        old_count = sum(1 for line in self.lines if line.in_old)
        new_count = sum(1 for line in self.lines if line.in_new)
        return old_count, new_count


class Patch(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    old_path: str
    new_path: str
    change_kind: ChangeKind
    hunks: tuple[Hunk, ...] = ()

    @property
    def destination_path(self) -> str:
        """Path the patch is resolved against: the new path, or the old one for deletions."""
        if self.new_path == DEV_NULL:
            return self.old_path
        return self.new_path


class PatchSet(BaseModel):
    """
    Ordered patches of one diff plus the opaque header lines that preceded
    them (commit message, mail headers). The order of `patches` is the
    application order.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    patches: tuple[Patch, ...] = ()
    extended_info: tuple[str, ...] = ()

    def apply(
        self,
        base_dir: Path,
        strip_count: int,
        config: "ApplyConfig | None" = None,
        journal: "ApplyJournal | None" = None,
    ) -> list[Path]:
        """
        Apply every patch under `base_dir`, the equivalent of
        `patch -p<strip_count> -d <base_dir>`. Only clean patches apply.

        Raises:
            PatchApplyError: on the first patch that does not apply.
        """
        from cleanpatch.patch.orchestrator import apply_patch_set

        return apply_patch_set(self, base_dir, strip_count, config=config, journal=journal)
