"""Patch model, path resolution and the clean apply engine."""

from cleanpatch.patch.applicator import apply_hunks, apply_patch
from cleanpatch.patch.content import FileContent
from cleanpatch.patch.errors import (
    ContextMismatchError,
    DestinationAlreadyExistsError,
    DestinationMissingError,
    HunkOffsetMismatchError,
    IoFailureError,
    PatchApplyError,
    PatchErrorType,
    PathEscapeError,
)
from cleanpatch.patch.matcher import apply_hunk
from cleanpatch.patch.models import ChangeKind, Hunk, Line, LineKind, Patch, PatchSet
from cleanpatch.patch.orchestrator import apply_patch_set
from cleanpatch.patch.parsing import PatchParseError, parse_unified_diff, read_patch_file
from cleanpatch.patch.paths import ensure_within, resolve_destination, strip_path

__all__ = [
    "apply_hunk",
    "apply_hunks",
    "apply_patch",
    "apply_patch_set",
    "FileContent",
    "ChangeKind",
    "Hunk",
    "Line",
    "LineKind",
    "Patch",
    "PatchSet",
    "PatchApplyError",
    "PatchErrorType",
    "ContextMismatchError",
    "DestinationAlreadyExistsError",
    "DestinationMissingError",
    "HunkOffsetMismatchError",
    "IoFailureError",
    "PathEscapeError",
    "PatchParseError",
    "parse_unified_diff",
    "read_patch_file",
    "ensure_within",
    "resolve_destination",
    "strip_path",
]
