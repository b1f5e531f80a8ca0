"""Clean (no fuzz) application of unified diffs to a directory tree."""

from cleanpatch.config import ApplyConfig, MatchMode, load_config
from cleanpatch.patch import (
    ChangeKind,
    Hunk,
    Line,
    LineKind,
    Patch,
    PatchApplyError,
    PatchSet,
    parse_unified_diff,
)

__all__ = [
    "ApplyConfig",
    "MatchMode",
    "load_config",
    "ChangeKind",
    "Hunk",
    "Line",
    "LineKind",
    "Patch",
    "PatchApplyError",
    "PatchSet",
    "parse_unified_diff",
]
