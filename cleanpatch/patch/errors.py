from enum import StrEnum
from pathlib import Path
from typing import Any


class PatchErrorType(StrEnum):
    DESTINATION_MISSING = "destination_missing"
    DESTINATION_EXISTS = "destination_exists"
    CONTEXT_MISMATCH = "context_mismatch"
    HUNK_OFFSET_MISMATCH = "hunk_offset_mismatch"
    IO_FAILURE = "io_failure"
    PATH_ESCAPE = "path_escape"


class PatchApplyError(Exception):
    def __init__(
        self,
        error_type: PatchErrorType,
        message: str,
        path: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.path = Path(path) if path is not None else None
        self.details = details or {}

    def location(self) -> tuple[str, str | None, int | None]:
        """Kind, file and line of the failure, stable across reruns."""
        return (
            self.error_type.value,
            str(self.path) if self.path is not None else None,
            self.details.get("line_number"),
        )


class DestinationMissingError(PatchApplyError):
    def __init__(self, path: Path):
        super().__init__(
            PatchErrorType.DESTINATION_MISSING,
            f"Expected destination file '{path}' does not exist",
            path=path,
        )


class DestinationAlreadyExistsError(PatchApplyError):
    def __init__(self, path: Path):
        super().__init__(
            PatchErrorType.DESTINATION_EXISTS,
            f"Destination file '{path}' already exists",
            path=path,
        )


class ContextMismatchError(PatchApplyError):
    """A context or deleted line does not match the file being patched."""

    def __init__(
        self,
        path: Path | str,
        hunk_header: str,
        line_number: int,
        expected: str | None,
        actual: str | None,
        reason: str = "line content differs",
    ):
        super().__init__(
            PatchErrorType.CONTEXT_MISMATCH,
            (
                f"{path}: hunk {hunk_header} does not apply at line {line_number} "
                f"({reason}): expected {_describe(expected)}, found {_describe(actual)}"
            ),
            path=path,
            details={
                "hunk_header": hunk_header,
                "line_number": line_number,
                "expected": expected,
                "actual": actual,
                "reason": reason,
            },
        )
        self.hunk_header = hunk_header
        self.line_number = line_number
        self.expected = expected
        self.actual = actual


class HunkOffsetMismatchError(PatchApplyError):
    def __init__(
        self,
        path: Path | str,
        hunk_header: str,
        expected_line: int,
        declared_line: int,
        side: str = "old",
    ):
        super().__init__(
            PatchErrorType.HUNK_OFFSET_MISMATCH,
            (
                f"{path}: hunk {hunk_header} declares {side} start line {declared_line} "
                f"but the patch position is line {expected_line}"
            ),
            path=path,
            details={
                "hunk_header": hunk_header,
                "line_number": declared_line,
                "expected_line": expected_line,
                "side": side,
            },
        )
        self.hunk_header = hunk_header


class IoFailureError(PatchApplyError):
    def __init__(self, path: Path, operation: str, cause: OSError | UnicodeError | LookupError):
        super().__init__(
            PatchErrorType.IO_FAILURE,
            f"Failed to {operation} '{path}': {cause}",
            path=path,
            details={"operation": operation, "errno": getattr(cause, "errno", None)},
        )
        self.operation = operation


class PathEscapeError(PatchApplyError):
    def __init__(self, candidate: Path, base_dir: Path):
        super().__init__(
            PatchErrorType.PATH_ESCAPE,
            f"Candidate {str(candidate)} is not relative to base directory: {str(base_dir)}",
            path=candidate,
            details={"base_dir": str(base_dir)},
        )


def _describe(text: str | None) -> str:
    if text is None:
        return "end of file"
    return repr(text)
