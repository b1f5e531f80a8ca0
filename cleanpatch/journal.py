import json
import logging
import os
from collections.abc import Iterator
from datetime import datetime, timezone
from enum import StrEnum
from pathlib import Path
from typing import Any

import ulid
from filelock import FileLock
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ApplyEventType(StrEnum):
    APPLY_STARTED = "apply_started"
    PATCH_APPLIED = "patch_applied"
    PATCH_FAILED = "patch_failed"
    APPLY_FINISHED = "apply_finished"


class ApplyEvent(BaseModel):
    event_type: ApplyEventType
    timestamp: datetime
    run_id: str
    step_id: int
    payload: dict[str, Any]


class ApplyJournal:
    """Appends one JSON line per apply event to a journal file."""

    def __init__(self, journal_path: Path, run_id: str | None = None):
        self.journal_path = Path(journal_path)
        self.run_id = run_id or str(ulid.ULID())
        self._step_counter = 0
        logger.debug("ApplyJournal initialized for run %s, writing to %s", self.run_id, self.journal_path)

    def next_step_id(self) -> int:
        self._step_counter += 1
        return self._step_counter

    def log(self, event_type: ApplyEventType, payload: dict[str, Any]) -> ApplyEvent:
        event = ApplyEvent(
            event_type=event_type,
            timestamp=datetime.now(timezone.utc),
            run_id=self.run_id,
            step_id=self.next_step_id(),
            payload=payload,
        )
        _append_line(self.journal_path, event.model_dump_json())
        logger.debug("Journaled %s (step %d) for run %s", event_type, event.step_id, self.run_id)
        return event

    def log_apply_started(self, base_dir: Path, strip_count: int, patch_count: int) -> ApplyEvent:
        return self.log(
            ApplyEventType.APPLY_STARTED,
            {"base_dir": str(base_dir), "strip_count": strip_count, "patch_count": patch_count},
        )

    def log_patch_applied(self, index: int, change_kind: str, paths: list[Path]) -> ApplyEvent:
        return self.log(
            ApplyEventType.PATCH_APPLIED,
            {"index": index, "change_kind": change_kind, "paths": [str(p) for p in paths]},
        )

    def log_patch_failed(self, index: int, change_kind: str, error_type: str, message: str) -> ApplyEvent:
        return self.log(
            ApplyEventType.PATCH_FAILED,
            {"index": index, "change_kind": change_kind, "error_type": error_type, "message": message},
        )

    def log_apply_finished(self, applied: int) -> ApplyEvent:
        return self.log(ApplyEventType.APPLY_FINISHED, {"applied": applied})


def _append_line(path: Path, line: str) -> bool:
    """Append under a file lock. A journal that cannot be written never stops a patch run."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with FileLock(str(path) + ".lock"):
            with open(path, "ab") as f:
                f.write((line.rstrip("\n") + "\n").encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
        return True
    except OSError as e:
        logger.critical("Failed to write journal record to %s: %s", path, e)
        return False


def read_journal(path: Path) -> Iterator[ApplyEvent]:
    """Yield the events of a journal, skipping lines that do not parse."""
    with Path(path).open("r", encoding="utf-8") as f:
        for number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield ApplyEvent.model_validate(json.loads(line))
            except (json.JSONDecodeError, ValueError) as e:
                logger.warning("Journal line %d in %s could not be read: %s", number, path, e)
                continue
