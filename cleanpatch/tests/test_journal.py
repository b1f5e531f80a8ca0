from pathlib import Path

from cleanpatch.journal import ApplyEventType, ApplyJournal, read_journal


def test_journal_generates_run_id(tmp_path: Path) -> None:
    journal = ApplyJournal(tmp_path / "apply.jsonl")

    assert len(journal.run_id) == 26


def test_journal_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "apply.jsonl"
    journal = ApplyJournal(path, run_id="run-1")

    journal.log_apply_started(tmp_path, 1, 2)
    journal.log_patch_applied(0, "modified", [tmp_path / "a.txt"])
    journal.log_apply_finished(1)

    events = list(read_journal(path))

    assert [e.event_type for e in events] == [
        ApplyEventType.APPLY_STARTED,
        ApplyEventType.PATCH_APPLIED,
        ApplyEventType.APPLY_FINISHED,
    ]
    assert events[0].payload == {"base_dir": str(tmp_path), "strip_count": 1, "patch_count": 2}


def test_read_journal_skips_invalid_lines(tmp_path: Path) -> None:
    path = tmp_path / "mixed.jsonl"
    journal = ApplyJournal(path, run_id="run-2")
    journal.log_apply_finished(0)
    with path.open("a", encoding="utf-8") as f:
        f.write("\nnot-json\n{\"event_type\": \"unknown\"}\n")

    events = list(read_journal(path))

    assert len(events) == 1
    assert events[0].run_id == "run-2"


def test_unwritable_journal_does_not_raise(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    journal = ApplyJournal(blocker / "apply.jsonl")

    event = journal.log_apply_finished(0)

    assert event.step_id == 1
    assert blocker.read_text(encoding="utf-8") == ""
