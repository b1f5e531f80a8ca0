"""Unit tests for file writing helpers."""

import os
import stat
from pathlib import Path

import pytest

from cleanpatch.util.files import atomic_write_bytes, ensure_dir, write_bytes


class TestEnsureDir:
    """Tests for ensure_dir function."""

    def test_ensure_dir_creates_nested_directories(self, tmp_path: Path):
        nested_dir = tmp_path / "a" / "b" / "c"

        result = ensure_dir(nested_dir)

        assert nested_dir.is_dir()
        assert result == nested_dir

    def test_ensure_dir_is_idempotent(self, tmp_path: Path):
        assert ensure_dir(tmp_path / "d") == ensure_dir(tmp_path / "d")

    def test_ensure_dir_with_file_path_raises_error(self, tmp_path: Path):
        file_path = tmp_path / "existing_file.txt"
        file_path.write_text("content")

        with pytest.raises((FileExistsError, NotADirectoryError)):
            ensure_dir(file_path)


class TestAtomicWrite:
    """Tests for atomic_write_bytes function."""

    def test_writes_new_file(self, tmp_path: Path):
        target = tmp_path / "sub" / "out.txt"

        atomic_write_bytes(target, b"data")

        assert target.read_bytes() == b"data"

    def test_replaces_and_keeps_mode(self, tmp_path: Path):
        target = tmp_path / "script.sh"
        target.write_bytes(b"old")
        os.chmod(target, 0o755)

        atomic_write_bytes(target, b"new")

        assert target.read_bytes() == b"new"
        assert stat.S_IMODE(target.stat().st_mode) == 0o755

    def test_leaves_no_temporary_files(self, tmp_path: Path):
        atomic_write_bytes(tmp_path / "out.txt", b"data")

        assert [p.name for p in tmp_path.iterdir()] == ["out.txt"]

    def test_plain_write(self, tmp_path: Path):
        target = tmp_path / "plain" / "out.txt"

        write_bytes(target, b"x", atomic=False)

        assert target.read_bytes() == b"x"
