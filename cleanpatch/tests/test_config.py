"""Unit tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from cleanpatch.config import ApplyConfig, MatchMode, load_config


class TestApplyConfig:
    """Tests for ApplyConfig defaults and environment loading."""

    def test_defaults(self):
        config = ApplyConfig()

        assert config.match_mode == MatchMode.STRICT
        assert config.encoding == "utf-8"
        assert config.atomic_writes is True
        assert config.confine_to_base is False
        assert config.journal_path is None

    def test_unknown_fields_are_rejected(self):
        with pytest.raises(ValidationError):
            ApplyConfig(fuzz=2)

    def test_only_strict_mode_exists(self):
        with pytest.raises(ValidationError):
            ApplyConfig(match_mode="fuzzy")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setenv("CLEANPATCH_ENCODING", "latin-1")
        monkeypatch.setenv("CLEANPATCH_ATOMIC_WRITES", "no")
        monkeypatch.setenv("CLEANPATCH_CONFINE", "yes")
        monkeypatch.setenv("CLEANPATCH_JOURNAL", str(tmp_path / "j.jsonl"))

        config = ApplyConfig.from_env()

        assert config.encoding == "latin-1"
        assert config.atomic_writes is False
        assert config.confine_to_base is True
        assert config.journal_path == tmp_path / "j.jsonl"

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch):
        for name in ("CLEANPATCH_ENCODING", "CLEANPATCH_ATOMIC_WRITES", "CLEANPATCH_CONFINE", "CLEANPATCH_JOURNAL"):
            monkeypatch.delenv(name, raising=False)

        assert ApplyConfig.from_env() == ApplyConfig()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_yaml(self, tmp_path: Path):
        path = tmp_path / "cleanpatch.yaml"
        path.write_text("encoding: utf-16\nconfine_to_base: true\n", encoding="utf-8")

        config = load_config(path)

        assert config.encoding == "utf-16"
        assert config.confine_to_base is True

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == ApplyConfig()

    def test_non_mapping_rejected(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError):
            load_config(path)
