import logging
import os
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class MatchMode(StrEnum):
    STRICT = "strict"


def _env_truthy(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.lower() in ("1", "true", "yes", "on")


class ApplyConfig(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
    )

    match_mode: MatchMode = MatchMode.STRICT
    encoding: str = "utf-8"
    atomic_writes: bool = True
    confine_to_base: bool = False
    journal_path: Path | None = None

    @classmethod
    def from_env(cls) -> "ApplyConfig":
        journal = os.getenv("CLEANPATCH_JOURNAL")
        return cls(
            encoding=os.getenv("CLEANPATCH_ENCODING") or "utf-8",
            atomic_writes=_env_truthy("CLEANPATCH_ATOMIC_WRITES", True),
            confine_to_base=_env_truthy("CLEANPATCH_CONFINE", False),
            journal_path=Path(journal) if journal else None,
        )


def load_config(path: Path) -> ApplyConfig:
    """
    Load an `ApplyConfig` from a YAML file.

    An empty file yields the defaults. Unknown keys are rejected by the model.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(data).__name__}")

    config = ApplyConfig.model_validate(data)
    logger.debug("Loaded config from %s: %s", path, config)
    return config
