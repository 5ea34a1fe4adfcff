"""Configuration record persisted between invocations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import ConfigCorruptError

BASE_DIR_KEY = "BaseDir"


@dataclass(frozen=True)
class Configuration:
    """Per-user CLI settings."""

    base_dir: str

    def to_dict(self) -> dict[str, Any]:
        return {BASE_DIR_KEY: self.base_dir}

    @classmethod
    def from_dict(cls, raw: object) -> Configuration:
        """Build a record from decoded JSON; extra keys are ignored."""
        if not isinstance(raw, dict):
            raise ConfigCorruptError("Configuration root must be a JSON object.")
        base_dir = raw.get(BASE_DIR_KEY)
        if not isinstance(base_dir, str):
            raise ConfigCorruptError(f"Configuration field '{BASE_DIR_KEY}' must be a string.")
        return cls(base_dir=base_dir)
