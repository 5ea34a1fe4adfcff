"""Per-user JSON configuration storage."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from .errors import ConfigCorruptError
from .models import BASE_DIR_KEY, Configuration

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "yscqCliOptions.json"

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]


def _set_base_dir(config: Configuration, value: object) -> Configuration:
    if not isinstance(value, str):
        raise TypeError(f"{BASE_DIR_KEY} must be a string, got {type(value).__name__}")
    return replace(config, base_dir=value)


# Recognised JSON keys and how each one rewrites the record.
_SETTERS: dict[str, Callable[[Configuration, object], Configuration]] = {
    BASE_DIR_KEY: _set_base_dir,
}


def default_config_path() -> Path:
    """Return the configuration file location in the user's home directory."""
    return Path.home() / CONFIG_FILENAME


class ConfigurationStore:
    """Load, create and update the single configuration record."""

    def __init__(
        self,
        path: Path | str | None = None,
        input_fn: InputFn = input,
        print_fn: PrintFn = print,
    ) -> None:
        self.path = Path(path) if path is not None else default_config_path()
        self._input = input_fn
        self._print = print_fn

    def get_configuration(self) -> Configuration:
        """Return the stored configuration, prompting for one on first run.

        The stored base directory is trusted as-is; it is only checked when
        the record is first created interactively.
        """
        if self.path.exists():
            return self._load()
        return self._construct()

    def update_key(self, key: str, value: object) -> Configuration:
        """Overwrite one field by its JSON name and persist the record.

        Unknown keys are ignored, but the record is still written back. A
        value of the wrong type raises ``TypeError`` before anything is saved.
        """
        config = self.get_configuration()
        setter = _SETTERS.get(key)
        if setter is None:
            logger.debug("Ignoring unknown configuration key %r", key)
        else:
            config = setter(config, value)
        self.save(config)
        return config

    def save(self, config: Configuration) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(config.to_dict()), encoding="utf-8")
        logger.debug("Wrote configuration to %s", self.path)

    def _load(self) -> Configuration:
        try:
            raw: object = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigCorruptError(f"Configuration file {self.path} is not valid JSON: {exc}") from exc
        try:
            return Configuration.from_dict(raw)
        except ConfigCorruptError as exc:
            raise ConfigCorruptError(f"Configuration file {self.path} is invalid: {exc}") from exc

    def _construct(self) -> Configuration:
        """Prompt until an existing directory is given, then persist it."""
        base_dir = self._input(f"Set the base project directory (specify using {os.sep} ) ").strip()
        while not base_dir or not Path(base_dir).is_dir():
            self._print(f"Specified directory {base_dir}")
            base_dir = self._input("Specified directory is invalid, try again ").strip()

        config = Configuration(base_dir=base_dir)
        self.save(config)
        return config
