"""JSON configuration files merged with a packaged default."""

from __future__ import annotations

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union

from aikari.logger import get_logger


class ConfigError(Exception):
    """Raised when a configuration cannot be loaded or written."""


def deep_merge_config(
    default_config: Dict[str, Any], user_config: Dict[str, Any]
) -> Dict[str, Any]:
    """Fill keys missing from ``user_config`` with those of ``default_config``.

    Values the user already set are kept. Nested objects present on both
    sides are merged recursively. ``user_config`` is changed in place and
    also returned.
    """
    for key, value in default_config.items():
        if key in user_config:
            existing = user_config[key]
            if isinstance(existing, dict) and isinstance(value, dict):
                deep_merge_config(value, existing)
        else:
            user_config[key] = value
    return user_config


def _dump(config_data: Any) -> str:
    return json.dumps(config_data, ensure_ascii=False, separators=(",", ":"))


class ConfigManager(ABC):
    """Base for a module's configuration stored as a JSON file.

    Subclasses turn the parsed JSON into their own settings in
    ``load_config`` and back into JSON data in ``dump_config``.
    """

    def __init__(
        self,
        module: str,
        config_path: Union[str, Path],
        default_config_path: Union[str, Path],
    ) -> None:
        self.module = module
        self.config_path = Path(config_path)
        self.default_config_path = Path(default_config_path)
        self.config_edit_lock = threading.Lock()
        self.config_write_lock = threading.Lock()

    @abstractmethod
    def load_config(self, config_data: Dict[str, Any]) -> None:
        """Apply parsed configuration data."""

    @abstractmethod
    def dump_config(self) -> Any:
        """Return the current configuration as JSON-serialisable data."""

    def load_default_config(self) -> str:
        """Return the raw text of the default configuration."""
        try:
            return self.default_config_path.read_text(encoding="utf-8")
        except OSError as err:
            raise ConfigError(
                f"Failed to load default config for module {self.module}: "
                f"{self.default_config_path}: {err}"
            ) from err

    def write_config_raw(self, config_data: Any) -> None:
        """Write ``config_data`` as compact JSON, creating the directory."""
        log = get_logger()
        with self.config_write_lock:
            config_dir = self.config_path.parent
            if not config_dir.exists():
                log.info("Config dir %s not exists, creating...", config_dir)
                try:
                    config_dir.mkdir(parents=True, exist_ok=True)
                except OSError as err:
                    raise ConfigError(
                        f"Failed to create config dir {config_dir}: {err}"
                    ) from err
            try:
                with self.config_path.open("w", encoding="utf-8") as config_file:
                    config_file.write(_dump(config_data))
            except OSError as err:
                log.error(
                    "Failed to write config: cannot open config file. Module: %s",
                    self.module,
                )
                raise ConfigError(
                    f"Failed to write config for module {self.module}: {err}"
                ) from err
            log.debug("Successfully write config to disk. Module: %s", self.module)

    def write_config(self) -> None:
        """Write the current configuration to disk."""
        self.write_config_raw(self.dump_config())

    def init_config(self) -> None:
        """Load the user's config merged with the default, or create it.

        When no config file exists, the default is loaded and written out.
        """
        log = get_logger()
        default_text = self.load_default_config()
        try:
            default_config = json.loads(default_text)
        except json.JSONDecodeError as err:
            raise ConfigError(
                f"Default config for module {self.module} is not valid JSON: {err}"
            ) from err

        if self.config_path.exists():
            try:
                user_text = self.config_path.read_text(encoding="utf-8")
            except OSError as err:
                log.error(
                    "Failed to open user config file. Module: %s", self.module
                )
                raise ConfigError(
                    f"Failed to open user config for module {self.module}: {err}"
                ) from err
            try:
                user_config = json.loads(user_text)
            except json.JSONDecodeError as err:
                raise ConfigError(
                    f"User config for module {self.module} is not valid JSON: {err}"
                ) from err

            log.info(
                "Merging user config with default preset... | Module: %s",
                self.module,
            )
            deep_merge_config(default_config, user_config)
            log.debug("Merged config: %s", _dump(user_config))
            self.load_config(user_config)
            log.info("Loaded user config for module %s.", self.module)
            return

        self.load_config(default_config)
        try:
            self.write_config_raw(default_config)
        except ConfigError:
            log.error(
                "Failed to initialize default config for module %s.", self.module
            )
            raise
        log.info("Loaded default config for module %s.", self.module)