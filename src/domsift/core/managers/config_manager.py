# src/domsift/core/managers/config_manager.py
import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from domsift.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

_MISSING = object()


class ConfigManager:
    """
    Singleton holding the library settings read from the bundled settings.json.

    Settings are read-only while queries run; `override` swaps a single value
    for the duration of a `with` block.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config: Dict[str, Any] = {}
            cls._instance.reset()
        return cls._instance

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """
        Looks up a dotted key such as 'query.default_match_mode'.
        Returns `default` when any part of the path is missing.
        """
        value: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
        return default if value is None else value

    @contextmanager
    def override(self, key_path: str, value: Any) -> Iterator[None]:
        """Temporarily replaces one setting, creating intermediate sections as needed."""
        *parents, leaf = key_path.split('.')
        section = self._config
        for key in parents:
            section = section.setdefault(key, {})
            if not isinstance(section, dict):
                raise KeyError(f"'{key}' in '{key_path}' is not a settings section")

        previous = section.get(leaf, _MISSING)
        section[leaf] = value
        logger.debug("Setting overridden: %s = %r", key_path, value)
        try:
            yield
        finally:
            if previous is _MISSING:
                section.pop(leaf, None)
            else:
                section[leaf] = previous

    def reset(self) -> None:
        """(Re)loads settings.json; a missing or unreadable file leaves an empty configuration."""
        config_path = PathUtils.get_settings_file()
        if not config_path.exists():
            logger.warning("settings.json not found at %s. Using empty config.", config_path)
            self._config = {}
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to load settings.json: %s", e, exc_info=True)
            self._config = {}
            return
        logger.debug("Settings loaded from %s.", config_path)


# The global singleton instance that the entire library uses.
config_manager = ConfigManager()
