"""
shrdlite_config.py

Runtime configuration for the Shrdlite planner.

Values are resolved in three layers, later layers winning:
1. Defaults from common.constants
2. JSON file (shrdlite_config.json in the working directory, or an explicit path)
3. Environment variables SHRDLITE_<KEY> (e.g. SHRDLITE_SEARCH_TIMEOUT=5)

Usage:
    from shrdlite_config import get_config

    cfg = get_config()
    timeout = cfg.get("search_timeout")
"""

import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from common.constants import (
    DEFAULT_HEURISTIC,
    DEFAULT_HEURISTIC_CACHE_SIZE,
    DEFAULT_PLAN_CACHE_SIZE,
    DEFAULT_SEARCH_TIMEOUT,
    DEFAULT_WORLD,
    HEURISTICS,
)
from component_15_logging_config import get_logger
from shrdlite_exceptions import InvalidConfigError, wrap_exception

logger = get_logger(__name__)

CONFIG_FILE: Path = Path("shrdlite_config.json")
ENV_PREFIX: str = "SHRDLITE_"

DEFAULTS: Dict[str, Any] = {
    "search_timeout": DEFAULT_SEARCH_TIMEOUT,
    "heuristic": DEFAULT_HEURISTIC,
    "plan_cache_size": DEFAULT_PLAN_CACHE_SIZE,
    "heuristic_cache_size": DEFAULT_HEURISTIC_CACHE_SIZE,
    "default_world": DEFAULT_WORLD,
}

_CASTS = {
    "search_timeout": float,
    "heuristic": str,
    "plan_cache_size": int,
    "heuristic_cache_size": int,
    "default_world": str,
}


class ShrdliteConfig:
    """
    Dict-like configuration object.

    Only keys listed in DEFAULTS are accepted; every value is cast to the
    type of its default and validated on set.
    """

    def __init__(self, config_file: Optional[Path] = None, use_env: bool = True):
        self._values: Dict[str, Any] = dict(DEFAULTS)
        self._lock = threading.RLock()

        path = Path(config_file) if config_file is not None else CONFIG_FILE
        if path.exists():
            self._load_file(path)
        elif config_file is not None:
            raise InvalidConfigError(
                "Configuration file not found", context={"path": str(path)}
            )

        if use_env:
            self._load_env()

        logger.debug("Configuration loaded", extra=self._values)

    def _load_file(self, path: Path) -> None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise wrap_exception(
                e, InvalidConfigError, "Could not read configuration file", path=str(path)
            ) from e

        if not isinstance(data, dict):
            raise InvalidConfigError(
                "Configuration file must contain a JSON object",
                context={"path": str(path)},
            )

        for key, value in data.items():
            self.set(key, value)

    def _load_env(self) -> None:
        for key in DEFAULTS:
            raw = os.environ.get(ENV_PREFIX + key.upper())
            if raw is not None:
                self.set(key, raw)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        Raises:
            InvalidConfigError: Unknown key, uncastable or invalid value
        """
        if key not in DEFAULTS:
            raise InvalidConfigError(
                f"Unknown configuration key '{key}'", context={"known": sorted(DEFAULTS)}
            )
        try:
            cast_value = _CASTS[key](value)
        except (TypeError, ValueError) as e:
            raise wrap_exception(
                e, InvalidConfigError, f"Invalid value for '{key}'", value=value
            ) from e

        self._validate(key, cast_value)
        with self._lock:
            self._values[key] = cast_value

    @staticmethod
    def _validate(key: str, value: Any) -> None:
        if key == "search_timeout" and value <= 0:
            raise InvalidConfigError(
                "search_timeout must be positive", context={"value": value}
            )
        if key in ("plan_cache_size", "heuristic_cache_size") and value <= 0:
            raise InvalidConfigError(
                f"{key} must be positive", context={"value": value}
            )
        if key == "heuristic" and value not in HEURISTICS:
            raise InvalidConfigError(
                f"Unknown heuristic '{value}'", context={"known": list(HEURISTICS)}
            )

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._values)


_config: Optional[ShrdliteConfig] = None
_config_lock = threading.Lock()


def get_config() -> ShrdliteConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = ShrdliteConfig()
    return _config


def reset_config(config: Optional[ShrdliteConfig] = None) -> None:
    """Replace (or drop) the process-wide configuration. Used by tests and the CLI."""
    global _config
    with _config_lock:
        _config = config
