"""
Application settings for the Content Intelligence Dispatcher.

Settings come from a YAML file merged over built-in defaults; ${VAR}
references are filled from the environment. Runtime state (feature
flags, registry, audit trail) lives in the ConfigStore, not here.
"""

import copy
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from contentintel.utils.errors import ConfigurationError

_ENV_REFERENCE = re.compile(r"\$\{([^}]+)\}")

# dotted key -> {"type": ..., "min": ..., "gt": ..., "required": ...}
# "min" is an inclusive lower bound, "gt" an exclusive one
CONFIG_SCHEMA: Dict[str, Dict[str, Any]] = {
    "llm.provider": {"type": str},
    "llm.max_tokens": {"type": int, "min": 1},
    "llm.timeout": {"type": (int, float), "gt": 0},
    "dispatcher.max_workers": {"type": int, "min": 1},
    "dispatcher.engine_timeout": {"type": (int, float), "gt": 0},
    "audit.max_entries": {"type": int, "min": 1},
    "audit.excerpt_length": {"type": int, "min": 1},
}


def expand_env(value: Any) -> Any:
    """Fill ${VAR} references inside strings, lists and mappings.

    Unset variables are left as the literal reference so that callers can
    tell "not configured" apart from an empty value.
    """
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, str):
        return _ENV_REFERENCE.sub(
            lambda match: os.environ.get(match.group(1), match.group(0)), value
        )
    return value


class ConfigManager:
    """
    Read-only view over a settings mapping.

    Usage:
        manager = ConfigManager.from_file(Path("config/config.yaml"))
        timeout = manager.get("dispatcher.engine_timeout", default=90.0)
        manager.validate(CONFIG_SCHEMA)
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        self._config: Dict[str, Any] = config_dict or {}

    @classmethod
    def from_file(cls, file_path: Path) -> "ConfigManager":
        """
        Load a YAML settings file and expand environment references.

        Raises:
            ConfigurationError: If the file is missing, unparsable, or not a mapping.
        """
        if not file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}", config_key=str(file_path)
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse YAML configuration: {e}", config_key=str(file_path)
            ) from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                "Configuration root must be a mapping", config_key=str(file_path)
            )
        return cls(expand_env(loaded))

    def merged_over(self, defaults: Dict[str, Any]) -> "ConfigManager":
        """New manager holding `defaults` with this manager's values applied on top."""
        return ConfigManager(_deep_merge(defaults, self._config))

    def get(self, key: str, default: Any = None, required: bool = False) -> Any:
        """
        Look up a dotted key such as "audit.max_entries".

        Raises:
            ConfigurationError: If `required` and the key is absent.
        """
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                if required:
                    raise ConfigurationError(
                        f"Required configuration key not found: {key}", config_key=key
                    )
                return default
            value = value[part]
        return value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    def validate(self, schema: Dict[str, Dict[str, Any]]) -> None:
        """
        Check types and lower bounds of the keys named in `schema`.

        Raises:
            ConfigurationError: On the first key that fails.
        """
        for key, rules in schema.items():
            value = self.get(key)
            if value is None:
                if rules.get("required", False):
                    raise ConfigurationError(f"Required configuration missing: {key}", config_key=key)
                continue

            expected_type = rules.get("type")
            # bool is an int subclass; never accept it for numeric settings
            if expected_type and (
                not isinstance(value, expected_type)
                or (isinstance(value, bool) and expected_type is not bool)
            ):
                expected = getattr(expected_type, "__name__", str(expected_type))
                raise ConfigurationError(
                    f"Invalid type for {key}: expected {expected}, got {type(value).__name__}",
                    config_key=key,
                )

            minimum = rules.get("min")
            if minimum is not None and value < minimum:
                raise ConfigurationError(
                    f"Invalid value for {key}: must be >= {minimum}", config_key=key
                )

            bound = rules.get("gt")
            if bound is not None and value <= bound:
                raise ConfigurationError(
                    f"Invalid value for {key}: must be > {bound}", config_key=key
                )


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load settings from a YAML file, or return the defaults.

    A file only needs to carry the keys it changes.

    Args:
        config_path: Path to the YAML file. When None, config/config.yaml
            is looked up in the working directory and next to the package.
    """
    if config_path is None:
        candidates = [
            Path("config/config.yaml"),
            Path("config.yaml"),
            Path(__file__).parent.parent.parent / "config" / "config.yaml",
        ]
        config_path = next((str(path) for path in candidates if path.exists()), None)

    if not config_path:
        return get_default_config()

    manager = ConfigManager.from_file(Path(config_path)).merged_over(get_default_config())
    manager.validate(CONFIG_SCHEMA)
    return manager.to_dict()


def get_default_config() -> Dict[str, Any]:
    """Return default configuration values."""
    return {
        "llm": {
            "provider": "openai",
            "model": None,
            "api_key": None,
            "base_url": None,
            "temperature": 0.2,
            "max_tokens": 4096,
            "timeout": 60.0,
        },
        "dispatcher": {
            "max_workers": 8,
            "engine_timeout": 90.0,
        },
        "store": {
            "path": "data/contentintel_state.json",
        },
        "audit": {
            "max_entries": 200,
            "excerpt_length": 200,
        },
        "admin": {
            "username": "admin",
            "password": None,
        },
        "logging": {
            "level": "INFO",
            "format": "json",
            "file": None,
        },
    }
