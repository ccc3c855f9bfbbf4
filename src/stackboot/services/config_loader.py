"""Configuration loader for stackboot."""

import shlex
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from stackboot.errors import BootstrapError
from stackboot.errors_catalog import actionable_error


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "env_file",
        "compose_file",
        "base_url",
        "database_url",
        "state_dir",
        "ignore_file",
        "migrate_command",
        "probe_service",
        "probe_command",
        "app_container",
        "readiness_attempts",
        "readiness_interval",
        "command_timeout",
        "verbose",
        "log_file",
        "report_file",
    }
    MODE_SECTIONS = {"development", "production"}
    COMMAND_KEYS = {"migrate_command", "probe_command"}
    # key: (type, lower bound, bound allowed, description)
    NUMBER_KEYS = {
        "readiness_attempts": (int, 1, True, "an integer of at least 1"),
        "readiness_interval": (float, 0.0, True, "a number of at least 0"),
        "command_timeout": (float, 0.0, False, "a number greater than 0"),
    }

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BootstrapError(actionable_error("config_not_found", path=config_path))

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BootstrapError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BootstrapError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS - self.MODE_SECTIONS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise BootstrapError(f"Unknown configuration keys: {unknown_list}")

        for section in self.MODE_SECTIONS & set(parsed.keys()):
            values = parsed[section]
            if values is None:
                parsed[section] = {}
                continue
            if not isinstance(values, dict):
                raise BootstrapError(f"Config section '{section}' must be a YAML mapping.")
            unknown = sorted(set(values.keys()) - self.SUPPORTED_KEYS)
            if unknown:
                unknown_list = ", ".join(unknown)
                raise BootstrapError(f"Unknown configuration keys in '{section}': {unknown_list}")

        return parsed

    def for_mode(self, config: Dict[str, Any], mode: str) -> Dict[str, Any]:
        """Flattens top-level keys with the mode section taking precedence."""
        merged = {key: value for key, value in config.items() if key in self.SUPPORTED_KEYS}
        merged.update(config.get(mode) or {})

        for key in self.COMMAND_KEYS & set(merged.keys()):
            merged[key] = self.parse_command(merged[key], key)
        for key in set(self.NUMBER_KEYS) & set(merged.keys()):
            if merged[key] is not None:
                merged[key] = self.parse_number(merged[key], key)
        return merged

    @staticmethod
    def parse_command(value: Any, key: str):
        if isinstance(value, str):
            return tuple(shlex.split(value))
        if isinstance(value, (list, tuple)) and all(isinstance(part, str) for part in value):
            return tuple(value)
        raise BootstrapError(f"Config key '{key}' must be a string or a list of strings.")

    @classmethod
    def parse_number(cls, value: Any, key: str):
        kind, minimum, inclusive, expected = cls.NUMBER_KEYS[key]
        message = f"Config key '{key}' must be {expected}, got {value!r}."
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise BootstrapError(message)

        try:
            parsed = kind(value)
        except (ValueError, OverflowError) as exc:
            raise BootstrapError(message) from exc

        if isinstance(value, float) and parsed != value:
            raise BootstrapError(message)
        if not (parsed > minimum or (inclusive and parsed == minimum)):
            raise BootstrapError(message)
        return parsed
