"""
YAML-based configuration loading for test selection.

Looks for `solano.yml`, `config/solano.yml`, `tddium.yml` or `config/tddium.yml`
under the repository root. The configuration holds top-level `test_pattern` and
`tests` settings plus named `profiles`, each of which may carry its own
`test_pattern` and `tests`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, Union, cast

import yaml

# Config file search order (first match wins)
CONFIG_SEARCH_PATHS = ["solano.yml", "config/solano.yml", "tddium.yml", "config/tddium.yml"]

# Where a previous CI step may have recorded the profile to run.
PLAN_VARIABLES_FILE = "solano-plan-variables.json"

# A parsed configuration value with all mapping keys converted to strings.
ConfigTree = Union[dict[str, "ConfigTree"], list["ConfigTree"], str, int, float, bool, None]


class ConfigError(ValueError):
    """Base class for configuration errors."""


class ConfigurationMissingError(ConfigError):
    pass


class ProfileMissingError(ConfigError):
    pass


class MalformedFieldError(ConfigError):
    pass


class ConfigLoader(Protocol):
    def load(self) -> dict[str, Any]: ...


def _key_to_str(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return ""
    return str(key)


def stringify_keys(value: Any) -> ConfigTree:
    """Recursively convert every mapping key in `value` to a string."""
    if isinstance(value, Mapping):
        return {_key_to_str(k): stringify_keys(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [stringify_keys(v) for v in value]
    return value


def find_config_file(root: Path) -> Path | None:
    """Return the first config file found under `root`, or `None`."""
    for name in CONFIG_SEARCH_PATHS:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Path) -> dict[str, Any]:
    """Load and key-stringify a YAML config file. An empty file is an empty config."""
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {config_path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Expected a mapping at the top of {config_path}")
    return cast(dict[str, Any], stringify_keys(data))


class YamlConfigLoader:
    """Loads the configuration from the first config file found under `root`."""

    def __init__(self, root: str | Path = ".") -> None:
        self.root: Path = Path(root)
        self.path: Path | None = None

    def load(self) -> dict[str, Any]:
        path = find_config_file(self.root)
        if path is None:
            raise ConfigurationMissingError("No solano configuration found")
        self.path = path
        return load_config(path)


def normalize_field(value: Any, field: str, owner: str) -> list[Any]:
    """
    Normalize a `test_pattern` or `tests` setting to a list: a string becomes a
    one-element list and a missing value an empty one.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return list(value)
    raise MalformedFieldError(f"Malformed '{field}' in {owner}")


def get_profile(config: Mapping[str, Any], profile_name: str) -> Mapping[str, Any]:
    profiles = config.get("profiles")
    if profiles is None:
        raise ProfileMissingError("No profiles defined")
    if not isinstance(profiles, Mapping):
        raise ConfigError("Malformed 'profiles': expected a mapping of profile names")
    profile = profiles.get(profile_name)
    if profile is None:
        raise ProfileMissingError(f"No such profile '{profile_name}'")
    if not isinstance(profile, Mapping):
        raise ConfigError(f"Malformed profile '{profile_name}': expected a mapping")
    return profile


def resolve_profile_name(
    profile_name: str | None, root: Path, default_profile: str | None = None
) -> str:
    """
    Use `profile_name` if given, else `next_profile` from the plan variables file
    under `root`, else `default_profile`. Raises `ProfileMissingError` if none of
    them names a profile.
    """
    name = (profile_name or "").strip()
    if not name:
        variables_path = root / PLAN_VARIABLES_FILE
        if variables_path.is_file():
            try:
                variables = json.loads(variables_path.read_text(encoding="utf-8")) or {}
            except json.JSONDecodeError as e:
                raise ConfigError(f"Could not parse {variables_path}: {e}") from e
            if isinstance(variables, Mapping):
                name = str(variables.get("next_profile") or "").strip()
    if not name:
        name = (default_profile or "").strip()
    if not name:
        raise ProfileMissingError("missing profile name")
    return name
