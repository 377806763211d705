"""
Configuration loading.

Config layers three sources, later ones winning:

1. Built-in defaults (DEFAULTS)
2. An optional YAML file
3. Environment variables with the EXTRAUTILS_ prefix

Environment Variable Override Format:
    EXTRAUTILS_<SECTION>_<KEY>=value

Examples:
    EXTRAUTILS_WATCH_EAGER=false
    EXTRAUTILS_LOGGING_LEVEL=debug

String values may reference other keys with ${section.key}.
"""

import copy
import os
import re
from pathlib import Path
from typing import Any

import yaml

from ..dot_dict import DotDict
from ..exceptions import ConfigError, ValidationError

# Maximum config file size (1MB)
MAX_CONFIG_SIZE_BYTES = 1024 * 1024

ENV_PREFIX = "EXTRAUTILS_"

# Names a config file to load in get_default_config()
CONFIG_FILE_ENV = "EXTRAUTILS_CONFIG"

DEFAULTS: dict[str, Any] = {
    "logging": {"level": "info", "micros": False},
    "watch": {
        "eager": True,
        "depth": None,
        "strict": False,
        "placeholder": "<unserializable {type}>",
        "level": "info",
    },
    "inject": {"overwrite": False, "shared": False},
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base recursively; override wins on conflicts."""
    for key, val in override.items():
        if isinstance(val, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], val)
        else:
            base[key] = val
    return base


def _read_yaml(fname: str | Path) -> dict[str, Any]:
    """Read a YAML mapping from fname."""
    path = Path(fname).expanduser().resolve()
    if not path.is_file():
        raise ConfigError("config file not found", path=str(path))

    size = path.stat().st_size
    if size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "config file too large",
            path=str(path),
            size=size,
            limit=MAX_CONFIG_SIZE_BYTES,
        )

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError("invalid YAML", path=str(path)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping", path=str(path))
    return data


class Config(DotDict):
    """
    Library configuration with defaults, YAML file and environment overrides.

    Example:
        config = Config("etc/extrautils.yaml")
        config.watch.eager
        config.get("inject.overwrite")
    """

    def __init__(
        self,
        fname: str | Path | None = None,
        enable_env_overrides: bool = True,
        env_prefix: str = ENV_PREFIX,
    ):
        """
        Initialize configuration.

        Args:
            fname: Optional path to a YAML configuration file
            enable_env_overrides: Whether to apply environment variable overrides
            env_prefix: Prefix for environment variables (default: 'EXTRAUTILS_')
        """
        super().__init__()
        self._enable_env_overrides = enable_env_overrides
        self._env_prefix = env_prefix
        self._config_path = Path(fname).resolve() if fname else None
        self._load()

    def _load(self) -> None:
        data = copy.deepcopy(DEFAULTS)
        if self._config_path is not None:
            _deep_merge(data, _read_yaml(self._config_path))

        if self._enable_env_overrides:
            data = self._apply_env_overrides(data)

        self.clear()
        self.set(**data)
        self.set(**self._resolve(self.to_dict()))

    def reload(self) -> "Config":
        """
        Reload configuration from disk and the environment.

        Returns:
            Self for chaining.
        """
        self._load()
        return self

    @property
    def path(self) -> Path | None:
        return self._config_path

    def _resolve(self, content: Any) -> Any:
        """Recursively replace ${key.path} references in string values."""
        if isinstance(content, dict):
            for k in list(content):
                content[k] = self._resolve(content[k])
        elif isinstance(content, list):
            return [self._resolve(v) for v in content]
        elif isinstance(content, str):
            # Restricted to key characters to keep the pattern linear
            return re.sub(r"\$\{([a-zA-Z0-9_.]+)\}", self._substitute_var, content)
        return content

    def _substitute_var(self, match: re.Match) -> str:
        var_name = match.group(1)
        if not self.has(var_name):
            raise ConfigError("undefined config reference", reference=var_name)
        return str(self.get(var_name))

    def _collect_env_vars(self) -> dict[str, str]:
        """Collect environment variables carrying the configured prefix."""
        return {
            key: value
            for key, value in os.environ.items()
            if key.startswith(self._env_prefix) and key != CONFIG_FILE_ENV
        }

    def _env_key_to_path(self, env_key: str) -> list[str]:
        """EXTRAUTILS_WATCH_EAGER -> ['watch', 'eager']"""
        return env_key[len(self._env_prefix) :].lower().split("_")

    def _apply_env_overrides(self, data: dict[str, Any]) -> dict[str, Any]:
        for env_key, env_value in self._collect_env_vars().items():
            path = self._env_key_to_path(env_key)
            current = data
            for part in path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[path[-1]] = self._convert_env_value(env_value)
        return data

    def _convert_env_value(self, value: str) -> bool | int | float | str | list | None:
        """Convert an environment string to bool, number, list, None or str."""
        if value.lower() in ("null", "none", ""):
            return None

        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        if "," in value:
            return [self._convert_env_value(v.strip()) for v in value.split(",")]

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def get_env_overrides(self) -> dict[str, Any]:
        """
        Get all environment variable overrides that would be applied.

        Returns:
            Dictionary of dotted config path -> converted value
        """
        if not self._enable_env_overrides:
            return {}
        return {
            ".".join(self._env_key_to_path(key)): self._convert_env_value(value)
            for key, value in self._collect_env_vars().items()
        }

    def validate(self) -> Any:
        """
        Validate configuration against the pydantic schema.

        Returns:
            ExtraUtilsConfig: Validated configuration model

        Raises:
            ValidationError: If the configuration is invalid
        """
        import pydantic

        from .schemas import validate_config

        try:
            return validate_config(self.to_dict())
        except pydantic.ValidationError as e:
            raise ValidationError(
                "invalid configuration", errors=e.error_count()
            ) from e


def get_default_config() -> Config:
    """
    Build the configuration used by module-level helpers.

    Loads the YAML file named by EXTRAUTILS_CONFIG when set, otherwise only
    defaults and environment overrides. The result is validated.

    Raises:
        ConfigError: If the named file cannot be read
        ValidationError: If the resulting configuration is invalid
    """
    config = Config(os.environ.get(CONFIG_FILE_ENV) or None)
    config.validate()
    return config
