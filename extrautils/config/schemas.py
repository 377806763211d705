"""
Configuration schemas using Pydantic for validation.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _check_level(v: Any) -> Any:
    if isinstance(v, str) and v.upper() not in _LEVELS:
        raise ValueError(
            f"Invalid log level '{v}'. Must be one of: {', '.join(_LEVELS)}"
        )
    return v


class LoggingConfig(BaseModel):
    """Configuration for library loggers."""

    level: str | bool = Field(
        default="info", description="Log level, or false to disable"
    )
    micros: bool = Field(default=False, description="Show microsecond timestamps")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Validate log level is a recognized level."""
        if isinstance(v, str) and v.lower() == "false":
            return v
        return _check_level(v)

    model_config = ConfigDict(extra="allow")


class WatchConfig(BaseModel):
    """Configuration for the default access tracer."""

    eager: bool = Field(default=True, description="Wrap reachable objects up front")
    depth: int | None = Field(default=None, ge=0, description="Eager walk depth limit")
    strict: bool = Field(default=False, description="Fail on unserializable values")
    placeholder: str = Field(
        default="<unserializable {type}>",
        description="Text logged for values that cannot be serialized",
    )
    level: str = Field(default="info", description="Level of trace lines")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Trace lines need a real level; false is not accepted here."""
        return _check_level(v)

    model_config = ConfigDict(extra="forbid")


class InjectConfig(BaseModel):
    """Defaults for trait injection."""

    overwrite: bool = Field(default=False, description="Replace existing members")
    shared: bool = Field(
        default=False,
        description="Write attributes for instance destinations onto their class",
    )

    model_config = ConfigDict(extra="forbid")


class ExtraUtilsConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    inject: InjectConfig = Field(default_factory=InjectConfig)

    model_config = ConfigDict(extra="allow")


def validate_config(config_dict: dict[str, Any]) -> ExtraUtilsConfig:
    """
    Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If the configuration is invalid
    """
    return ExtraUtilsConfig.model_validate(config_dict)
