"""
Logging for extrautils.

Extends Python's standard logging with:
- A custom TRACE level below DEBUG for per-key and per-object detail
- Structured extra fields rendered as [key:value] after the message
- Microsecond timestamps on demand
- Complete disable via level=False or level="false"

Library components take an optional ``lg`` and never configure logging
themselves; applications create loggers with `create_lg()`.
"""

import logging
import sys

from .config import LogConfig
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .formatters import LogFormatter
from .logger import Logger

# Register the custom TRACE level
logging.TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]  # type: ignore[attr-defined]
logging.addLevelName(logging.TRACE, "TRACE")  # type: ignore[attr-defined]
LogConstants.LEVEL_NAMES.update({"trace": logging.TRACE})  # type: ignore[attr-defined]


def resolve_level(s: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        s: Log level as string name, numeric value, or False to disable logging

    Returns:
        Union[int, bool]: Numeric log level or False to disable logging

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    if isinstance(s, bool):
        return s

    if str(s).isnumeric():
        return int(s)

    s_str = str(s).lower()
    if s_str in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[s_str]

    raise InvalidLogLevelError(s)


def create_lg(
    name: str,
    level: str | int | bool = "info",
    micros: bool = False,
    cls: type[Logger] = Logger,
) -> Logger:
    """
    Create a logger writing formatted lines to stdout.

    The logger is not registered with logging's manager, so creating one
    never touches loggers configured elsewhere in the application.

    Args:
        name: Logger name
        level: Log level (string, numeric, or False to disable)
        micros: Whether to show microsecond precision
        cls: Logger class to use

    Returns:
        Logger: Configured logger instance

    Example:
        >>> lg = create_lg("extrautils.inject", "debug")
        >>> lg.debug("traits injected", extra={"written": 3})
    """
    config = LogConfig.from_params(level, micros)
    lg = cls(name, config)
    lg.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LogFormatter(config))
    if config.level is not False:
        handler.setLevel(config.level)
    lg.addHandler(handler)
    return lg


__all__ = [
    "Logger",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "LogError",
    "InvalidLogLevelError",
    "resolve_level",
    "create_lg",
]
