"""
Constants for the logging system.

Format strings, rule widths and the custom TRACE level.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    # Default format string
    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Rule widths for padding before extra fields
    DEFAULT_RULE_WIDTH: int = 70
    MICRO_RULE_WIDTH: int = 74

    # Custom log levels
    CUSTOM_LEVELS: dict[str, int] = {"TRACE": 5}

    # Log level names for resolution (custom levels are added on package import)
    LEVEL_NAMES: dict[str, int | bool] = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "false": False,  # Special value to disable all logging
    }

    # Attribute carrying merged extra fields on log records
    EXTRA_ATTR: str = "__extrautils__extra"
