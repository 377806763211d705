"""
Log formatter rendering structured extra fields.

Output format:

    [12:34:56,789] [I] traits injected          [source:Patch] [written:3] [extrautils]
"""

import logging

from .config import LogConfig
from .constants import LogConstants


def _format_extra(record: logging.LogRecord) -> str:
    """Format extra fields as [key:value] groups, keys sorted."""
    extra = getattr(record, LogConstants.EXTRA_ATTR, None)
    if not extra:
        return ""

    parts = []
    for key in sorted(extra):
        value = extra[key]
        if isinstance(value, Exception):
            value = value.__class__.__name__
        # Escape % so the value survives %-style record formatting
        parts.append(f"[{key}:{str(value).replace('%', '%%')}]")
    return " " + " ".join(parts)


class LogFormatter(logging.Formatter):
    """
    Formatter appending extra fields and the logger name to each line.

    Timestamps optionally carry microseconds.
    """

    def __init__(self, config: LogConfig) -> None:
        self._config = config
        super().__init__(LogConstants.DEFAULT_FORMAT)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        s = super().formatTime(record, datefmt)
        if self._config.micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s

    def _calculate_width(self, record: logging.LogRecord) -> int:
        """Display width of "[time] [L] message" without formatting it."""
        timestamp_len = 16 if self._config.micros else 12
        return 1 + timestamp_len + 4 + 1 + 2 + len(record.getMessage())

    def format(self, record: logging.LogRecord) -> str:
        fmt = LogConstants.DEFAULT_FORMAT
        extra = _format_extra(record)
        if extra:
            rule = (
                LogConstants.MICRO_RULE_WIDTH
                if self._config.micros
                else LogConstants.DEFAULT_RULE_WIDTH
            )
            fmt += " " * max(1, rule - self._calculate_width(record)) + extra.lstrip()
        fmt += " [%(name)s]"

        self._style._fmt = fmt
        self._fmt = fmt
        return super().format(record)
