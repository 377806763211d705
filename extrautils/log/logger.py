"""
Logger class for the logging system.

Extends logging.Logger with a TRACE level and structured extra fields
that formatters render after the message.
"""

import logging
import sys
from typing import Any

from .config import LogConfig
from .constants import LogConstants


class Logger(logging.Logger):
    """
    Logger with TRACE support and pre-populated extra fields.

    Extra fields passed per call are merged over the logger's own extra
    fields and attached to the record for LogFormatter.
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | None = None,
    ):
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration (default: info level)
            extra: Pre-populated extra fields to include in all log records
        """
        if config is None:
            config = LogConfig.from_params("info")

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def micros(self) -> bool:
        return self._config.micros

    @property
    def disabled(self) -> bool:
        """Check if logging is disabled."""
        return self._logging_disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        self._logging_disabled = value

    def makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: Any = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record with merged extra fields attached."""
        merged = self._extra.copy()
        if extra:
            merged.update(extra)
        record = super().makeRecord(
            name,
            level,
            fn,
            lno,
            msg,
            args,
            exc_info,
            func=func,
            extra=merged,
            sinfo=sinfo,
        )
        # setattr avoids name mangling of the __ prefix
        setattr(record, LogConstants.EXTRA_ATTR, merged)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a TRACE level message.

        Args:
            msg: Log message
            *args: Message format arguments
            **kwargs: Additional keyword arguments including 'extra' for structured data
        """
        if self._logging_disabled:
            return
        trace_level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if self.isEnabledFor(trace_level):
            self._log(trace_level, msg, args, **kwargs)

    def _log(  # type: ignore[override]
        self, level: int, msg: object, args: Any, **kwargs: Any
    ) -> None:
        if self._logging_disabled:
            return

        try:
            super()._log(level, msg, args, **kwargs)
        except (TypeError, ValueError) as e:
            # Format string errors (wrong number of args, type mismatch)
            text = str(msg)
            preview = text[:80] + "..." if len(text) > 80 else text
            sys.stderr.write(
                f"LOG_FORMAT_ERROR [{self.name}]: {e.__class__.__name__}: {e} "
                f"| msg={preview!r} args={args!r}\n"
            )
