"""
Line-oriented outputs for trace messages.

The tracer never prints directly; it hands each finished line to a sink.
"""

import io
import logging
import sys
from collections.abc import Callable
from typing import Any, Protocol, TextIO, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Anything that accepts one finished trace line at a time."""

    def write(self, line: str) -> None: ...


class LoggerSink:
    """Send trace lines through a logger at a fixed level."""

    def __init__(self, lg: logging.Logger, level: int = logging.INFO) -> None:
        self._lg = lg
        self._level = level

    def write(self, line: str) -> None:
        self._lg.log(self._level, line)


class StreamSink:
    """Write trace lines to a text stream, stdout by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write(self, line: str) -> None:
        # Resolved per call so pytest's capsys and redirect_stdout are honored
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()


class MemorySink:
    """Keep trace lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)

    def clear(self) -> None:
        self.lines.clear()


class _CallableSink:
    def __init__(self, fn: Callable[[str], Any]) -> None:
        self._fn = fn

    def write(self, line: str) -> None:
        self._fn(line)


def as_sink(target: LogSink | logging.Logger | Callable[[str], Any]) -> LogSink:
    """
    Adapt a logger, a callable or an existing sink to the LogSink protocol.

    Args:
        target: Sink, logging.Logger, text stream, or callable taking one
            string (e.g. print)

    Returns:
        LogSink: Object with a write(line) method
    """
    if isinstance(target, logging.Logger):
        return LoggerSink(target)
    if isinstance(target, io.TextIOBase):
        return StreamSink(target)
    if isinstance(target, LogSink):
        return target
    if callable(target):
        return _CallableSink(target)
    raise TypeError(f"cannot use {type(target).__name__} as a log sink")
