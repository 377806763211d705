"""
Access tracing for arbitrary object graphs.

Example:
    from extrautils.watch import Tracer, MemorySink

    sink = MemorySink()
    app = Tracer(sink=sink).watch(app, "app")
    app.config.port          # sink.lines[-1] == "Reading app.config.port -> 8080"
"""

from .proxy import TracedNode, Watched, WatchedCallable, node_of, unwrap
from .serialize import DEFAULT_PLACEHOLDER, JSONSerializer, Serializer
from .sink import LoggerSink, LogSink, MemorySink, StreamSink, as_sink
from .tracer import (
    SCALAR_TYPES,
    Tracer,
    default_tracer,
    is_traceable,
    is_watched,
    watch,
)

__all__ = [
    "watch",
    "unwrap",
    "is_watched",
    "is_traceable",
    "node_of",
    "default_tracer",
    "Tracer",
    "TracedNode",
    "Watched",
    "WatchedCallable",
    "JSONSerializer",
    "Serializer",
    "DEFAULT_PLACEHOLDER",
    "LogSink",
    "LoggerSink",
    "StreamSink",
    "MemorySink",
    "as_sink",
    "SCALAR_TYPES",
]
