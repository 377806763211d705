"""
Access tracer.

Wraps an object graph in Watched proxies that log every read, write and
call as a single human-readable line:

    Reading root.x -> 3
    Writing root.y <- {"a": 1}
    Calling root.f(1, 2) -> 3

Wrap-state lives in the tracer's side table, keyed by object identity.
Each object is wrapped at most once per tracer; wrapping it again returns
the proxy created the first time while that proxy is alive, and a proxy
with the same node otherwise. Objects reached through a traced object are
wrapped with a path extending the parent's path, either up front (eager
mode) or on first access.

The side table never keeps an object alive. An entry for an object that
supports weak references ends when the object is collected. Objects
without weak reference support (lists, dicts, tuples) are held until the
object they were reached through is collected; roots and call results of
that kind are held while their proxy is alive.
"""

import datetime
import inspect
import threading
import types
import uuid
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any

from ..config import get_default_config
from ..log import LogConfig, create_lg, resolve_level
from ..props import PropertyMap, own_properties
from ..reflect import RESERVED_NAMES, static_members
from .proxy import TracedNode, Watched, node_of, proxy_type, unwrap
from .serialize import JSONSerializer, Serializer
from .sink import LoggerSink, LogSink, StreamSink, as_sink

# Values that are never wrapped
SCALAR_TYPES: tuple[type, ...] = (
    type(None),
    type(Ellipsis),
    type(NotImplemented),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    memoryview,
    range,
    slice,
    Decimal,
    Fraction,
    Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
)


def is_traceable(value: Any) -> bool:
    """Check whether value is an object the tracer wraps."""
    return not isinstance(value, SCALAR_TYPES)


def _is_ephemeral(value: Any) -> bool:
    """Bound and built-in methods are recreated on every access."""
    return (
        inspect.ismethod(value)
        or inspect.isbuiltin(value)
        or isinstance(value, (types.MethodWrapperType, types.MethodDescriptorType))
    )


def _members(obj: Any) -> PropertyMap:
    """Own members of obj that eager wrapping descends into."""
    if isinstance(obj, Mapping):
        return PropertyMap({str(k): v for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return PropertyMap({str(i): v for i, v in enumerate(obj)})
    if isinstance(obj, type):
        return static_members(obj)
    return own_properties(obj, RESERVED_NAMES)


class Tracer:
    """
    Creates Watched proxies and turns their events into log lines.

    Example:
        tracer = Tracer(sink=print)
        cfg = tracer.watch(Settings(), "cfg")
        cfg.port            # Reading cfg.port -> 8080
        cfg.port = 9090     # Writing cfg.port <- 9090
    """

    def __init__(
        self,
        sink: LogSink | Any | None = None,
        serializer: Serializer | None = None,
        eager: bool = True,
        depth: int | None = None,
        lg: Any | None = None,
    ) -> None:
        """
        Initialize the tracer.

        Args:
            sink: Destination for trace lines: a LogSink, a logging.Logger,
                a text stream or a callable taking one string. Lines go to
                stdout when omitted.
            serializer: Callable rendering values as text (JSONSerializer by default)
            eager: Wrap the reachable graph when a root is first watched
            depth: Maximum depth of the eager walk (None for unlimited);
                deeper objects are wrapped on first access
            lg: Logger for the tracer's own diagnostics (optional)
        """
        self._sink = as_sink(sink) if sink is not None else StreamSink()
        self._serialize = serializer or JSONSerializer()
        self._eager = eager
        self._depth = depth
        self._lg = lg
        self._nodes: dict[int, TracedNode] = {}
        self._lock = threading.RLock()

    @property
    def sink(self) -> LogSink:
        return self._sink

    def __len__(self) -> int:
        return len(self._nodes)

    def watch(self, root: Any, label: str, owner: TracedNode | None = None) -> Any:
        """
        Wrap root for access tracing.

        Args:
            root: Object to trace
            label: Path label for root, the first segment of every logged path
            owner: Node root was reached through; its keeper bounds the
                registration of a root without weak reference support

        Returns:
            The proxy for root, or root unchanged when it is a scalar or a proxy
        """
        if isinstance(root, Watched) or not is_traceable(root):
            return root

        with self._lock:
            node = self._nodes.get(id(root))
            if node is not None:
                return self._proxy(node)
            node = self._register(root, label)
            proxy = self._proxy(node)
            keeper = owner.keeper() if owner is not None else None
            node.anchor(proxy if keeper is None else keeper)
            if self._eager:
                self._prewrap(node)
        return proxy

    def wrap(self, value: Any, path: str, owner: TracedNode | None = None) -> Any:
        """
        Wrap a value reached at runtime.

        Bound methods get a fresh, unregistered proxy each time since their
        identity changes between accesses.
        """
        if isinstance(value, Watched) or not is_traceable(value):
            return value
        if _is_ephemeral(value):
            return self._proxy(TracedNode(value, path))
        return self.watch(value, path, owner)

    def is_watched(self, value: Any) -> bool:
        """Check whether value is a proxy or an object this tracer has wrapped."""
        if isinstance(value, Watched):
            return True
        return id(value) in self._nodes

    def node(self, value: Any) -> TracedNode | None:
        """Get the TracedNode for a raw object or proxy."""
        found = node_of(value)
        if found is not None:
            return found
        return self._nodes.get(id(value))

    def _register(self, obj: Any, path: str) -> TracedNode:
        key = id(obj)

        def release(_ref: Any) -> None:
            self._release(key, node)

        node = TracedNode(obj, path, release)
        self._nodes[key] = node
        if self._lg:
            self._lg.trace("object wrapped", extra={"path": path})
        return node

    def _release(self, key: int, node: TracedNode) -> None:
        """Drop a side-table entry once its object or keeper is collected."""
        with self._lock:
            if self._nodes.get(key) is node:
                del self._nodes[key]

    def _proxy(self, node: TracedNode) -> Watched:
        """Return the live proxy for node, creating one if needed."""
        proxy = node.proxy
        if proxy is None:
            proxy = proxy_type(node.target)(node, self)
            node.proxy = proxy
        return proxy

    def _prewrap(self, root: TracedNode) -> None:
        """Register every object reachable from root that is not wrapped yet."""
        pending = [(root, 0)]
        while pending:
            node, level = pending.pop()
            if self._depth is not None and level >= self._depth:
                continue
            for name, member in _members(node.target).items():
                if not is_traceable(member) or _is_ephemeral(member):
                    continue
                if id(member) in self._nodes:
                    continue
                child = self._register(member, f"{node.path}.{name}")
                child.anchor(node.keeper())
                pending.append((child, level + 1))

    def _emit(self, line: str) -> None:
        self._sink.write(line)

    def _signature(self, args: tuple, kwargs: dict[str, Any]) -> str:
        parts = [self._serialize(a) for a in args]
        parts.extend(f"{k}={self._serialize(v)}" for k, v in kwargs.items())
        return ", ".join(parts)

    def on_read(self, node: TracedNode, name: Any, value: Any) -> Any:
        """Log a member read and return the member wrapped."""
        path = f"{node.path}.{name}"
        if not callable(value):
            self._emit(f"Reading {path} -> {self._serialize(value)}")
        return self.wrap(value, path, node)

    def on_write(self, node: TracedNode, name: Any, value: Any) -> Any:
        """Log a member write and return the raw value to store."""
        self._emit(f"Writing {node.path}.{name} <- {self._serialize(value)}")
        return unwrap(value)

    def on_delete(self, node: TracedNode, name: Any) -> None:
        self._emit(f"Deleting {node.path}.{name}")

    def on_call(self, node: TracedNode, args: tuple, kwargs: dict[str, Any]) -> Any:
        """Invoke the target, log the call and return the wrapped result."""
        signature = self._signature(args, kwargs)
        call_path = f"{node.path}({signature})"
        try:
            result = node.target(*args, **kwargs)
        except Exception as e:
            self._emit(f"Calling {call_path} raised {type(e).__name__}: {e}")
            raise
        self._emit(f"Calling {call_path} -> {self._serialize(result)}")
        return self.wrap(result, call_path)


_default_tracer: Tracer | None = None
_default_lock = threading.Lock()


def default_tracer() -> Tracer:
    """
    Get the process-wide tracer used by the module-level watch().

    Built on first use from the default configuration: lines go through the
    ``extrautils.watch`` logger to stdout.
    """
    global _default_tracer
    with _default_lock:
        if _default_tracer is None:
            _default_tracer = _build_default_tracer()
        return _default_tracer


def _build_default_tracer() -> Tracer:
    config = get_default_config()
    log_config = LogConfig.from_config(config.to_dict())
    lg = create_lg("extrautils.watch", log_config.level, micros=log_config.micros)
    level = int(resolve_level(config.watch.level))
    serializer = JSONSerializer(
        placeholder=config.watch.placeholder, strict=config.watch.strict
    )
    return Tracer(
        sink=LoggerSink(lg, level),
        serializer=serializer,
        eager=config.watch.eager,
        depth=config.watch.depth,
        lg=lg,
    )


def watch(root: Any, label: str, tracer: Tracer | None = None) -> Any:
    """
    Wrap root for access tracing.

    Args:
        root: Object to trace
        label: Path label for root
        tracer: Tracer to use (the process-wide default when omitted)

    Returns:
        The proxy for root, or root unchanged for scalars and proxies
    """
    if tracer is None:
        tracer = default_tracer()
    return tracer.watch(root, label)


def is_watched(value: Any, tracer: Tracer | None = None) -> bool:
    """Check whether value is a proxy or an object wrapped by tracer."""
    if isinstance(value, Watched):
        return True
    if tracer is None:
        tracer = default_tracer()
    return tracer.is_watched(value)
