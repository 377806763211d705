"""
Delegating proxy used by the access tracer.

A Watched proxy forwards every operation to its target and reports reads,
writes, deletes and calls to the Tracer that created it. The proxy holds
no state besides its target, its TracedNode and the tracer; the target is
not modified by being wrapped.

Operators and the other special-method protocols (iteration with next(),
context managers, awaitables, numeric conversions) are forwarded only for
target types that implement them, through a proxy subclass built once per
target type. Their results come back as the target produces them.
"""

import math
import operator
import threading
import weakref
from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .tracer import Tracer


class TracedNode:
    """
    Tracer-side record of one wrapped object.

    The node refers to its target weakly when the target supports weak
    references, so registering an object never keeps it alive. Targets
    without weak reference support (lists, dicts, tuples) are held strongly
    and stay registered only while the node's keeper is alive.

    Attributes:
        path: Access path label, e.g. ``root.items.0``
    """

    __slots__ = ("path", "_target", "_keeper", "_proxy", "_on_release")

    def __init__(
        self,
        target: Any,
        path: str,
        on_release: Callable[[Any], None] | None = None,
    ) -> None:
        self.path = path
        self._keeper: weakref.ref | None = None
        self._proxy: weakref.ref | None = None
        self._on_release = on_release
        try:
            self._target: Callable[[], Any] = weakref.ref(target, on_release)
        except TypeError:
            self._target = lambda: target

    @property
    def target(self) -> Any:
        """The raw wrapped object (None once a weakly held target is gone)."""
        return self._target()

    @property
    def weak(self) -> bool:
        return isinstance(self._target, weakref.ref)

    @property
    def proxy(self) -> "Watched | None":
        """The live proxy handed out for target, if any."""
        return None if self._proxy is None else self._proxy()

    @proxy.setter
    def proxy(self, proxy: "Watched") -> None:
        self._proxy = weakref.ref(proxy)

    def anchor(self, keeper: Any) -> None:
        """Release a strongly held target once keeper is collected."""
        if not self.weak:
            self._keeper = weakref.ref(keeper, self._on_release)

    def keeper(self) -> Any:
        """Object whose lifetime bounds this node's registration."""
        if self.weak:
            return self.target
        return None if self._keeper is None else self._keeper()


class Watched:
    """
    Transparent proxy reporting attribute and item access to a Tracer.

    ``isinstance(proxy, TargetClass)`` holds because ``__class__`` reports
    the target's class.
    """

    __slots__ = ("__node", "__target", "__tracer", "__weakref__")

    def __init__(self, node: TracedNode, tracer: "Tracer") -> None:
        object.__setattr__(self, "_Watched__node", node)
        object.__setattr__(self, "_Watched__target", node.target)
        object.__setattr__(self, "_Watched__tracer", tracer)

    def _get_class(self) -> type:
        return type(self.__target)

    __class__ = property(_get_class)  # type: ignore[assignment]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_Watched__"):
            # Slot not initialized yet (copy, unpickling)
            raise AttributeError(name)
        return self.__tracer.on_read(
            self.__node, name, getattr(self.__target, name)
        )

    def __setattr__(self, name: str, value: Any) -> None:
        node = self.__node
        raw = self.__tracer.on_write(node, name, value)
        setattr(self.__target, name, raw)
        self.__tracer.watch(raw, f"{node.path}.{name}", owner=node)

    def __delattr__(self, name: str) -> None:
        self.__tracer.on_delete(self.__node, name)
        delattr(self.__target, name)

    def __getitem__(self, key: Any) -> Any:
        return self.__tracer.on_read(self.__node, key, self.__target[key])

    def __setitem__(self, key: Any, value: Any) -> None:
        node = self.__node
        raw = self.__tracer.on_write(node, key, value)
        self.__target[key] = raw
        self.__tracer.watch(raw, f"{node.path}.{key}", owner=node)

    def __delitem__(self, key: Any) -> None:
        self.__tracer.on_delete(self.__node, key)
        del self.__target[key]

    def __iter__(self) -> Iterator[Any]:
        node = self.__node
        target = self.__target
        if isinstance(target, Mapping):
            yield from target
            return
        for i, item in enumerate(target):
            yield self.__tracer.wrap(item, f"{node.path}.{i}", owner=node)

    def __len__(self) -> int:
        return len(self.__target)

    def __contains__(self, item: Any) -> bool:
        return unwrap(item) in self.__target

    def __bool__(self) -> bool:
        return bool(self.__target)

    def __eq__(self, other: object) -> bool:
        return bool(self.__target == unwrap(other))

    def __lt__(self, other: Any) -> Any:
        return self.__target < unwrap(other)

    def __le__(self, other: Any) -> Any:
        return self.__target <= unwrap(other)

    def __gt__(self, other: Any) -> Any:
        return self.__target > unwrap(other)

    def __ge__(self, other: Any) -> Any:
        return self.__target >= unwrap(other)

    def __hash__(self) -> int:
        return hash(self.__target)

    def __format__(self, spec: str) -> str:
        return format(self.__target, spec)

    def __dir__(self) -> list[str]:
        return dir(self.__target)

    def __str__(self) -> str:
        return str(self.__target)

    def __repr__(self) -> str:
        return f"<Watched {self.__node.path}: {self.__target!r}>"


class WatchedCallable(Watched):
    """Watched proxy for callable targets; calls are reported too."""

    __slots__ = ()

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        node = object.__getattribute__(self, "_Watched__node")
        tracer = object.__getattribute__(self, "_Watched__tracer")
        return tracer.on_call(node, args, kwargs)


# =============================================================================
# Protocol forwarding
# =============================================================================

# Binary operators by dunder stem; reflected and in-place forms derive from these
_BINARY: dict[str, Callable[[Any, Any], Any]] = {
    "add": operator.add,
    "sub": operator.sub,
    "mul": operator.mul,
    "matmul": operator.matmul,
    "truediv": operator.truediv,
    "floordiv": operator.floordiv,
    "mod": operator.mod,
    "divmod": divmod,
    "pow": operator.pow,
    "lshift": operator.lshift,
    "rshift": operator.rshift,
    "and": operator.and_,
    "xor": operator.xor,
    "or": operator.or_,
}

_UNARY: dict[str, Callable[[Any], Any]] = {
    "__neg__": operator.neg,
    "__pos__": operator.pos,
    "__abs__": abs,
    "__invert__": operator.invert,
    "__int__": int,
    "__float__": float,
    "__complex__": complex,
    "__index__": operator.index,
    "__bytes__": bytes,
    "__trunc__": math.trunc,
    "__floor__": math.floor,
    "__ceil__": math.ceil,
}

# Protocol methods called on the target; True means a result that is the
# target itself is replaced by the proxy
_METHODS: dict[str, bool] = {
    "__next__": False,
    "__reversed__": False,
    "__enter__": True,
    "__exit__": False,
    "__await__": False,
    "__aiter__": True,
    "__anext__": False,
    "__aenter__": False,
    "__aexit__": False,
}


def _target(proxy: Watched) -> Any:
    return object.__getattribute__(proxy, "_Watched__target")


def _binary(op: Callable[[Any, Any], Any]) -> Callable[..., Any]:
    def forward(self: Watched, other: Any) -> Any:
        return op(_target(self), unwrap(other))

    return forward


def _reflected(op: Callable[[Any, Any], Any]) -> Callable[..., Any]:
    def forward(self: Watched, other: Any) -> Any:
        return op(unwrap(other), _target(self))

    return forward


def _inplace(op: Callable[[Any, Any], Any]) -> Callable[..., Any]:
    def forward(self: Watched, other: Any) -> Any:
        target = _target(self)
        result = op(target, unwrap(other))
        return self if result is target else result

    return forward


def _unary(fn: Callable[[Any], Any]) -> Callable[..., Any]:
    def forward(self: Watched) -> Any:
        return fn(_target(self))

    return forward


def _round(self: Watched, ndigits: int | None = None) -> Any:
    target = _target(self)
    return round(target) if ndigits is None else round(target, ndigits)


def _method(name: str, keep_proxy: bool) -> Callable[..., Any]:
    def forward(self: Watched, *args: Any) -> Any:
        target = _target(self)
        result = getattr(target, name)(*args)
        return self if keep_proxy and result is target else result

    return forward


def _implements(cls: type, name: str) -> bool:
    return getattr(cls, name, None) is not None


def _protocol_methods(cls: type) -> dict[str, Callable[..., Any]]:
    """Forwarders for the special methods instances of cls support."""
    methods: dict[str, Callable[..., Any]] = {}
    for stem, op in _BINARY.items():
        forward, reflected, inplace = f"__{stem}__", f"__r{stem}__", f"__i{stem}__"
        if _implements(cls, forward):
            methods[forward] = _binary(op)
        if _implements(cls, forward) or _implements(cls, reflected):
            methods[reflected] = _reflected(op)
        if _implements(cls, inplace):
            methods[inplace] = _inplace(getattr(operator, f"i{stem}"))

    for name, fn in _UNARY.items():
        if _implements(cls, name):
            methods[name] = _unary(fn)
    if _implements(cls, "__round__"):
        methods["__round__"] = _round

    for name, keep_proxy in _METHODS.items():
        if _implements(cls, name):
            methods[name] = _method(name, keep_proxy)
    return methods


_proxy_types: "weakref.WeakKeyDictionary[type, type[Watched]]" = (
    weakref.WeakKeyDictionary()
)
_proxy_types_lock = threading.Lock()


def proxy_type(target: Any) -> type[Watched]:
    """
    Pick the proxy class matching target's capabilities.

    Callable targets get a WatchedCallable. Target types implementing
    operators or other special-method protocols get a subclass forwarding
    exactly those, built on first use and cached per type.
    """
    cls = type(target)
    with _proxy_types_lock:
        found = _proxy_types.get(cls)
        if found is None:
            base = WatchedCallable if callable(target) else Watched
            methods = _protocol_methods(cls)
            if methods:
                namespace = {"__slots__": (), "__module__": __name__, **methods}
                found = type(base.__name__, (base,), namespace)
            else:
                found = base
            _proxy_types[cls] = found
    return found


def unwrap(value: Any) -> Any:
    """
    Return the raw object behind a proxy, or value itself if not a proxy.

    Args:
        value: Any value, possibly a Watched proxy

    Returns:
        The underlying target
    """
    if isinstance(value, Watched):
        return _target(value)
    return value


def node_of(value: Any) -> TracedNode | None:
    """Return the TracedNode behind a proxy, or None for raw values."""
    if isinstance(value, Watched):
        node: TracedNode = object.__getattribute__(value, "_Watched__node")
        return node
    return None
