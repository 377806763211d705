"""
Property maps and merging.

A PropertyMap is the name -> value mapping every other module passes around:
class members, default attributes and own properties of arbitrary objects.
This module also holds the merge helpers that fold maps together and write
them onto targets under an overwrite policy.
"""

from collections.abc import (
    Callable,
    Iterable,
    Iterator,
    Mapping,
    MutableMapping,
    Sequence,
)
from typing import Any

from .exceptions import InjectionError


class PropertyMap(MutableMapping[str, Any]):
    """
    Mapping of member names to values.

    Behaves like a plain dict with unique string keys and adds `has()` for
    explicit key checks. Insertion order is kept but carries no meaning.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._data: dict[str, Any] = {}
        if data is not None:
            self.update(data)
        if kwargs:
            self.update(kwargs)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, val: Any) -> None:
        self._data[str(key)] = val

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._data) == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"PropertyMap({self._data!r})"

    def has(self, key: str) -> bool:
        """
        Check if a key exists in the map.

        Args:
            key: Key to check for existence

        Returns:
            bool: True if key exists, False otherwise
        """
        return key in self._data

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow plain-dict copy."""
        return dict(self._data)


def merge(maps: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> PropertyMap:
    """
    Fold one map or an ordered list of maps into a single PropertyMap.

    Maps are applied left to right, so later maps win on key collision.

    Args:
        maps: A single mapping or a sequence of mappings

    Returns:
        PropertyMap: New map holding the merged entries

    Example:
        >>> merge([{"a": 1, "b": 2}, {"b": 3, "c": 4}]).to_dict()
        {'a': 1, 'b': 3, 'c': 4}
    """
    if isinstance(maps, Mapping):
        maps = [maps]

    result = PropertyMap()
    for m in maps:
        result.update(m)
    return result


def _slot_names(cls: type) -> Iterator[str]:
    """Yield every __slots__ entry declared along the MRO."""
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name not in ("__dict__", "__weakref__"):
                yield name


def own_properties(obj: Any, excluding: Iterable[str] = ()) -> PropertyMap:
    """
    Collect the own properties of a class or an instance.

    For classes this is the class's own namespace. For instances it is the
    instance ``__dict__`` plus any ``__slots__`` that currently hold a value.
    Inherited members are never included.

    Args:
        obj: Class or instance to inspect
        excluding: Names to leave out

    Returns:
        PropertyMap: Own properties of obj
    """
    skip = frozenset(excluding)
    result = PropertyMap()

    if isinstance(obj, type):
        for key, val in vars(obj).items():
            if key not in skip:
                result[key] = val
        return result

    for key, val in getattr(obj, "__dict__", {}).items():
        if key not in skip:
            result[key] = val

    for name in _slot_names(type(obj)):
        if name in skip or name in result:
            continue
        try:
            result[name] = object.__getattribute__(obj, name)
        except AttributeError:
            # Slot declared but never assigned
            continue

    return result


def has_own(target: Any, key: str) -> bool:
    """
    Check whether target owns key directly (not through its class or bases).

    Args:
        target: Mapping, class or instance
        key: Name to check

    Returns:
        bool: True if key is an own key of target
    """
    if isinstance(target, Mapping):
        return key in target
    if isinstance(target, type):
        return key in vars(target)
    if key in getattr(target, "__dict__", {}):
        return True
    if key in set(_slot_names(type(target))):
        try:
            object.__getattribute__(target, key)
            return True
        except AttributeError:
            return False
    return False


def _write(target: Any, key: str, value: Any) -> None:
    """Store one entry on target, item-style for mappings."""
    if isinstance(target, MutableMapping):
        target[key] = value
        return
    try:
        setattr(target, key, value)
    except (TypeError, AttributeError) as e:
        raise InjectionError(
            f"cannot set attribute '{key}'",
            target=getattr(target, "__qualname__", type(target).__qualname__),
        ) from e


def apply(
    target: Any,
    props: Mapping[str, Any],
    overwrite: bool = False,
    lg: Any | None = None,
) -> list[str]:
    """
    Write every entry of props onto target.

    A key is written when target has no own key of that name, or when
    overwrite is set. Existing keys are never deleted.

    Args:
        target: Mutable mapping, class or instance receiving the entries
        props: Entries to write
        overwrite: Replace keys target already owns
        lg: Logger for per-key trace output (optional)

    Returns:
        list[str]: Keys that were written, in iteration order

    Raises:
        InjectionError: If target rejects an attribute assignment
    """
    written = []
    for key, value in props.items():
        if not overwrite and has_own(target, key):
            continue
        _write(target, key, value)
        written.append(key)
        if lg:
            lg.trace("property written", extra={"key": key})
    return written


def map_values(
    props: Mapping[str, Any], fn: Callable[[Any, str], Any]
) -> PropertyMap:
    """
    Build a new map by applying fn(value, key) to every entry.

    Args:
        props: Source mapping
        fn: Callable receiving (value, key)

    Returns:
        PropertyMap: Mapped entries under the same keys
    """
    return PropertyMap({key: fn(val, key) for key, val in props.items()})
