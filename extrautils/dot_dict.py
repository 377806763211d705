"""
Dictionary-like object with attribute access and dotted-path lookup.

DotDict backs the configuration object: nested dicts become nested DotDicts,
so ``config.watch.eager`` and ``config.get("watch.eager")`` both work.
"""

import builtins
from collections.abc import ItemsView, Iterator, KeysView, ValuesView
from typing import Any


class DotDict:
    """
    Dictionary-like object with attribute-style access and nested structure support.

    Nested dictionaries are converted to DotDict instances on assignment.
    """

    # Keys that would shadow methods and are not allowed
    _RESERVED_KEYS = frozenset({"set", "clear", "dict", "to_dict", "get", "has"})

    def __init__(self, **kwargs: Any) -> None:
        self.set(**kwargs)

    def set(self, **kwargs: Any) -> "DotDict":
        """
        Set multiple key-value pairs, with automatic nested object creation.

        Args:
            **kwargs: Key-value pairs to set

        Returns:
            self: For method chaining
        """
        for key, val in kwargs.items():
            self._set_item(key, val)
        return self

    def _set_item(self, key: Any, val: Any) -> None:
        """
        Set a single key-value pair with automatic nested object creation.

        Raises:
            ValueError: If key would shadow a method name
        """
        if not isinstance(key, str):
            key = str(key)

        if key in self._RESERVED_KEYS:
            raise ValueError(
                f"Key '{key}' is reserved and cannot be used (would shadow method)"
            )

        if isinstance(val, dict):
            setattr(self, key, DotDict(**val))
        elif isinstance(val, list):
            setattr(self, key, list(map(self._map_entry, val)))
        else:
            setattr(self, key, val)

    @staticmethod
    def _map_entry(entry: Any) -> Any:
        if isinstance(entry, dict):
            return DotDict(**entry)
        return entry

    def clear(self) -> None:
        """Remove all public keys."""
        for k in [k for k in self.__dict__ if not k.startswith("_")]:
            delattr(self, k)

    def dict(self) -> dict[str, Any]:
        """
        Convert the object to a dictionary, one nesting level of DotDicts at a time.

        Private attributes (leading underscore) are not included.
        """
        result = {}
        for key, val in self._public().items():
            result[key] = val.dict() if isinstance(val, DotDict) else val
        return result

    def to_dict(self) -> builtins.dict[str, Any]:
        """
        Recursively convert DotDict and all nested structures to plain dicts.

        Returns:
            dict: Fully converted dictionary with no DotDict instances
        """
        result: dict[str, Any] = {}
        for key, val in self._public().items():
            if isinstance(val, DotDict):
                result[key] = val.to_dict()
            elif isinstance(val, list):
                result[key] = [
                    item.to_dict() if isinstance(item, DotDict) else item
                    for item in val
                ]
            else:
                result[key] = val
        return result

    def _public(self) -> builtins.dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    def keys(self) -> KeysView[str]:
        return self._public().keys()

    def values(self) -> ValuesView[Any]:
        return self._public().values()

    def items(self) -> ItemsView[str, Any]:
        return self._public().items()

    def __iter__(self) -> Iterator[str]:
        return iter(self._public())

    def __contains__(self, key: Any) -> bool:
        return key in self._public()

    def __getitem__(self, key: str) -> Any:
        """
        Get value by key with dictionary-style access.

        Raises:
            KeyError: If key is not found
        """
        if key not in self:
            raise KeyError(key)
        return getattr(self, key)

    def __setitem__(self, key: str, val: Any) -> None:
        self._set_item(key, val)

    def __len__(self) -> int:
        return len(self._public())

    def __str__(self) -> str:
        return str(self.dict())

    def __repr__(self) -> str:
        return f"DotDict({self.dict()!r})"

    def has(self, path: str) -> bool:
        """
        Check if a dot-separated path exists in the object.

        Args:
            path (str): Dot-separated path to check (e.g., "watch.eager")

        Returns:
            bool: True if the path exists
        """
        cur: Any = self
        for item in (p for p in path.split(".") if p):
            if not isinstance(cur, DotDict) or item not in cur:
                return False
            cur = cur[item]
        return bool(path)

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get value by dot-separated path.

        Follows dict.get() semantics: returns default if path not found.

        Args:
            path (str): Dot-separated path to get (e.g., "watch.eager")
            default: Value returned when the path is missing

        Returns:
            Value: Found value or default
        """
        if not self.has(path):
            return default
        cur: Any = self
        for item in (p for p in path.split(".") if p):
            cur = cur[item]
        return cur
