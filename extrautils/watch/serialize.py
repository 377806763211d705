"""
Value serialization for trace lines.

Values are rendered as JSON text. Objects without a JSON form fall back to
their own ``__dict__``, callables render as ``<function name>``, and
anything that still cannot be encoded (cycles, opaque types) becomes a
placeholder so that logging never aborts the traced operation.
"""

import json
from collections.abc import Callable
from typing import Any

from ..exceptions import SerializationError
from .proxy import Watched, unwrap

DEFAULT_PLACEHOLDER = "<unserializable {type}>"

Serializer = Callable[[Any], str]


def _callable_label(value: Any) -> str:
    kind = "class" if isinstance(value, type) else "function"
    name = getattr(value, "__qualname__", None) or getattr(
        value, "__name__", type(value).__qualname__
    )
    return f"<{kind} {name}>"


class JSONSerializer:
    """
    Render values as compact JSON for log lines.

    Args:
        placeholder: Format string used when a value cannot be encoded;
            ``{type}`` expands to the value's type name
        strict: Raise SerializationError instead of using the placeholder
        sort_keys: Sort mapping keys in the output
    """

    def __init__(
        self,
        placeholder: str = DEFAULT_PLACEHOLDER,
        strict: bool = False,
        sort_keys: bool = False,
    ) -> None:
        self.placeholder = placeholder
        self.strict = strict
        self.sort_keys = sort_keys

    def __call__(self, value: Any) -> str:
        value = unwrap(value)
        if callable(value):
            return _callable_label(value)

        try:
            return json.dumps(
                value,
                default=self._default,
                sort_keys=self.sort_keys,
                ensure_ascii=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            if self.strict:
                raise SerializationError(
                    "value cannot be serialized", type=type(value).__name__
                ) from e
            return self.placeholder.format(type=type(value).__name__)

    def _default(self, o: Any) -> Any:
        """Fallback encoder for values json cannot handle natively."""
        if isinstance(o, Watched):
            return unwrap(o)
        if isinstance(o, (set, frozenset)):
            return list(o)
        if isinstance(o, (bytes, bytearray)):
            return o.decode("utf-8", errors="replace")
        if callable(o):
            return _callable_label(o)
        if hasattr(o, "__dict__"):
            return vars(o)
        raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")
