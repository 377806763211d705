"""
Byte buffer helpers working on anything that supports the buffer protocol.
"""

from typing import Any


def concat(*parts: Any) -> bytes | bytearray:
    """
    Concatenate buffers into one.

    The result is a bytearray when the first part is one, bytes otherwise.
    Typed buffers (array.array, memoryview) contribute their raw bytes.
    """
    joined = b"".join(memoryview(p).cast("B") for p in parts)
    if parts and isinstance(parts[0], bytearray):
        return bytearray(joined)
    return joined


def starts_with(data: Any, prefix: Any) -> bool:
    """Check whether the raw bytes of data begin with the raw bytes of prefix."""
    head = memoryview(prefix).cast("B")
    body = memoryview(data).cast("B")
    if len(head) > len(body):
        return False
    return body[: len(head)] == head
