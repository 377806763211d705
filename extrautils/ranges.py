"""
Numeric range helpers.

    list(till(4, 7))    -> [4, 5, 6, 7]
    list(before(4, 7))  -> [4, 5, 6]
"""

from collections.abc import Iterator


def _check_step(step: float) -> None:
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")


def till(start: float, end: float, step: float = 1) -> Iterator[float]:
    """
    Yield numbers from start up to and including end.

    Equivalent to ``for (i = start; i <= end; i += step)``.

    Raises:
        ValueError: If step is not positive
    """
    _check_step(step)
    i = start
    while i <= end:
        yield i
        i += step


def before(start: float, end: float, step: float = 1) -> Iterator[float]:
    """
    Yield numbers from start up to but excluding end.

    Raises:
        ValueError: If step is not positive
    """
    _check_step(step)
    i = start
    while i < end:
        yield i
        i += step


def num_length(n: int, base: int = 10) -> int:
    """
    Count the digits of an integer written in base, sign excluded.

    Matches the length of the number written out in that base, so
    ``num_length(255, 16) == len("ff")``. Zero has one digit.
    """
    if base < 2:
        raise ValueError(f"base must be at least 2, got {base}")
    n = abs(int(n))
    digits = 1
    while n >= base:
        n //= base
        digits += 1
    return digits
