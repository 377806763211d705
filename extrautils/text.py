"""
Character escaping helpers.

Characters are escaped as ``\\xHH``, ``\\uHHHH`` or ``\\u{H...}`` depending
on their code point. Which characters are touched is decided by a needle:

- a string: the set of its characters
- a compiled regular expression: characters it matches
- a callable: characters for which it returns true

With ``except_=True`` (the default) every character NOT selected by the
needle is processed; with ``except_=False`` only the selected ones are.
"""

import re
from collections.abc import Callable, Sequence
from typing import Any

Needle = str | re.Pattern[str] | Callable[[str], bool]

_ESCAPE_RE = re.compile(
    r"\\x([\da-f]{2})|\\u([\da-f]{4})|\\u\{([\da-f]+)\}", re.IGNORECASE
)


def escape_char(ch: str) -> str:
    """
    Escape a single character by code point.

    ``"A"`` becomes ``\\x41``, ``"\u20ac"`` becomes ``\\u20ac`` and code
    points above U+FFFF use the braced form.
    """
    code = format(ord(ch), "x")
    if len(code) <= 2:
        return f"\\x{code.zfill(2)}"
    if len(code) <= 4:
        return f"\\u{code.zfill(4)}"
    return f"\\u{{{code}}}"


def char_filter(needle: Needle = "", except_: bool = True) -> Callable[[str], bool]:
    """
    Build a predicate telling whether a character should be processed.

    Args:
        needle: Characters, compiled regex or predicate selecting characters
        except_: Process characters the needle does NOT select

    Returns:
        Callable taking one character
    """
    match: Callable[[str], Any]
    if callable(needle) and not isinstance(needle, re.Pattern):
        match = needle
    elif isinstance(needle, re.Pattern):
        match = needle.search
    else:
        chars = str(needle)
        match = chars.__contains__

    def _filter(ch: str) -> bool:
        return bool(match(ch)) != except_

    return _filter


def escape(s: str, needle: Needle = "", except_: bool = True) -> str:
    """
    Escape characters of s selected by needle and except_.

    Line breaks are never escaped.

    Example: with needle ``"ab"``, ``"a-b"`` becomes ``a\\x2db``.
    """
    keep = char_filter(needle, except_)

    def _encode(m: re.Match[str]) -> str:
        ch = m.group(0)
        return escape_char(ch) if keep(ch) else ch

    return re.sub(r".", _encode, s)


def unescape(s: str, needle: Needle = "", except_: bool = True) -> str:
    """
    Turn escape sequences of s back into characters.

    A sequence is decoded only when its character is selected by needle and
    except_; other sequences are left as written.
    """
    keep = char_filter(needle, except_)

    def _decode(m: re.Match[str]) -> str:
        code = next(g for g in m.groups() if g is not None)
        ch = chr(int(code, 16))
        return ch if keep(ch) else m.group(0)

    return _ESCAPE_RE.sub(_decode, s)


def replace_all_by_list(
    s: str,
    needles: str | Sequence[str],
    replacer: str | Sequence[str] | Callable[[str], str],
    split_replacer: bool = True,
) -> str:
    """
    Replace every needle in s, in order.

    A string of needles is split into characters. A multi-character string
    replacer is split too when split_replacer is set, pairing replacements
    with needles by position; otherwise one replacer is used for all needles.
    A callable replacer receives the matched needle.

    Example:
        >>> replace_all_by_list("a-b_c", "-_", "+=")
        'a+b=c'
    """
    if isinstance(needles, str):
        needles = list(needles)

    if isinstance(replacer, str) and len(replacer) > 1 and split_replacer:
        replacer = list(replacer)

    for i, needle in enumerate(needles):
        if callable(replacer):
            fn = replacer
            s = re.sub(re.escape(needle), lambda m: fn(m.group(0)), s)
        elif isinstance(replacer, str):
            s = s.replace(needle, replacer)
        else:
            s = s.replace(needle, replacer[i])
    return s
