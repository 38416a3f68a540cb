"""Quoting and escaping rules for logfmt values."""

from __future__ import annotations

from typing import Any, Collection, TextIO

__all__ = [
    "MASK",
    "append_key_value",
    "escape_value",
    "needs_quoting",
    "unescape_value",
]

MASK = "***"

_SAFE_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._/@^+")

_ESCAPES = {
    "\t": "\\t",
    "\b": "\\b",
    "\n": "\\n",
    "\r": "\\r",
    "\f": "\\f",
    '"': '\\"',
    "\\": "\\\\",
}
_UNESCAPES = {escaped[1]: raw for raw, escaped in _ESCAPES.items()}


def needs_quoting(value: str) -> bool:
    """Return ``True`` if ``value`` holds a character outside the bare-token set."""

    return any(ch not in _SAFE_CHARS for ch in value)


def escape_value(value: str) -> str:
    """Backslash-escape control characters, quotes and backslashes."""

    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def unescape_value(value: str) -> str:
    """Reverse :func:`escape_value`.

    Unknown escape sequences and a dangling trailing backslash are kept as-is.
    """

    out: list[str] = []
    idx = 0
    length = len(value)
    while idx < length:
        ch = value[idx]
        if ch == "\\" and idx + 1 < length and value[idx + 1] in _UNESCAPES:
            out.append(_UNESCAPES[value[idx + 1]])
            idx += 2
            continue
        out.append(ch)
        idx += 1
    return "".join(out)


def append_key_value(
    buffer: TextIO,
    key: Any,
    value: Any,
    mask_passwords: Collection[str] | None = None,
) -> None:
    """Write ``key=value `` to ``buffer``.

    Empty keys are ignored and ``None`` values render as ``null``. Values of
    keys listed in ``mask_passwords`` are replaced by ``***`` before the quoting
    decision is taken.
    """

    if not key:
        return

    text = "null" if value is None else str(value)
    if mask_passwords and key in mask_passwords:
        text = MASK

    buffer.write(str(key))
    buffer.write("=")
    if needs_quoting(text):
        buffer.write('"')
        buffer.write(escape_value(text))
        buffer.write('"')
    else:
        buffer.write(text)
    buffer.write(" ")
