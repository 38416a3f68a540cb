"""Markers carrying extra key/value pairs and field callbacks.

A :class:`LogFmtMarker` travels with a single log call. It contributes its
key/value pairs to the ``custom`` section of the line, may chain other markers
through references, and may register callbacks that rewrite the message or
error text before it is written::

    base = LogFmtMarker.with_("node", "n-1")
    marker = LogFmtMarker.with_("ip", "10.0.0.1", name="request")
    marker.add(base)
    logger.info("connected", extra={"markers": [marker]})

Plain :class:`Marker` objects have a name and references only. They are
traversed for references but never contribute pairs, and the same holds for
any foreign object found in a marker list.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List

__all__ = [
    "ApplyCallbackFor",
    "CONFIDENTIAL",
    "Callback",
    "KeyValue",
    "LogFmtMarker",
    "Marker",
    "confidential",
    "name_of",
    "references_of",
    "traverse",
]

CONFIDENTIAL = "CONFIDENTIAL"
DEFAULT_MARKER_NAME = "LOGFMT"


class ApplyCallbackFor(str, Enum):
    """Fields whose text may be rewritten by a marker callback."""

    MESSAGE = "message"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class KeyValue:
    key: str
    value: Any


Callback = Callable[[str, List[KeyValue]], str]

# Marker pairs whose comparison is in progress on this thread.
_comparing = threading.local()


def _references_equal(left: Any, right: Any) -> bool:
    """Compare the references of two markers, cutting cycles.

    A pair met again while it is still being compared counts as equal.
    """

    active = getattr(_comparing, "pairs", None)
    if active is None:
        active = _comparing.pairs = set()
    pair = (id(left), id(right))
    if pair in active:
        return True
    active.add(pair)
    try:
        return list(left._references) == list(right._references)
    finally:
        active.discard(pair)


def _check_param(obj: Any, msg: str) -> None:
    if obj is None or obj == "":
        raise ValueError(msg)


def references_of(marker: Any) -> List[Any]:
    """Return the references of ``marker``, or an empty list for foreign objects."""

    if isinstance(marker, Marker):
        return list(marker.references)
    refs = getattr(marker, "references", None)
    if refs is None or isinstance(refs, (str, bytes)):
        return []
    try:
        return list(refs)
    except TypeError:
        return []


def name_of(marker: Any) -> str | None:
    name = getattr(marker, "name", None)
    return name if isinstance(name, str) else None


class Marker:
    """Named marker that can reference other markers."""

    def __init__(self, name: str) -> None:
        _check_param(name, "Invalid marker name")
        self._name = name
        self._references: List[Any] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def references(self) -> List[Any]:
        return self._references

    def add(self, reference: Any) -> None:
        """Chain ``reference`` onto this marker."""

        _check_param(reference, "Attempted to add invalid marker reference")
        if name_of(reference) is None:
            raise ValueError("Attempted to add invalid marker reference")
        self._references.append(reference)

    def remove(self, reference: Any) -> bool:
        for idx, existing in enumerate(self._references):
            if existing is reference:
                del self._references[idx]
                return True
        return False

    def has_references(self) -> bool:
        return bool(self._references)

    def contains(self, name: str) -> bool:
        """Return ``True`` if a marker called ``name`` is reachable from here."""

        return _contains(self, name, set())

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._references))

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._name == other._name and _references_equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        refs = ", ".join(name_of(ref) or repr(ref) for ref in self._references)
        return f"Marker(name={self._name!r}, refs=[{refs}])"


def _contains(marker: Any, name: str, path: set[int]) -> bool:
    path.add(id(marker))
    try:
        for ref in references_of(marker):
            if id(ref) in path:
                continue
            if name_of(ref) == name or _contains(ref, name, path):
                return True
        return False
    finally:
        path.discard(id(marker))


def confidential() -> Marker:
    """Return a fresh marker enabling credential redaction of the message."""

    return Marker(CONFIDENTIAL)


class LogFmtMarker(Marker):
    """Marker carrying ordered key/value pairs and field callbacks."""

    def __init__(self, name: str = DEFAULT_MARKER_NAME) -> None:
        super().__init__(name)
        self._key_values: List[KeyValue] = []
        self._callbacks: Dict[ApplyCallbackFor, Callback] = {}

    # -- Factories ----------------------------------------------------------
    @classmethod
    def with_(cls, key: Any, value: Any, *, name: str = DEFAULT_MARKER_NAME) -> "LogFmtMarker":
        return cls(name).add_key_value(key, value)

    @classmethod
    def customized(
        cls,
        apply_for: ApplyCallbackFor,
        callback: Callback,
        *,
        name: str = DEFAULT_MARKER_NAME,
    ) -> "LogFmtMarker":
        return cls(name).add_callback(apply_for, callback)

    # -- Building -----------------------------------------------------------
    @property
    def key_values(self) -> List[KeyValue]:
        return self._key_values

    def add_key_value(self, key: Any, value: Any) -> "LogFmtMarker":
        if key is not None and key != "":
            self._key_values.append(KeyValue(str(key), value))
        return self

    and_ = add_key_value

    def add_reference(self, reference: Any) -> "LogFmtMarker":
        self.add(reference)
        return self

    def add_callback(self, apply_for: ApplyCallbackFor | None, callback: Callback) -> "LogFmtMarker":
        """Register ``callback`` for ``apply_for``, replacing any previous one."""

        if apply_for is not None:
            self._callbacks[ApplyCallbackFor(apply_for)] = callback
        return self

    # -- Reading ------------------------------------------------------------
    def has_callbacks(self) -> bool:
        return bool(self._callbacks)

    def apply_callback(self, apply_for: ApplyCallbackFor, text: str) -> str:
        """Run the callback registered for ``apply_for`` on ``text``.

        The callback receives the live key/value list of this marker and may
        append new pairs to it.
        """

        callback = self._callbacks.get(apply_for)
        if callback is None:
            return text
        return callback(text, self._key_values)

    def defined_key_values(self) -> List[KeyValue]:
        return list(self._key_values)

    def traverse(self, visitor: Callable[[str, Any], None]) -> None:
        """Visit every reachable pair, references first, then this marker's own."""

        _traverse(self, visitor, set())

    def items(self) -> List[tuple[str, Any]]:
        collected: List[tuple[str, Any]] = []
        self.traverse(lambda key, value: collected.append((key, value)))
        return collected

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if not isinstance(other, LogFmtMarker):
            return NotImplemented
        return (
            self.name == other.name
            and self._key_values == other._key_values
            and _references_equal(self, other)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        pairs = " ".join(f"{kv.key}={kv.value}" for kv in self._key_values)
        refs = ", ".join(name_of(ref) or repr(ref) for ref in self.references)
        return f"LogFmtMarker(name={self.name!r}, keyVal=[{pairs}], refs=[{refs}])"


def _traverse(marker: Any, visitor: Callable[[str, Any], None], path: set[int]) -> None:
    path.add(id(marker))
    try:
        for ref in references_of(marker):
            if id(ref) not in path:
                _traverse(ref, visitor, path)
        if isinstance(marker, LogFmtMarker):
            for kv in marker.key_values:
                visitor(kv.key, kv.value)
    finally:
        path.discard(id(marker))


def traverse(marker: Any, visitor: Callable[[str, Any], None]) -> None:
    """Traverse any marker, carrier or not."""

    _traverse(marker, visitor, set())
