"""Mapped diagnostic context and the context-aware logging adapter."""

from __future__ import annotations

import contextlib
import logging
from contextvars import ContextVar
from typing import Any, Dict, Iterator, List, Mapping, MutableMapping, Tuple

__all__ = [
    "ContextAdapter",
    "ContextFilter",
    "clear",
    "ensure_context_filter",
    "get",
    "inject_context",
    "mdc_scope",
    "put",
    "remove",
    "snapshot",
]

# Values are replaced, never mutated in place, so copies handed out stay stable.
_mdc: ContextVar[Mapping[str, Any]] = ContextVar("pylogfmt_mdc", default={})


def put(key: str, value: Any) -> None:
    """Set ``key`` in the MDC of the current context."""

    if not key:
        return
    current = dict(_mdc.get())
    current[key] = value
    _mdc.set(current)


def get(key: str, default: Any = None) -> Any:
    return _mdc.get().get(key, default)


def remove(key: str) -> None:
    current = dict(_mdc.get())
    current.pop(key, None)
    _mdc.set(current)


def clear() -> None:
    _mdc.set({})


def snapshot() -> Dict[str, Any]:
    """Return a copy of the MDC of the current context."""

    return dict(_mdc.get())


@contextlib.contextmanager
def mdc_scope(**values: Any) -> Iterator[None]:
    """Temporarily add ``values`` to the MDC."""

    current = dict(_mdc.get())
    current.update(values)
    token = _mdc.set(current)
    try:
        yield
    finally:
        _mdc.reset(token)


class ContextFilter(logging.Filter):
    """Snapshot the MDC onto records at log time."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if "mdc" not in record.__dict__:
            record.__dict__["mdc"] = snapshot()
        return True


def _as_marker_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter carrying persistent markers and context values.

    Markers given at construction are attached to every record; per-call
    ``marker=``/``markers=`` keyword arguments are appended after them. Context
    values are merged over the current MDC.
    """

    def __init__(
        self,
        logger: logging.Logger,
        *,
        markers: List[Any] | None = None,
        base_context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(logger, {})
        self._markers: List[Any] = list(markers or [])
        self._context: Dict[str, Any] = dict(base_context or {})

    # -- Context management -------------------------------------------------
    def add_context(self, **kwargs: Any) -> None:
        self._context.update(kwargs)

    # -- LoggingAdapter API -------------------------------------------------
    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        call_markers = _as_marker_list(kwargs.pop("marker", None)) + _as_marker_list(kwargs.pop("markers", None))
        call_extra = kwargs.get("extra")
        merged: Dict[str, Any] = dict(call_extra) if isinstance(call_extra, Mapping) else {}

        extra_markers = _as_marker_list(merged.get("markers"))
        markers = [*self._markers, *extra_markers, *call_markers]
        if markers:
            merged["markers"] = markers

        mdc = snapshot()
        mdc.update(self._context)
        call_mdc = merged.get("mdc")
        if isinstance(call_mdc, Mapping):
            mdc.update(call_mdc)
        merged["mdc"] = mdc

        kwargs["extra"] = merged
        return msg, kwargs


def ensure_context_filter(logger: logging.Logger) -> None:
    """Attach the :class:`ContextFilter` to ``logger`` if missing."""

    for existing in logger.filters:
        if isinstance(existing, ContextFilter):
            return
    logger.addFilter(ContextFilter())


def inject_context(
    logger: logging.Logger,
    *,
    markers: List[Any] | None = None,
    base_context: Mapping[str, Any] | None = None,
) -> ContextAdapter:
    """Return a :class:`ContextAdapter` attached to ``logger`` with filter."""

    ensure_context_filter(logger)
    return ContextAdapter(logger, markers=markers, base_context=base_context)
