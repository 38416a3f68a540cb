"""Field appenders writing one section of a logfmt line each.

Every appender has the signature ``(buffer, event, state) -> None`` and only
writes complete ``key=value `` tokens through :func:`append_key_value`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import reduce
from io import StringIO
from typing import TYPE_CHECKING, Any, Callable, List, Mapping

from ..markers import ApplyCallbackFor, LogFmtMarker, traverse
from .escaping import append_key_value
from .event import Level, LogEvent
from .keys import NativeKey, is_native_key
from .redaction import obfuscate_message

if TYPE_CHECKING:
    from .state import LayoutState

__all__ = [
    "Appender",
    "DEFAULT_TIME_FORMAT",
    "append_custom",
    "append_error",
    "append_level",
    "append_mdc",
    "append_message",
    "append_module",
    "append_package",
    "append_thread",
    "append_time",
    "apply_callbacks",
]

Appender = Callable[[StringIO, LogEvent, "LayoutState"], None]

DEFAULT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _markers_of(event: LogEvent) -> List[Any]:
    markers = event.markers
    if isinstance(markers, (list, tuple)):
        return [marker for marker in markers if marker is not None]
    return []


def _caller_class_name(event: LogEvent) -> str | None:
    caller_data = event.caller_data
    if isinstance(caller_data, (list, tuple)) and caller_data:
        return str(caller_data[0])
    return None


def apply_callbacks(markers: List[Any], text: str, apply_for: ApplyCallbackFor) -> str:
    """Fold the ``apply_for`` callbacks of ``markers`` over ``text`` in list order."""

    def step(current: str, marker: Any) -> str:
        if isinstance(marker, LogFmtMarker) and marker.has_callbacks():
            return marker.apply_callback(apply_for, current)
        return current

    return reduce(step, markers, text)


def append_callback_keys_if_not_present(
    buffer: StringIO,
    markers: List[Any],
    state: "LayoutState",
    current: str,
) -> None:
    """Write callback-defined pairs the ``custom`` appender can no longer see.

    Only applies when ``custom`` is scheduled before ``current`` (or not at
    all). Pairs whose ``key=`` already occurs in the line are skipped.
    """

    order = state.active_order
    custom_idx = order.index("custom") if "custom" in order else -1
    current_idx = order.index(current) if current in order else -1
    if custom_idx >= current_idx:
        return

    for marker in markers:
        if not (isinstance(marker, LogFmtMarker) and marker.has_callbacks()):
            continue
        line = buffer.getvalue()
        for kv in marker.defined_key_values():
            if f"{kv.key}=" not in line:
                append_key_value(buffer, kv.key, kv.value, state.mask_passwords)


def append_time(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    if not isinstance(event.timestamp, (int, float)):
        return
    seconds = event.timestamp / 1000
    if state.utc:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    else:
        moment = datetime.fromtimestamp(seconds).astimezone()
    append_key_value(buffer, NativeKey.TIME, moment.strftime(state.time_format or DEFAULT_TIME_FORMAT))


def append_level(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    if not isinstance(event.level, Level):
        return
    append_key_value(buffer, NativeKey.LEVEL, event.level.name.lower())


def append_thread(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    append_key_value(buffer, NativeKey.THREAD, event.thread_name)


def append_package(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    class_name = _caller_class_name(event)
    if class_name is not None:
        package, _, _ = class_name.rpartition(".")
        append_key_value(buffer, NativeKey.PACKAGE, package)


def append_module(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    class_name = _caller_class_name(event)
    if class_name is not None:
        append_key_value(buffer, NativeKey.MODULE, class_name.rpartition(".")[2])


def append_message(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    markers = _markers_of(event)
    msg = "null" if event.message is None else str(event.message)
    if markers:
        msg = obfuscate_message(markers, msg)
        msg = apply_callbacks(markers, msg, ApplyCallbackFor.MESSAGE)
    append_key_value(buffer, NativeKey.MESSAGE, msg, state.mask_passwords)

    append_callback_keys_if_not_present(buffer, markers, state, NativeKey.MESSAGE.value)


def append_mdc(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    mdc = event.mdc
    if not isinstance(mdc, Mapping):
        return
    for key, value in mdc.items():
        if not is_native_key(key):
            append_key_value(buffer, key, value, state.mask_passwords)


def append_custom(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    def visit(key: str, value: Any) -> None:
        if not is_native_key(key):
            append_key_value(buffer, key, value, state.mask_passwords)

    for marker in _markers_of(event):
        traverse(marker, visit)


def append_error(buffer: StringIO, event: LogEvent, state: "LayoutState") -> None:
    if event.error is None:
        return
    markers = _markers_of(event)
    error = apply_callbacks(markers, str(event.error), ApplyCallbackFor.ERROR)
    append_key_value(buffer, NativeKey.ERROR, error, state.mask_passwords)

    append_callback_keys_if_not_present(buffer, markers, state, NativeKey.ERROR.value)
