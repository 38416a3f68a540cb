"""Appender registry, field order and redaction settings of one layout."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable, Tuple

from .appenders import (
    Appender,
    append_custom,
    append_error,
    append_level,
    append_mdc,
    append_message,
    append_module,
    append_package,
    append_thread,
    append_time,
)
from .keys import NativeKey

__all__ = ["DEFAULT_ORDER", "LayoutState", "NativeKey", "is_valid_time_format", "split_names"]

_LOGGER = logging.getLogger(__name__)

DEFAULT_ORDER: Tuple[str, ...] = (
    "time",
    "level",
    "thread",
    "package",
    "module",
    "msg",
    "mdc",
    "custom",
    "error",
)

# C89 and ISO 8601 directives, plus the glibc extensions (%C %D %e %F %g %h %k %l %n %P %r %R %s %t %T).
_STRFTIME_DIRECTIVES = frozenset("aAwdbBmyYHIpMSfzZjUWcxXGuV%" "CDeFghklnPrRstT")


def is_valid_time_format(pattern: object) -> bool:
    """Return ``True`` if ``pattern`` is a usable ``strftime`` pattern."""

    if not isinstance(pattern, str) or not pattern:
        return False
    idx = 0
    while idx < len(pattern):
        if pattern[idx] == "%":
            directive = pattern[idx + 1 : idx + 2]
            if directive == ":" and pattern[idx + 2 : idx + 3] == "z":
                idx += 3
                continue
            if directive not in _STRFTIME_DIRECTIVES or not directive:
                return False
            idx += 2
            continue
        idx += 1
    try:
        datetime.now(timezone.utc).strftime(pattern)
    except (ValueError, UnicodeError):
        return False
    return True


def split_names(value: str | Iterable[str] | None) -> Tuple[str, ...]:
    """Split a comma separated string (or iterable) into stripped names."""

    if value is None:
        return ()
    parts = value.split(",") if isinstance(value, str) else [str(item) for item in value]
    return tuple(part.strip() for part in parts if part.strip())


class LayoutState:
    """Configuration shared by every appender of one layout.

    Setters replace whole immutable values, so formatting threads reading the
    state concurrently always see either the old or the new setting.
    """

    def __init__(self) -> None:
        self.registry: Dict[str, Appender] = {
            NativeKey.TIME.value: append_time,
            NativeKey.LEVEL.value: append_level,
            NativeKey.MESSAGE.value: append_message,
            NativeKey.THREAD.value: append_thread,
            NativeKey.PACKAGE.value: append_package,
            NativeKey.MODULE.value: append_module,
            "mdc": append_mdc,
            "custom": append_custom,
            NativeKey.ERROR.value: append_error,
        }
        self.default_order: Tuple[str, ...] = DEFAULT_ORDER
        self.custom_order: Tuple[str, ...] | None = None
        self.mask_passwords: FrozenSet[str] = frozenset()
        self.time_format: str | None = None
        self.utc: bool = False

    @property
    def active_order(self) -> Tuple[str, ...]:
        order = self.custom_order
        return order if order is not None else self.default_order

    def appenders(self) -> Tuple[Appender, ...]:
        return tuple(self.registry[name] for name in self.active_order)

    def set_fields(self, fields: str | Iterable[str] | None) -> None:
        """Replace the field order; unknown names are dropped, ``None`` or an empty value restores the default."""

        names = split_names(fields)
        if not names:
            self.custom_order = None
            return
        self.custom_order = tuple(name for name in names if name in self.registry)

    def set_mask_passwords(self, keys: str | Iterable[str] | None) -> None:
        self.mask_passwords = frozenset(split_names(keys))

    def set_time_format(self, pattern: str | None) -> bool:
        """Use ``pattern`` for the time field, keeping the previous one if invalid."""

        if pattern is None:
            self.time_format = None
            return True
        if not is_valid_time_format(pattern):
            _LOGGER.warning(
                "Could not update time format %r, keeping %r",
                pattern,
                self.time_format,
            )
            return False
        self.time_format = pattern
        return True
