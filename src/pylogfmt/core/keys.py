"""Keys written by the layout itself."""

from __future__ import annotations

from enum import Enum

__all__ = ["NativeKey", "is_native_key"]


class NativeKey(str, Enum):
    """Keys populated automatically; MDC and marker pairs using them are skipped."""

    TIME = "time"
    LEVEL = "level"
    MESSAGE = "msg"
    APP = "app"
    THREAD = "thread"
    PACKAGE = "package"
    MODULE = "module"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


_NATIVE_KEYS = frozenset(key.value for key in NativeKey)


def is_native_key(key: str) -> bool:
    return key in _NATIVE_KEYS
