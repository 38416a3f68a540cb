"""Log level helpers."""

from __future__ import annotations

import logging
from typing import Any

TRACE_LEVEL_NAME = "TRACE"
TRACE_LEVEL_NUM = 5


def register_trace_level(enable: bool = True) -> None:
    """Register the TRACE level on the stdlib logging module.

    When ``enable`` is ``False`` the function becomes a no-op. The level is
    installed only once even if called repeatedly.
    """

    if not enable:
        return

    if logging.getLevelName(TRACE_LEVEL_NUM) != TRACE_LEVEL_NAME:
        logging.addLevelName(TRACE_LEVEL_NUM, TRACE_LEVEL_NAME)
    if not hasattr(logging, TRACE_LEVEL_NAME):
        setattr(logging, TRACE_LEVEL_NAME, TRACE_LEVEL_NUM)

    if not hasattr(logging.Logger, "trace"):
        def trace(self: logging.Logger, message: str, *args: object, **kwargs: Any) -> None:  # type: ignore[override]
            if self.isEnabledFor(TRACE_LEVEL_NUM):
                self._log(TRACE_LEVEL_NUM, message, args, **kwargs)

        logging.Logger.trace = trace  # type: ignore[attr-defined]


def get_level_by_name(name: str) -> int | None:
    """Resolve a logging level from a friendly name, ``None`` if unknown."""

    stripped = name.strip()
    if stripped.upper() == TRACE_LEVEL_NAME:
        return TRACE_LEVEL_NUM
    if stripped.isdigit():
        return int(stripped)
    if stripped.upper() == "WARN":
        return logging.WARNING
    resolved = logging.getLevelName(stripped.upper())
    if isinstance(resolved, int):
        return resolved
    return None


def ensure_level(value: int | str) -> int:
    """Normalize user supplied level values, defaulting to ``INFO``."""

    if isinstance(value, int):
        return value
    resolved = get_level_by_name(value)
    return logging.INFO if resolved is None else resolved
