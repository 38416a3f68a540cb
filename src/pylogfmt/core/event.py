"""Read-only view of a log event as consumed by the layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Sequence

from .context import snapshot as mdc_snapshot
from .levels import TRACE_LEVEL_NUM

__all__ = ["Level", "LogEvent"]


class Level(IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4

    @classmethod
    def from_levelno(cls, levelno: int) -> "Level":
        """Map a stdlib level number onto the five layout levels."""

        if levelno <= TRACE_LEVEL_NUM:
            return cls.TRACE
        if levelno <= logging.DEBUG:
            return cls.DEBUG
        if levelno <= logging.INFO:
            return cls.INFO
        if levelno <= logging.WARNING:
            return cls.WARN
        return cls.ERROR


@dataclass(frozen=True, slots=True)
class LogEvent:
    timestamp: int
    level: Level
    message: str
    thread_name: str = ""
    caller_data: Sequence[str] = ()
    mdc: Mapping[str, Any] | None = None
    markers: Sequence[Any] | None = None
    error: str | None = None

    @classmethod
    def from_record(cls, record: logging.LogRecord, formatter: logging.Formatter | None = None) -> "LogEvent":
        """Build an event from a stdlib ``LogRecord``.

        ``record.caller`` (set through ``extra``) overrides the logger name as
        the call-site name, ``record.mdc`` overrides the current MDC and
        ``record.markers`` may hold a single marker or a sequence of markers.
        """

        fmt = formatter or logging.Formatter()
        data = record.__dict__

        caller = data.get("caller") or record.name
        caller_data: tuple[str, ...] = (str(caller),) if caller else ()

        mdc = data.get("mdc")
        if mdc is None:
            mdc = mdc_snapshot()

        markers = data.get("markers")
        if markers is not None and not isinstance(markers, (list, tuple)):
            markers = (markers,)

        error_parts: list[str] = []
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = fmt.formatException(record.exc_info)
            error_parts.append(record.exc_text)
        elif record.exc_text:
            error_parts.append(record.exc_text)
        if record.stack_info:
            error_parts.append(fmt.formatStack(record.stack_info))

        return cls(
            timestamp=int(record.created * 1000),
            level=Level.from_levelno(record.levelno),
            message=record.getMessage(),
            thread_name=record.threadName or "",
            caller_data=caller_data,
            mdc=mdc,
            markers=markers,
            error="\n".join(error_parts) if error_parts else None,
        )
