"""Builders turning configuration specs into formatters and handlers."""

from __future__ import annotations

import logging
from typing import Callable, Dict

from ..config.schema import HandlerSpec, LayoutConfig
from ..formatters.logfmt import LogFmtFormatter
from ..handlers.console import ConsoleHandlerConfig, build_console_handler
from .levels import ensure_level

__all__ = ["HANDLER_BUILDERS", "build_formatter", "build_handler"]

HandlerBuilder = Callable[[HandlerSpec, logging.Formatter], logging.Handler]


def build_formatter(layout: LayoutConfig) -> LogFmtFormatter:
    return LogFmtFormatter(**layout.formatter_options())


def _build_console_handler(spec: HandlerSpec, formatter: logging.Formatter) -> logging.Handler:
    cfg = ConsoleHandlerConfig(stream=spec.stream, level=ensure_level(spec.level))
    return build_console_handler(cfg, formatter)


def _build_null_handler(spec: HandlerSpec, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.NullHandler()
    handler.setFormatter(formatter)
    return handler


HANDLER_BUILDERS: Dict[str, HandlerBuilder] = {
    "console": _build_console_handler,
    "null": _build_null_handler,
}


def build_handler(spec: HandlerSpec, formatter: logging.Formatter) -> logging.Handler:
    builder = HANDLER_BUILDERS.get(spec.kind)
    if builder is None:
        raise ValueError(f"Unknown handler kind: {spec.kind}")
    return builder(spec, formatter)
