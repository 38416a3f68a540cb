"""Logging manager responsible for runtime configuration and lifecycle."""

from __future__ import annotations

import logging
from typing import Any, Set

from ..config.schema import PylogfmtConfig
from ..formatters.logfmt import LogFmtFormatter
from .context import ContextAdapter, ContextFilter, inject_context
from .levels import ensure_level, register_trace_level
from .registry import build_formatter, build_handler
from .validation import validate_configuration


class LogManager:
    """Central coordinator attaching the logfmt handler to the root logger."""

    def __init__(self) -> None:
        self._config: PylogfmtConfig | None = None
        self._handler: logging.Handler | None = None
        self._formatter: LogFmtFormatter | None = None
        self._configured_loggers: Set[str] = set()

    @property
    def formatter(self) -> LogFmtFormatter | None:
        return self._formatter

    # ------------------------------------------------------------------
    def configure(self, config: PylogfmtConfig) -> None:
        """Apply the supplied configuration."""

        validate_configuration(config)
        self._teardown()

        self._config = config
        register_trace_level(config.enable_trace)
        logging.captureWarnings(config.capture_warnings)

        self._formatter = build_formatter(config.layout)
        handler = build_handler(config.handler, self._formatter)
        handler.addFilter(ContextFilter())
        self._handler = handler

        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
        root_logger.setLevel(ensure_level(config.root_logger.level))
        self._configured_loggers.add("root")

        for name, spec in config.loggers.items():
            logger = logging.getLogger(name)
            logger.setLevel(ensure_level(spec.level))
            logger.propagate = spec.propagate
            self._configured_loggers.add(name)

    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Detach and close the handler installed by :meth:`configure`."""

        self._teardown()
        self._config = None
        self._formatter = None

    # ------------------------------------------------------------------
    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_context_logger(self, name: str, *markers: Any, **context_kv: Any) -> ContextAdapter:
        logger = self.get_logger(name)
        if self._config and not self._config.context.enabled:
            base = {}
        else:
            base = dict(context_kv)
            if self._config and self._config.context.allowed_keys:
                allowed = set(self._config.context.allowed_keys)
                base = {k: v for k, v in base.items() if k in allowed}
        return inject_context(logger, markers=list(markers), base_context=base)

    # ------------------------------------------------------------------
    def _teardown(self) -> None:
        handler = self._handler
        self._handler = None
        if handler is not None:
            logging.getLogger().removeHandler(handler)
            try:
                handler.flush()
            finally:
                handler.close()

        for name in self._configured_loggers:
            if name == "root":
                continue
            logger = logging.getLogger(name)
            logger.setLevel(logging.NOTSET)
            logger.propagate = True
        self._configured_loggers.clear()


GLOBAL_MANAGER = LogManager()
