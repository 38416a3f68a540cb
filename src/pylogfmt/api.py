"""Public API surface for pylogfmt."""

from __future__ import annotations

import logging
from typing import Any, Dict

from .config.loader import load_configuration
from .core.context import ContextAdapter
from .core.manager import GLOBAL_MANAGER

_CONFIGURED = False


def configure(overrides: Dict[str, Any] | None = None) -> None:
    """Configure the root logger to write logfmt lines."""

    global _CONFIGURED
    config = load_configuration(overrides or {})
    GLOBAL_MANAGER.configure(config)
    _CONFIGURED = True


def shutdown() -> None:
    """Remove the handler installed by :func:`configure`."""

    global _CONFIGURED
    GLOBAL_MANAGER.shutdown()
    _CONFIGURED = False


def _ensure_configured() -> None:
    if not _CONFIGURED:
        configure({})


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_logger(name)


def get_context_logger(name: str, *markers: Any, **context_kv: Any) -> ContextAdapter:
    """Return a logger attaching ``markers`` and ``context_kv`` to every record."""

    _ensure_configured()
    return GLOBAL_MANAGER.get_context_logger(name, *markers, **context_kv)
