"""Configuration validation helpers."""

from __future__ import annotations

from ..config.schema import PylogfmtConfig
from .levels import get_level_by_name
from .registry import HANDLER_BUILDERS

_STREAMS = {"stdout", "stderr"}


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


def _check_level(owner: str, level: str | int) -> None:
    if isinstance(level, int):
        return
    if get_level_by_name(str(level)) is None:
        raise ConfigurationError(f"{owner} uses unknown level '{level}'")


def validate_configuration(config: PylogfmtConfig) -> None:
    """Ensure configuration values are consistent."""

    handler = config.handler
    if handler.kind not in HANDLER_BUILDERS:
        raise ConfigurationError(f"Unknown handler type '{handler.kind}'")
    if handler.kind == "console" and handler.stream not in _STREAMS:
        raise ConfigurationError(
            f"Console handler stream must be one of {', '.join(sorted(_STREAMS))}, got '{handler.stream}'"
        )
    _check_level("Handler", handler.level)
    _check_level("Root logger", config.root_logger.level)

    for logger in config.loggers.values():
        _check_level(f"Logger '{logger.name}'", logger.level)
