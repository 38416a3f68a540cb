"""Console handler helpers."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import IO, Any

__all__ = ["ConsoleHandlerConfig", "build_console_handler"]


@dataclass(slots=True)
class ConsoleHandlerConfig:
    """Configuration for console handlers."""

    stream: str | IO[str] = "stderr"
    level: int = logging.NOTSET


def build_console_handler(
    config: ConsoleHandlerConfig | None = None,
    formatter: logging.Formatter | None = None,
) -> logging.Handler:
    """Construct a :class:`logging.StreamHandler` writing one line per record."""

    cfg = config or ConsoleHandlerConfig()
    stream: Any
    if cfg.stream == "stdout":
        stream = sys.stdout
    elif cfg.stream == "stderr":
        stream = sys.stderr
    else:
        stream = cfg.stream
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(cfg.level)
    if formatter is not None:
        handler.setFormatter(formatter)
    return handler
