"""pylogfmt public API."""

from .api import configure, get_context_logger, get_logger, shutdown
from .core.context import mdc_scope
from .core.event import Level, LogEvent
from .formatters.logfmt import LogFmtFormatter, LogFmtLayout
from .markers import CONFIDENTIAL, ApplyCallbackFor, KeyValue, LogFmtMarker, Marker, confidential
from .version import __version__

__all__ = [
    "ApplyCallbackFor",
    "CONFIDENTIAL",
    "KeyValue",
    "Level",
    "LogEvent",
    "LogFmtFormatter",
    "LogFmtLayout",
    "LogFmtMarker",
    "Marker",
    "configure",
    "confidential",
    "get_context_logger",
    "get_logger",
    "mdc_scope",
    "shutdown",
    "__version__",
]
