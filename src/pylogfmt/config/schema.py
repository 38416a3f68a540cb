"""Configuration schema definition for pylogfmt."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

DEFAULT_CONFIG: Dict[str, Any] = {
    "layout": {
        "utc": False,
    },
    "handler": {
        "type": "console",
        "stream": "stderr",
        "level": "NOTSET",
    },
    "logging": {
        "root": {"level": "INFO"},
        "loggers": {},
        "capture_warnings": True,
    },
    "levels": {
        "enable_trace": False,
    },
    "context": {
        "enabled": True,
        "allowed_keys": [],
    },
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(slots=True)
class LayoutConfig:
    prefix: str | None = None
    app_name: str | None = None
    time_format: str | None = None
    fields: str | None = None
    mask_passwords: str | None = None
    utc: bool = False

    def formatter_options(self) -> Dict[str, Any]:
        return {
            "prefix": self.prefix,
            "app_name": self.app_name,
            "time_format": self.time_format,
            "fields": self.fields,
            "mask_passwords": self.mask_passwords,
            "utc": self.utc,
        }


@dataclass(slots=True)
class HandlerSpec:
    kind: str = "console"
    stream: str = "stderr"
    level: str | int = "NOTSET"


@dataclass(slots=True)
class LoggerSpec:
    name: str
    level: str | int
    propagate: bool = True


@dataclass(slots=True)
class ContextConfig:
    enabled: bool = True
    allowed_keys: List[str] = field(default_factory=list)


@dataclass(slots=True)
class PylogfmtConfig:
    layout: LayoutConfig
    handler: HandlerSpec
    root_logger: LoggerSpec
    loggers: Dict[str, LoggerSpec]
    enable_trace: bool
    context: ContextConfig
    capture_warnings: bool
    raw: Dict[str, Any] = field(repr=False)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = ",".join(str(item) for item in value)
    text = str(value)
    return text if text != "" else None


def _to_layout(data: Mapping[str, Any]) -> LayoutConfig:
    return LayoutConfig(
        prefix=_optional_text(data.get("prefix")),
        app_name=_optional_text(data.get("app_name")),
        time_format=_optional_text(data.get("time_format")),
        fields=_optional_text(data.get("fields")),
        mask_passwords=_optional_text(data.get("mask_passwords")),
        utc=bool(data.get("utc", False)),
    )


def _to_handler(data: Mapping[str, Any]) -> HandlerSpec:
    return HandlerSpec(
        kind=str(data.get("type", "console")),
        stream=str(data.get("stream", "stderr")),
        level=data.get("level", "NOTSET"),
    )


def _to_loggers(data: Mapping[str, Any]) -> tuple[LoggerSpec, Dict[str, LoggerSpec], bool]:
    root_data = data.get("root", {})
    if not isinstance(root_data, Mapping):
        root_data = {}
    loggers_data = data.get("loggers", {})
    if not isinstance(loggers_data, Mapping):
        loggers_data = {}

    capture_warnings = bool(data.get("capture_warnings", True))
    root_spec = LoggerSpec(name="root", level=root_data.get("level", "INFO"), propagate=False)

    specs: Dict[str, LoggerSpec] = {}
    for name, payload in loggers_data.items():
        if isinstance(payload, Mapping):
            specs[name] = LoggerSpec(
                name=name,
                level=payload.get("level", "INFO"),
                propagate=bool(payload.get("propagate", True)),
            )
        elif isinstance(payload, (str, int)):
            specs[name] = LoggerSpec(name=name, level=payload)

    return root_spec, specs, capture_warnings


def _to_context(data: Mapping[str, Any]) -> ContextConfig:
    enabled = bool(data.get("enabled", True))
    allowed_raw = data.get("allowed_keys", [])
    if isinstance(allowed_raw, Mapping):
        allowed = [str(item) for item in allowed_raw.keys()]
    elif isinstance(allowed_raw, Iterable) and not isinstance(allowed_raw, (str, bytes)):
        allowed = [str(item) for item in allowed_raw]
    else:
        allowed = []
    return ContextConfig(enabled=enabled, allowed_keys=allowed)


def build_config(data: Mapping[str, Any]) -> PylogfmtConfig:
    layout = _to_layout(data.get("layout", {}))
    handler = _to_handler(data.get("handler", {}))
    root_logger, loggers, capture_warnings = _to_loggers(data.get("logging", {}))
    levels = data.get("levels", {})
    enable_trace = bool(levels.get("enable_trace", False)) if isinstance(levels, Mapping) else False
    context = _to_context(data.get("context", {}))

    raw_copy: Dict[str, Any] = deepcopy({k: v for k, v in data.items()})

    return PylogfmtConfig(
        layout=layout,
        handler=handler,
        root_logger=root_logger,
        loggers=loggers,
        enable_trace=enable_trace,
        context=context,
        capture_warnings=capture_warnings,
        raw=raw_copy,
    )
