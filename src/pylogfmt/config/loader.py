"""Layered configuration loading.

Sources are merged from lowest to highest precedence: built-in defaults, the
user configuration directory, files in the working directory,
``[tool.pylogfmt]`` in ``pyproject.toml``, ``PYLOGFMT__`` environment
variables and finally explicit overrides.
"""

from __future__ import annotations

import importlib
import json
import logging
import os
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, Mapping, cast

from platformdirs import user_config_dir

from .schema import PylogfmtConfig, build_config, default_config

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    yaml_module = importlib.import_module("yaml")
except ModuleNotFoundError:  # pragma: no cover
    yaml_module = None

yaml: ModuleType | None = yaml_module

_LOGGER = logging.getLogger(__name__)

_APP_NAME = "pylogfmt"
_ENV_PREFIX = "PYLOGFMT__"
_FILENAMES = ("pylogfmt.toml", "pylogfmt.yaml", "pylogfmt.yml")


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    if yaml is None:
        _LOGGER.warning("Ignoring %s: PyYAML is not installed", path)
        return {}
    loader = getattr(yaml, "safe_load", None)
    if not callable(loader):
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = cast(Callable[[Any], Any], loader)(fh)
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    return {}


def load_file(path: str | Path) -> Dict[str, Any]:
    """Read one TOML or YAML configuration file, ``{}`` if it does not exist."""

    target = Path(path)
    if target.suffix == ".toml":
        return _load_toml(target)
    if target.suffix in {".yaml", ".yml"}:
        return _load_yaml(target)
    raise ValueError(f"Unsupported configuration file type: {target}")


def _merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        existing = base.get(key)
        if isinstance(value, Mapping):
            nested = dict(existing) if isinstance(existing, Mapping) else {}
            base[key] = _merge(nested, value)
        else:
            base[key] = value
    return base


def _load_directory(directory: Path, names: Iterable[str] = _FILENAMES) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if not directory.is_dir():
        return data
    for filename in names:
        payload = load_file(directory / filename)
        if payload:
            _merge(data, payload)
    return data


def _load_user_config() -> Dict[str, Any]:
    return _load_directory(Path(user_config_dir(_APP_NAME)))


def _load_local_config() -> Dict[str, Any]:
    return _load_directory(Path.cwd())


def _load_pyproject() -> Dict[str, Any]:
    data = _load_toml(Path.cwd() / "pyproject.toml")
    tool = data.get("tool", {})
    section = tool.get(_APP_NAME, {}) if isinstance(tool, Mapping) else {}
    if isinstance(section, Mapping):
        return {str(key): value for key, value in section.items()}
    return {}


def _coerce_value(value: str) -> Any:
    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    for convert in (int, float):
        try:
            return convert(stripped)
        except ValueError:
            continue
    if stripped[:1] in {"[", "{"}:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return stripped


def _env_config(environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    source = os.environ if environ is None else environ
    for env_key, raw_value in source.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        *parents, leaf = env_key[len(_ENV_PREFIX) :].lower().split("__")
        target = data
        for segment in parents:
            target = cast(Dict[str, Any], target.setdefault(segment, {}))
        target[leaf] = _coerce_value(raw_value)
    return data


def load_configuration(overrides: Mapping[str, Any] | None = None) -> PylogfmtConfig:
    """Load configuration from supported sources in precedence order."""

    merged = default_config()
    for layer in (
        _load_user_config(),
        _load_local_config(),
        _load_pyproject(),
        _env_config(),
        overrides or {},
    ):
        if layer:
            _merge(merged, layer)
    return build_config(merged)
