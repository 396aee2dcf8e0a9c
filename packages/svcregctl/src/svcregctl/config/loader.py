from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

import yaml

from ..contracts.validate import validate
from ..core.errors import ScriptError, config_error
from .model import ServiceCheckConfig, canonical_keys, unknown_keys

CONFIG_SCHEMA = "svcregctl.config.v1"
PYPROJECT_TABLE = ("tool", "svcregctl")
ENV_STRATEGY = "SVCREGCTL_STRATEGY"


def _read_mapping(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix == ".toml":
        payload: Any = tomllib.loads(text)
        if path.name == "pyproject.toml":
            for key in PYPROJECT_TABLE:
                payload = payload.get(key, {}) if isinstance(payload, dict) else {}
        return payload
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(text) or {}
    if suffix == ".json":
        return json.loads(text)
    raise config_error(f"unsupported config file type: {path.name} (expected .toml, .yaml, .yml or .json)")


def load_config_mapping(path: Path) -> dict[str, Any]:
    try:
        payload = _read_mapping(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise config_error(f"cannot read config file {path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise config_error(f"cannot parse config file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise config_error(f"config file {path}: root must be a mapping")
    unknown = unknown_keys(payload)
    if unknown:
        raise config_error(f"config file {path}: unknown keys: {', '.join(unknown)}")
    return canonical_keys(payload)


def discover_config_file(project_root: Path) -> Path | None:
    for name in ("svcregctl.toml", "svcregctl.yaml", "svcregctl.yml"):
        candidate = project_root / name
        if candidate.is_file():
            return candidate
    pyproject = project_root / "pyproject.toml"
    if pyproject.is_file():
        return pyproject
    return None


def merge_overrides(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in canonical_keys(overrides).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        merged[key] = list(value) if isinstance(value, tuple) else value
    return merged


def load_config(
    *,
    config_file: Path | None = None,
    project_root: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> ServiceCheckConfig:
    env = os.environ if env is None else env
    source = config_file or (discover_config_file(project_root) if project_root else None)
    data: dict[str, Any] = load_config_mapping(source) if source else {}
    if env.get(ENV_STRATEGY):
        data["strategy"] = env[ENV_STRATEGY]
    data = merge_overrides(data, overrides or {})
    try:
        validate(CONFIG_SCHEMA, data)
    except ScriptError as exc:
        raise config_error(str(exc)) from exc
    return ServiceCheckConfig.from_mapping(data)
