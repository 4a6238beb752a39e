"""TOML-based configuration.

Loads ~/.cirrus/defaults.toml (global) and cirrus.toml (project), merges
them, and resolves the sections into typed settings:

    [wait]
    timeout = 1200
    interval = 10

    [node_type]
    min_memory_gb = 16
    local_disk = true

    [logging]
    level = "DEBUG"
    console = true
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from cirrus.constants import (
    DEFAULT_WAIT_INTERVAL,
    DEFAULT_WAIT_TIMEOUT,
    GLOBAL_CONFIG_DIR,
    GLOBAL_CONFIG_NAME,
    PROJECT_CONFIG_NAME,
)
from cirrus.core.exceptions import ConfigurationError
from cirrus.nodes.selection import NodeTypeRequest
from cirrus.observability.logging import LogConfig

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / GLOBAL_CONFIG_DIR / GLOBAL_CONFIG_NAME

_SECTIONS = ("wait", "node_type", "logging")


@dataclass(frozen=True, slots=True)
class WaitConfig:
    """Polling settings for waiting on cluster state changes."""

    timeout: float = DEFAULT_WAIT_TIMEOUT
    interval: float = DEFAULT_WAIT_INTERVAL


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_path = global_path or GLOBAL_CONFIG_PATH
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME

    merged = _deep_merge(_read_toml(global_path), _read_toml(project_path))
    for section in _SECTIONS:
        merged.setdefault(section, {})
    logger.bind(component="config").debug(
        f"Loaded config from {global_path} and {project_path}"
    )
    return merged


def _build[T](cls: type[T], section: str, raw: RawConfig) -> T:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"[{section}] must be a table, got {type(raw).__name__}")
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in [{section}]: {', '.join(unknown)}. "
            f"Valid: {', '.join(sorted(known))}"
        )
    try:
        return TypeAdapter(cls).validate_python(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid [{section}] section: {e}") from e


def resolve_wait_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> WaitConfig:
    config = load_config(project_dir=project_dir, global_path=global_path)
    wait = _build(WaitConfig, "wait", config["wait"])
    if wait.timeout <= 0 or wait.interval <= 0:
        raise ConfigurationError("[wait] timeout and interval must be positive")
    return wait


def resolve_node_type_request(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> NodeTypeRequest:
    config = load_config(project_dir=project_dir, global_path=global_path)
    return _build(NodeTypeRequest, "node_type", config["node_type"])


def resolve_log_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> LogConfig:
    config = load_config(project_dir=project_dir, global_path=global_path)
    return _build(LogConfig, "logging", config["logging"])
