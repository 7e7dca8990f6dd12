"""Config file loading and auto-discovery for hubboard.

Searches for ``.clusters.yaml`` in the current directory and parent
directories, parses its ``clusters`` list into :class:`HubConfig` entries,
and resolves relative kubeconfig paths against the config file's location.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hubboard.models import HubConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".clusters.yaml"
DEFAULT_TIMEOUT = 3.0
TIMEOUT_ENV_VAR = "LAB_TIMEOUT"


class ConfigError(Exception):
    """Raised when the config file is missing, malformed or lists no hubs."""


def find_config(start: Path | None = None) -> Path | None:
    """Walk from *start* (default ``cwd()``) up to the filesystem root.

    Returns the first ``.clusters.yaml`` found, or ``None``.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def resolve_timeout(explicit: float | None = None) -> float:
    """Return the per-call API timeout in seconds.

    Resolution order: explicit value, ``$LAB_TIMEOUT``, then 3 seconds.
    """
    if explicit is not None:
        return float(explicit)
    raw = os.environ.get(TIMEOUT_ENV_VAR, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"{TIMEOUT_ENV_VAR} must be a number of seconds, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{TIMEOUT_ENV_VAR} must be positive, got {raw!r}")
    return value


def load_hubs(path: str | Path) -> list[HubConfig]:
    """Load the hub list from a YAML config file.

    The file must have a top-level ``clusters`` key holding a non-empty list.
    Entries missing both ``kubeconfig`` and ``api``, entries that are not a
    mapping and entries with wrongly-typed fields come back without an auth
    mode, so the processor can report them without stopping the run.

    Raises:
        ConfigError: If the file cannot be read, parsed, or lists no hubs.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file '{path}' not found.")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict) or "clusters" not in raw:
        raise ConfigError(f"Config file must have a top-level 'clusters' key: {path}")

    entries: Any = raw["clusters"] or []
    if not isinstance(entries, list):
        raise ConfigError(f"'clusters' must be a list: {path}")
    if not entries:
        raise ConfigError("No hub clusters defined in config file.")

    base = path.resolve().parent
    hubs: list[HubConfig] = []
    for i, entry in enumerate(entries):
        hub = _parse_entry(entry, i, path)
        if hub.kubeconfig:
            hub = hub.model_copy(update={"kubeconfig": _resolve_path(base, hub.kubeconfig)})
        hubs.append(hub)

    return hubs


def _parse_entry(entry: Any, index: int, path: Path) -> HubConfig:
    """Build one hub; an unusable entry becomes a placeholder without auth.

    The placeholder keeps its position so the processor reports it as an
    invalid hub instead of the whole run failing.
    """
    if entry is None:
        return HubConfig()
    if not isinstance(entry, dict):
        logger.warning("Hub at index %d in %s is not a mapping", index, path)
        return HubConfig()
    try:
        return HubConfig(**entry)
    except (ValidationError, TypeError) as e:
        logger.warning("Hub at index %d in %s is invalid: %s", index, path, e)
        name = entry.get("name")
        return HubConfig(name=name if isinstance(name, str) else None)


def _resolve_path(base: Path, value: str) -> str:
    expanded = Path(value).expanduser()
    if expanded.is_absolute():
        return str(expanded)
    return str((base / expanded).resolve())
