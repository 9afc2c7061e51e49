"""Resolve estimator configuration from built-in defaults and override files."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from storypoint.estimator.types import DEFAULT_CONFIG_RELATIVE_PATH, EstimatorConfig
from storypoint.schemas.validator import validate_data

logger = logging.getLogger(__name__)

# Key order mirrors the documented override format; `config init` writes it as-is.
DEFAULT_CONFIG_TEMPLATE: dict[str, Any] = {
    "basePoint": {
        "ui": 1.5,
        "api": 2,
        "model": 1.5,
        "lib": 2.5,
        "route": 1,
        "shared": 3,
    },
    "layerWeight": {
        "shared": 1.2,
        "entities": 1,
        "features": 0.8,
        "widgets": 0.5,
        "pages": 0,
        "app": 0.3,
    },
    "complexityMultiplier": {
        "low": 1,
        "medium": 1.5,
        "high": 2,
    },
    "dependencyWeight": 0.2,
    "maxDependencyPenalty": 2,
    "bonus": {
        "sharedAcrossFeatures": 1,
        "businessCritical": 1.5,
        "hasTest": 1,
        "isRefactor": 2,
    },
}

CONFIG_KEYS: tuple[str, ...] = tuple(DEFAULT_CONFIG_TEMPLATE)

CONFIG_REASON_MISSING = "CONFIG_MISSING"
CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"


class ConfigError(ValueError):
    """Override file could not be located, parsed or validated."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


def resolve_config(override: Mapping[str, Any] | None = None) -> EstimatorConfig:
    """Overlay a partial override on the defaults, one top-level group at a time.

    A group present in the override replaces the default group wholesale;
    leaf keys are never merged across the two.
    """
    override = override or {}
    for key in sorted(set(override) - set(CONFIG_KEYS)):
        logger.debug("Ignoring unknown config key %r", key)

    return EstimatorConfig(
        base_point=_copy_group(_pick(override, "basePoint")),
        layer_weight=_copy_group(_pick(override, "layerWeight")),
        complexity_multiplier=_copy_group(_pick(override, "complexityMultiplier")),
        dependency_weight=_pick(override, "dependencyWeight"),
        max_dependency_penalty=_pick(override, "maxDependencyPenalty"),
        bonus=_copy_group(_pick(override, "bonus")),
    )


def default_config() -> EstimatorConfig:
    """Return a fresh config built purely from the defaults."""
    return resolve_config(None)


def config_path_for_dir(root: Path) -> Path:
    """Return the conventional override file location for a directory."""
    return root.resolve() / DEFAULT_CONFIG_RELATIVE_PATH


def load_config_override(path: Path | None = None, *, root: Path | None = None) -> dict[str, Any] | None:
    """Read and validate an override file.

    With no explicit ``path`` the conventional ``.spconfig.json`` under
    ``root`` (default: the working directory) is used, and its absence is
    not an error.
    """
    explicit = path is not None
    target = path if path is not None else config_path_for_dir(root or Path.cwd())

    if not target.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {target}", CONFIG_REASON_MISSING)
        logger.debug("No config override at %s, using defaults", target)
        return None

    text = target.read_text(encoding="utf-8")
    try:
        if target.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"{target.name} parse error: {exc}", CONFIG_REASON_PARSE_ERROR) from exc

    if not isinstance(raw, dict):
        raise ConfigError(
            f"{target.name} parse error: expected mapping at top level",
            CONFIG_REASON_PARSE_ERROR,
        )

    non_finite = _non_finite_paths(raw)
    if non_finite:
        raise ConfigError(
            f"{target.name} is invalid: non-finite number at {', '.join(non_finite)}",
            CONFIG_REASON_SCHEMA_INVALID,
        )

    errors = validate_data(raw, "config")
    if errors:
        details = "; ".join(errors)
        raise ConfigError(f"{target.name} is invalid: {details}", CONFIG_REASON_SCHEMA_INVALID)

    logger.debug("Loaded config override from %s (keys: %s)", target, ", ".join(sorted(raw)))
    return raw


def load_config(path: Path | None = None, *, root: Path | None = None) -> EstimatorConfig:
    """Load an override file, if any, and resolve it against the defaults."""
    return resolve_config(load_config_override(path, root=root))


def ensure_default_config(path: Path, *, force: bool = False) -> Path:
    """Write the default configuration template to ``path``."""
    if path.exists() and not force:
        raise FileExistsError(f"Config file already exists: {path}")

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in {".yaml", ".yml"}:
        rendered = yaml.safe_dump(DEFAULT_CONFIG_TEMPLATE, sort_keys=False)
    else:
        rendered = json.dumps(DEFAULT_CONFIG_TEMPLATE, indent=2) + "\n"
    path.write_text(rendered, encoding="utf-8")
    return path


def _pick(override: Mapping[str, Any], key: str) -> Any:
    if key in override:
        return override[key]
    return DEFAULT_CONFIG_TEMPLATE[key]


def _copy_group(value: Any) -> Any:
    # Malformed (non-mapping) groups pass through untouched.
    if isinstance(value, Mapping):
        return deepcopy(dict(value))
    return value


def _non_finite_paths(value: Any, path: str = "") -> list[str]:
    """Dotted paths of inf/nan floats (JSON ``Infinity``/``NaN``, YAML ``.inf``/``.nan``)."""
    if isinstance(value, float):
        return [] if math.isfinite(value) else [path or "<root>"]
    if isinstance(value, dict):
        found: list[str] = []
        for key in sorted(value, key=str):
            found.extend(_non_finite_paths(value[key], f"{path}.{key}" if path else str(key)))
        return found
    return []
