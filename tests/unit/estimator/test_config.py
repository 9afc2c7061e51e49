"""Unit tests for configuration resolution and override loading."""

from __future__ import annotations

import json
from copy import deepcopy
from typing import TYPE_CHECKING

import pytest

from storypoint.estimator.config import (
    CONFIG_REASON_MISSING,
    CONFIG_REASON_PARSE_ERROR,
    CONFIG_REASON_SCHEMA_INVALID,
    DEFAULT_CONFIG_TEMPLATE,
    ConfigError,
    default_config,
    ensure_default_config,
    load_config,
    load_config_override,
    resolve_config,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_defaults_match_documented_values() -> None:
    config = default_config()

    assert config.base_point == {"ui": 1.5, "api": 2, "model": 1.5, "lib": 2.5, "route": 1, "shared": 3}
    assert config.layer_weight == {
        "shared": 1.2,
        "entities": 1,
        "features": 0.8,
        "widgets": 0.5,
        "pages": 0,
        "app": 0.3,
    }
    assert config.complexity_multiplier == {"low": 1, "medium": 1.5, "high": 2}
    assert config.dependency_weight == 0.2
    assert config.max_dependency_penalty == 2
    assert config.bonus == {
        "sharedAcrossFeatures": 1,
        "businessCritical": 1.5,
        "hasTest": 1,
        "isRefactor": 2,
    }


def test_resolve_without_override_round_trips_template() -> None:
    assert resolve_config(None).to_dict() == DEFAULT_CONFIG_TEMPLATE
    assert resolve_config({}).to_dict() == DEFAULT_CONFIG_TEMPLATE


def test_override_replaces_whole_group_only() -> None:
    config = resolve_config({"basePoint": {"api": 5}})

    assert config.base_point == {"api": 5}
    assert config.layer_weight == DEFAULT_CONFIG_TEMPLATE["layerWeight"]
    assert config.complexity_multiplier == DEFAULT_CONFIG_TEMPLATE["complexityMultiplier"]
    assert config.bonus == DEFAULT_CONFIG_TEMPLATE["bonus"]
    assert config.dependency_weight == 0.2


def test_scalar_overrides_apply_independently() -> None:
    config = resolve_config({"dependencyWeight": 0.5, "maxDependencyPenalty": 3})

    assert config.dependency_weight == 0.5
    assert config.max_dependency_penalty == 3
    assert config.base_point == DEFAULT_CONFIG_TEMPLATE["basePoint"]


def test_unknown_top_level_keys_are_ignored() -> None:
    config = resolve_config({"velocity": 40})
    assert config.to_dict() == DEFAULT_CONFIG_TEMPLATE


def test_resolved_config_does_not_alias_defaults_or_override() -> None:
    override = {"bonus": {"hasTest": 2, "isRefactor": 1, "sharedAcrossFeatures": 0, "businessCritical": 0}}
    snapshot = deepcopy(override)

    config = resolve_config(override)
    config.bonus["hasTest"] = 99
    default_config().base_point["ui"] = 99

    assert override == snapshot
    assert DEFAULT_CONFIG_TEMPLATE["basePoint"]["ui"] == 1.5
    assert default_config().base_point["ui"] == 1.5


def test_malformed_group_propagates_as_provided() -> None:
    config = resolve_config({"layerWeight": "flat"})
    assert config.layer_weight == "flat"


def test_load_override_returns_none_when_default_file_absent(tmp_path: Path) -> None:
    assert load_config_override(root=tmp_path) is None
    assert load_config(root=tmp_path).to_dict() == DEFAULT_CONFIG_TEMPLATE


def test_load_override_reads_default_json_file(tmp_path: Path) -> None:
    (tmp_path / ".spconfig.json").write_text(
        json.dumps({"basePoint": {"api": 4}, "dependencyWeight": 0.25}),
        encoding="utf-8",
    )

    config = load_config(root=tmp_path)

    assert config.base_point == {"api": 4}
    assert config.dependency_weight == 0.25
    assert config.layer_weight == DEFAULT_CONFIG_TEMPLATE["layerWeight"]


def test_load_override_reads_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "estimator.yaml"
    path.write_text("complexityMultiplier:\n  low: 1\n  medium: 2\n  high: 3\n", encoding="utf-8")

    config = load_config(path)

    assert config.complexity_multiplier == {"low": 1, "medium": 2, "high": 3}


def test_explicit_missing_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as excinfo:
        load_config_override(tmp_path / "nope.json")
    assert excinfo.value.reason_code == CONFIG_REASON_MISSING


def test_invalid_json_is_parse_error(tmp_path: Path) -> None:
    path = tmp_path / ".spconfig.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config_override(path)
    assert excinfo.value.reason_code == CONFIG_REASON_PARSE_ERROR


def test_non_mapping_top_level_is_parse_error(tmp_path: Path) -> None:
    path = tmp_path / ".spconfig.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config_override(path)
    assert excinfo.value.reason_code == CONFIG_REASON_PARSE_ERROR


@pytest.mark.parametrize(
    "payload",
    [
        {"dependencyWeight": "heavy"},
        {"basePoint": {"api": -1}},
        {"complexityMultiplier": {"low": 0}},
        {"bonus": {"hasTests": 1}},
        {"layerWeight": [1, 2]},
    ],
)
def test_wrong_shape_is_schema_invalid(tmp_path: Path, payload: dict) -> None:
    path = tmp_path / ".spconfig.json"
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config_override(path)
    assert excinfo.value.reason_code == CONFIG_REASON_SCHEMA_INVALID


def test_ensure_default_config_writes_template(tmp_path: Path) -> None:
    path = ensure_default_config(tmp_path / ".spconfig.json")

    assert json.loads(path.read_text(encoding="utf-8")) == DEFAULT_CONFIG_TEMPLATE
    assert load_config(path).to_dict() == DEFAULT_CONFIG_TEMPLATE


def test_ensure_default_config_refuses_overwrite_without_force(tmp_path: Path) -> None:
    path = tmp_path / ".spconfig.json"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(FileExistsError):
        ensure_default_config(path)

    ensure_default_config(path, force=True)
    assert json.loads(path.read_text(encoding="utf-8")) == DEFAULT_CONFIG_TEMPLATE


def test_ensure_default_config_writes_yaml_by_suffix(tmp_path: Path) -> None:
    path = ensure_default_config(tmp_path / "conf" / "storypoint.yml")

    assert load_config(path).to_dict() == DEFAULT_CONFIG_TEMPLATE


@pytest.mark.parametrize(
    "text",
    [
        '{"dependencyWeight": Infinity}',
        '{"maxDependencyPenalty": NaN}',
        '{"basePoint": {"api": 1e400}}',
        '{"layerWeight": {"pages": -Infinity}}',
    ],
)
def test_non_finite_json_numbers_are_schema_invalid(tmp_path: Path, text: str) -> None:
    path = tmp_path / ".spconfig.json"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config_override(path)
    assert excinfo.value.reason_code == CONFIG_REASON_SCHEMA_INVALID
    assert "non-finite" in str(excinfo.value)


def test_non_finite_yaml_numbers_are_schema_invalid(tmp_path: Path) -> None:
    path = tmp_path / "estimator.yaml"
    path.write_text("maxDependencyPenalty: .nan\nbasePoint:\n  api: .inf\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(path)
    assert excinfo.value.reason_code == CONFIG_REASON_SCHEMA_INVALID
    assert "basePoint.api" in str(excinfo.value)
    assert "maxDependencyPenalty" in str(excinfo.value)
