"""Estimator domain types for slice-based story point scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

SLICE_TYPES: tuple[str, ...] = ("ui", "api", "model", "lib", "route", "shared")
COMPLEXITIES: tuple[str, ...] = ("low", "medium", "high")
LAYERS: tuple[str, ...] = ("shared", "entities", "features", "widgets", "pages", "app")

FIBONACCI_SCALE: tuple[int, ...] = (1, 2, 3, 5, 8, 13, 21)

DEFAULT_CONFIG_RELATIVE_PATH = Path(".spconfig.json")


@dataclass(frozen=True)
class Slice:
    """One architecturally-classified unit of work inside a task.

    Enumerated fields are kept as plain strings; values outside
    ``SLICE_TYPES``/``COMPLEXITIES``/``LAYERS`` are scored with fallbacks.
    """

    type: str
    complexity: str
    layer: str
    is_shared_across_features: bool = False
    dependency_count: int | None = 0
    is_business_critical: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Slice:
        """Build a slice from its camelCase wire mapping."""
        return cls(
            type=str(data["type"]),
            complexity=str(data["complexity"]),
            layer=str(data["layer"]),
            is_shared_across_features=bool(data.get("isSharedAcrossFeatures", False)),
            dependency_count=data.get("dependencyCount", 0),
            is_business_critical=bool(data.get("isBusinessCritical", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "complexity": self.complexity,
            "layer": self.layer,
            "isSharedAcrossFeatures": self.is_shared_across_features,
            "dependencyCount": self.dependency_count,
            "isBusinessCritical": self.is_business_critical,
        }


@dataclass(frozen=True)
class EstimatorConfig:
    """Fully-populated scoring configuration."""

    base_point: dict[str, float]
    layer_weight: dict[str, float]
    complexity_multiplier: dict[str, float]
    dependency_weight: float
    max_dependency_penalty: float
    bonus: dict[str, float]

    def to_dict(self) -> dict[str, Any]:
        """Render the config in the camelCase override/file format."""
        return {
            "basePoint": dict(self.base_point),
            "layerWeight": dict(self.layer_weight),
            "complexityMultiplier": dict(self.complexity_multiplier),
            "dependencyWeight": self.dependency_weight,
            "maxDependencyPenalty": self.max_dependency_penalty,
            "bonus": dict(self.bonus),
        }


@dataclass(frozen=True)
class SliceBreakdown:
    """Every intermediate value of a single slice score."""

    slice: Slice
    base: float
    multiplier: float
    layer_weight: float
    raw_dependency_penalty: float
    dependency_penalty: float
    shared_bonus: float
    business_bonus: float
    raw: float
    points: int | float


@dataclass(frozen=True)
class TaskEstimate:
    """Aggregated estimate for a task with its per-slice breakdowns."""

    slices: tuple[SliceBreakdown, ...]
    has_test: bool
    is_refactor: bool
    slice_total: int | float
    test_bonus: float
    refactor_bonus: float
    total: float
    story_points: int


@dataclass(frozen=True)
class TaskInput:
    """Caller-assembled task: ordered slices plus whole-task flags."""

    slices: tuple[Slice, ...] = field(default_factory=tuple)
    has_test: bool = False
    is_refactor: bool = False
