"""Deterministic slice scoring and Fibonacci bucketing."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from storypoint.estimator.types import (
    FIBONACCI_SCALE,
    EstimatorConfig,
    Slice,
    SliceBreakdown,
    TaskEstimate,
)

logger = logging.getLogger(__name__)

SliceTrace = Callable[[SliceBreakdown], None]

BASE_POINT_FALLBACK = 1
MULTIPLIER_FALLBACK = 1
LAYER_WEIGHT_FALLBACK = 0


def explain_slice(slice: Slice, config: EstimatorConfig) -> SliceBreakdown:
    """Compute a slice score together with every intermediate value."""
    base = _lookup(config.base_point, slice.type, BASE_POINT_FALLBACK)
    multiplier = _lookup(config.complexity_multiplier, slice.complexity, MULTIPLIER_FALLBACK)
    layer_weight = _lookup(config.layer_weight, slice.layer, LAYER_WEIGHT_FALLBACK)

    dependency_count = slice.dependency_count if slice.dependency_count is not None else 0
    raw_dependency_penalty = dependency_count * config.dependency_weight
    dependency_penalty = min(raw_dependency_penalty, config.max_dependency_penalty)

    shared_bonus = _bonus(config, "sharedAcrossFeatures") if slice.is_shared_across_features else 0
    business_bonus = _bonus(config, "businessCritical") if slice.is_business_critical else 0

    raw = base * multiplier + layer_weight + dependency_penalty + shared_bonus + business_bonus
    # inf/nan have no integer ceiling; snap_to_scale saturates them.
    points = math.ceil(raw) if isinstance(raw, int) or math.isfinite(raw) else raw

    breakdown = SliceBreakdown(
        slice=slice,
        base=base,
        multiplier=multiplier,
        layer_weight=layer_weight,
        raw_dependency_penalty=raw_dependency_penalty,
        dependency_penalty=dependency_penalty,
        shared_bonus=shared_bonus,
        business_bonus=business_bonus,
        raw=raw,
        points=points,
    )
    logger.debug(
        "slice %s/%s/%s: %s x %s + layer %s + deps %s + shared %s + business %s = %s -> %s pt",
        slice.type,
        slice.layer,
        slice.complexity,
        base,
        multiplier,
        layer_weight,
        dependency_penalty,
        shared_bonus,
        business_bonus,
        raw,
        points,
    )
    return breakdown


def score_slice(slice: Slice, config: EstimatorConfig, *, trace: SliceTrace | None = None) -> int | float:
    """Return the integer point value of one slice (non-finite only for overflowing configs).

    ``trace`` receives the full breakdown and has no effect on the result.
    """
    breakdown = explain_slice(slice, config)
    if trace is not None:
        trace(breakdown)
    return breakdown.points


def snap_to_scale(total: float) -> int:
    """Smallest Fibonacci bucket >= total; anything above the top bucket, or NaN, saturates."""
    if isinstance(total, float) and math.isnan(total):
        return FIBONACCI_SCALE[-1]
    for bucket in FIBONACCI_SCALE:
        if total <= bucket:
            return bucket
    return FIBONACCI_SCALE[-1]


def explain_estimate(
    slices: Iterable[Slice],
    has_test: bool,
    is_refactor: bool,
    config: EstimatorConfig,
    *,
    trace: SliceTrace | None = None,
) -> TaskEstimate:
    """Aggregate slice scores and task bonuses into a bucketed estimate."""
    breakdowns: list[SliceBreakdown] = []
    for item in slices:
        breakdown = explain_slice(item, config)
        if trace is not None:
            trace(breakdown)
        breakdowns.append(breakdown)

    slice_total = sum(breakdown.points for breakdown in breakdowns)
    test_bonus = _bonus(config, "hasTest") if has_test else 0
    refactor_bonus = _bonus(config, "isRefactor") if is_refactor else 0
    total = slice_total + test_bonus + refactor_bonus
    story_points = snap_to_scale(total)

    logger.debug(
        "task: slices %s + test %s + refactor %s = %s -> %s SP",
        slice_total,
        test_bonus,
        refactor_bonus,
        total,
        story_points,
    )
    return TaskEstimate(
        slices=tuple(breakdowns),
        has_test=has_test,
        is_refactor=is_refactor,
        slice_total=slice_total,
        test_bonus=test_bonus,
        refactor_bonus=refactor_bonus,
        total=total,
        story_points=story_points,
    )


def estimate(
    slices: Iterable[Slice],
    has_test: bool,
    is_refactor: bool,
    config: EstimatorConfig,
    *,
    trace: SliceTrace | None = None,
) -> int:
    """Return the story point bucket for a task."""
    return explain_estimate(slices, has_test, is_refactor, config, trace=trace).story_points


def _lookup(table: Mapping[str, Any], key: str, fallback: float) -> Any:
    value = table.get(key)
    if value is None:
        return fallback
    return value


def _bonus(config: EstimatorConfig, key: str) -> Any:
    # A replaced bonus group may omit keys; those contribute nothing.
    return _lookup(config.bonus, key, 0)
