"""Deterministic estimate report writers."""

from __future__ import annotations

from typing import Any

from storypoint.estimator.types import SliceBreakdown, TaskEstimate

SEPARATOR = "-" * 40


def slice_breakdown_to_dict(breakdown: SliceBreakdown) -> dict[str, Any]:
    """Convert one slice breakdown to a JSON-ready payload."""
    return {
        "slice": breakdown.slice.to_dict(),
        "base": breakdown.base,
        "multiplier": breakdown.multiplier,
        "layer_weight": breakdown.layer_weight,
        "raw_dependency_penalty": breakdown.raw_dependency_penalty,
        "dependency_penalty": breakdown.dependency_penalty,
        "shared_bonus": breakdown.shared_bonus,
        "business_bonus": breakdown.business_bonus,
        "raw": breakdown.raw,
        "points": breakdown.points,
    }


def estimate_to_dict(estimate: TaskEstimate) -> dict[str, Any]:
    """Convert a task estimate to a deterministic JSON payload."""
    return {
        "story_points": estimate.story_points,
        "total": estimate.total,
        "slice_total": estimate.slice_total,
        "has_test": estimate.has_test,
        "is_refactor": estimate.is_refactor,
        "test_bonus": estimate.test_bonus,
        "refactor_bonus": estimate.refactor_bonus,
        "slices": [slice_breakdown_to_dict(item) for item in estimate.slices],
    }


def render_slice_breakdown(breakdown: SliceBreakdown) -> list[str]:
    """Render the per-slice arithmetic, one term per line."""
    item = breakdown.slice
    return [
        SEPARATOR,
        f"Slice: {item.type} ({item.layer}, {item.complexity})",
        f"  basePoint({_fmt(breakdown.base)}) x multiplier({_fmt(breakdown.multiplier)})",
        f"  + layerWeight({_fmt(breakdown.layer_weight)})",
        f"  + dependencyPenalty({_fmt(breakdown.dependency_penalty)})",
        f"  + sharedBonus({_fmt(breakdown.shared_bonus)})",
        f"  + businessBonus({_fmt(breakdown.business_bonus)})",
        f"  = {breakdown.points} pt",
    ]


def render_estimate_report(estimate: TaskEstimate) -> str:
    """Render the full human-readable breakdown of an estimate."""
    lines: list[str] = []
    for breakdown in estimate.slices:
        lines.extend(render_slice_breakdown(breakdown))
    if estimate.slices:
        lines.append(SEPARATOR)
    lines.extend(
        [
            "",
            f"Test bonus: +{_fmt(estimate.test_bonus)}",
            f"Refactor bonus: +{_fmt(estimate.refactor_bonus)}",
            f"Total: {_fmt(estimate.total)}",
        ]
    )
    return "\n".join(lines)


def render_estimate_summary(estimate: TaskEstimate) -> str:
    return f"Estimated story points: {estimate.story_points} SP"


def _fmt(value: float) -> str:
    # 2.0 -> "2", 0.8 -> "0.8"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return f"{value:.10g}"
    return str(value)
