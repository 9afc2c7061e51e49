"""Slice-based story point estimation subsystem."""

from storypoint.estimator.config import (
    DEFAULT_CONFIG_TEMPLATE,
    ConfigError,
    default_config,
    ensure_default_config,
    load_config,
    load_config_override,
    resolve_config,
)
from storypoint.estimator.reporting import (
    estimate_to_dict,
    render_estimate_report,
    render_estimate_summary,
)
from storypoint.estimator.scoring import (
    estimate,
    explain_estimate,
    explain_slice,
    score_slice,
    snap_to_scale,
)
from storypoint.estimator.tasks import TaskFileError, load_task
from storypoint.estimator.types import (
    FIBONACCI_SCALE,
    EstimatorConfig,
    Slice,
    SliceBreakdown,
    TaskEstimate,
    TaskInput,
)

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "FIBONACCI_SCALE",
    "ConfigError",
    "EstimatorConfig",
    "Slice",
    "SliceBreakdown",
    "TaskEstimate",
    "TaskFileError",
    "TaskInput",
    "default_config",
    "ensure_default_config",
    "estimate",
    "estimate_to_dict",
    "explain_estimate",
    "explain_slice",
    "load_config",
    "load_config_override",
    "load_task",
    "render_estimate_report",
    "render_estimate_summary",
    "resolve_config",
    "score_slice",
    "snap_to_scale",
]
