"""Load task descriptions (slices plus task flags) from YAML or JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from storypoint.estimator.types import Slice, TaskInput
from storypoint.schemas.validator import validate_data

TASK_REASON_MISSING = "TASK_MISSING"
TASK_REASON_PARSE_ERROR = "TASK_PARSE_ERROR"
TASK_REASON_SCHEMA_INVALID = "TASK_SCHEMA_INVALID"


class TaskFileError(ValueError):
    """Task file could not be located, parsed or validated."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = TASK_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


def task_from_dict(payload: dict[str, Any]) -> TaskInput:
    """Build a task from an already validated mapping."""
    return TaskInput(
        slices=tuple(Slice.from_dict(entry) for entry in payload.get("slices", [])),
        has_test=bool(payload.get("hasTest", False)),
        is_refactor=bool(payload.get("isRefactor", False)),
    )


def task_to_dict(task: TaskInput) -> dict[str, Any]:
    return {
        "slices": [item.to_dict() for item in task.slices],
        "hasTest": task.has_test,
        "isRefactor": task.is_refactor,
    }


def load_task(path: Path) -> TaskInput:
    """Parse and validate a task file.

    Files ending in ``.json`` are read as JSON; anything else goes through
    ``yaml.safe_load``.
    """
    if not path.exists():
        raise TaskFileError(f"Task file not found: {path}", TASK_REASON_MISSING)

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raw = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise TaskFileError(f"{path.name} parse error: {exc}", TASK_REASON_PARSE_ERROR) from exc

    if not isinstance(raw, dict):
        raise TaskFileError(
            f"{path.name} parse error: expected mapping at top level",
            TASK_REASON_PARSE_ERROR,
        )

    errors = validate_data(raw, "task")
    if errors:
        raise TaskFileError(f"{path.name} is invalid: {'; '.join(errors)}")

    return task_from_dict(raw)
