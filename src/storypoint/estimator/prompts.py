"""Interactive slice collection for terminal sessions.

Questions are written to stderr so stdout stays reserved for the estimate
(``storypoint estimate --json | jq`` works with interactive input).
"""

from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, InvalidResponse, Prompt

from storypoint.estimator.types import COMPLEXITIES, LAYERS, SLICE_TYPES, Slice, TaskInput

prompt_console = Console(stderr=True)


class DependencyCountPrompt(IntPrompt):
    """Integer prompt that re-asks on negative counts."""

    def process_response(self, value: str) -> int:
        count = super().process_response(value)
        if count < 0:
            raise InvalidResponse("[prompt.invalid]Please enter zero or a positive number")
        return count


def prompt_slice() -> Slice:
    """Ask for one slice, layer first, in the order the estimate report reads."""
    layer = Prompt.ask("Layer the slice belongs to", choices=list(LAYERS), console=prompt_console)
    slice_type = Prompt.ask("Slice type", choices=list(SLICE_TYPES), console=prompt_console)
    complexity = Prompt.ask("Slice complexity", choices=list(COMPLEXITIES), console=prompt_console)
    shared = Confirm.ask(
        "Is this slice referenced from other features?",
        default=False,
        console=prompt_console,
    )
    dependency_count = DependencyCountPrompt.ask(
        "How many other slices does this slice depend on?",
        default=0,
        console=prompt_console,
    )
    critical = Confirm.ask("Is this business-critical functionality?", default=False, console=prompt_console)
    return Slice(
        type=slice_type,
        complexity=complexity,
        layer=layer,
        is_shared_across_features=shared,
        dependency_count=dependency_count,
        is_business_critical=critical,
    )


def prompt_task(
    *,
    has_test: bool | None = None,
    is_refactor: bool | None = None,
) -> TaskInput:
    """Collect slices until the user stops, then the task-wide flags.

    Flags already supplied by the caller are not asked again.
    """
    slices: list[Slice] = []
    while True:
        slices.append(prompt_slice())
        if not Confirm.ask("Add another slice?", default=True, console=prompt_console):
            break

    if has_test is None:
        has_test = Confirm.ask("Does the task include test code?", default=True, console=prompt_console)
    if is_refactor is None:
        is_refactor = Confirm.ask(
            "Is this a refactor of existing functionality?",
            default=False,
            console=prompt_console,
        )

    return TaskInput(slices=tuple(slices), has_test=has_test, is_refactor=is_refactor)
