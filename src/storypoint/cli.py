"""storypoint CLI - slice-based story point estimation commands."""

import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from storypoint import __version__
from storypoint.estimator import (
    ConfigError,
    TaskFileError,
    ensure_default_config,
    estimate_to_dict,
    explain_estimate,
    load_config,
    load_task,
    render_estimate_report,
    render_estimate_summary,
)
from storypoint.estimator.prompts import prompt_task
from storypoint.estimator.types import DEFAULT_CONFIG_RELATIVE_PATH, TaskInput

logger = logging.getLogger(__name__)

cli = typer.Typer(
    name="storypoint",
    help="storypoint - estimate story points from architectural slices",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(
    name="config",
    help="Inspect and initialize the estimator configuration",
    no_args_is_help=True,
)
cli.add_typer(config_app, name="config")


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging of every scoring step.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show storypoint version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Configure logging before any subcommand runs."""
    _ = version
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _fail(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return typer.Exit(1)


@cli.command(name="estimate")
def estimate_cmd(
    task: Path | None = typer.Option(
        None,
        "--task",
        help="Task file (YAML or JSON) listing slices; prompts interactively when omitted",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config override file (defaults to ./.spconfig.json when present)",
    ),
    report: bool = typer.Option(
        False,
        "--report",
        help="Print the per-slice scoring breakdown",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the estimate as JSON instead of text",
    ),
    has_test: bool | None = typer.Option(
        None,
        "--test/--no-test",
        help="Task includes test code (overrides the task file)",
    ),
    is_refactor: bool | None = typer.Option(
        None,
        "--refactor/--no-refactor",
        help="Task refactors existing functionality (overrides the task file)",
    ),
) -> None:
    """Estimate story points for a task made of slices."""
    try:
        resolved_config = load_config(config)
    except ConfigError as exc:
        raise _fail(exc) from exc

    if task is not None:
        try:
            task_input = load_task(task)
        except TaskFileError as exc:
            raise _fail(exc) from exc
        task_input = TaskInput(
            slices=task_input.slices,
            has_test=task_input.has_test if has_test is None else has_test,
            is_refactor=task_input.is_refactor if is_refactor is None else is_refactor,
        )
    else:
        task_input = prompt_task(has_test=has_test, is_refactor=is_refactor)

    logger.debug("Estimating %d slice(s)", len(task_input.slices))
    result = explain_estimate(
        task_input.slices,
        task_input.has_test,
        task_input.is_refactor,
        resolved_config,
    )

    if json_output:
        typer.echo(json.dumps(estimate_to_dict(result), indent=2, sort_keys=True))
        return

    if report:
        console.print(render_estimate_report(result), markup=False, highlight=False)
    console.print(f"\n[green]✓ {render_estimate_summary(result)}[/green]")


@config_app.command(name="init")
def config_init(
    path: Path = typer.Option(
        DEFAULT_CONFIG_RELATIVE_PATH,
        "--path",
        help="Where to write the default configuration (.json, .yaml or .yml)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write the default configuration template."""
    try:
        created = ensure_default_config(path, force=force)
    except FileExistsError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        console.print("[yellow]Use --force to overwrite.[/yellow]")
        raise typer.Exit(1) from exc

    console.print("[green]✓ Config initialized[/green]")
    console.print(f"[cyan]Path:[/cyan] {escape(str(created))}")


@config_app.command(name="show")
def config_show(
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Config override file (defaults to ./.spconfig.json when present)",
    ),
) -> None:
    """Print the resolved configuration as JSON."""
    try:
        resolved = load_config(config)
    except ConfigError as exc:
        raise _fail(exc) from exc

    typer.echo(json.dumps(resolved.to_dict(), indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
