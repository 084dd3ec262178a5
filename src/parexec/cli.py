# cli.py
from __future__ import annotations

import sys
from pathlib import Path

import click

from parexec.config import DEFAULT_CONFIG_PATH, ConfigError, load_graph
from parexec.model import JobGraph
from parexec.pool import Coordinator, default_pool_size
from parexec.ui.console import Console, set_console, get_console


def load_or_exit(config_path: str) -> JobGraph:
    """
    Load the job graph, or report the problem and exit.

    Nothing has been started at this point, so a bad config never runs
    any part of the pipeline.
    """
    console = get_console()
    try:
        return load_graph(config_path)
    except ConfigError as e:
        console.print_error(
            "Failed to load config",
            f"{e.message}: {e.path}",
            details=e.details,
            suggestion="Fix the file or point at another one:\n  parexec run --config my_config.yaml",
        )
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (worker diagnostics and stack traces)",
)
@click.pass_context
def cli(ctx, debug):
    """parexec: run command groups in parallel from a yaml description."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True, help="Config file path")
@click.option("--workers", default=None, type=click.IntRange(min=1), help="Number of parallel workers [default: CPU count]")
@click.option("--print-plan/--no-print-plan", default=False, show_default=True, help="Print jobs before running them")
@click.pass_context
def run(ctx, config_path, workers, print_plan):
    """Run every group in the config; groups in parallel, commands in order."""
    console = get_console()

    graph = load_or_exit(config_path)
    workers = workers or default_pool_size()

    if print_plan:
        console.print_plan(graph)
    if console.debug:
        console.print_run_started(
            config=Path(config_path).name,
            job_count=len(graph),
            workers=workers,
        )

    try:
        results = Coordinator(workers=workers, reporter=console).run(graph)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)

    console.print_debug(f"{len(results)} job(s) completed")


@cli.command()
@click.option("--config", "config_path", default=DEFAULT_CONFIG_PATH, show_default=True, help="Config file path")
def validate(config_path):
    """Check the config and print the jobs it defines."""
    console = get_console()
    graph = load_or_exit(config_path)
    console.print_plan(graph)


if __name__ == "__main__":
    cli()
