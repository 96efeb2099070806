"""Logging setup and pipeline invocation shared by the sub-commands."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from helm_update_manager.config.settings import settings
from helm_update_manager.core.fetcher import HttpFetcher
from helm_update_manager.core.merge_engine import make_merger
from helm_update_manager.core.pipeline import run_pipeline
from helm_update_manager.errors import HmumError
from helm_update_manager.models.report import AppResult
from helm_update_manager.output.themes import styled_state

err_console = Console(stderr=True)

_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def configure_logging(verbosity: int) -> None:
    level = _LEVELS.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbosity > 1)],
        force=True,
    )
    # urllib3 is chatty at debug level
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def execute(
    files: list[Path],
    merge_tool: str | None = None,
    dry_run: bool = False,
) -> list[AppResult]:
    """Run the pipeline, turning a halting error into exit code 1."""
    run_settings = settings
    if merge_tool:
        run_settings = dataclasses.replace(settings, merge_tool=merge_tool)

    try:
        merger = make_merger(run_settings.merge_tool, run_settings.git_binary)
    except ValueError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2)

    def on_result(result: AppResult) -> None:
        versions = f" ({result.current_version} -> {result.latest_version})" if result.latest_version else ""
        err_console.print(
            f"[dim]{result.document.name}[/dim] {result.app_name}: {styled_state(result.state)}{versions}"
        )

    fetcher = HttpFetcher(timeout=run_settings.http_timeout)
    try:
        return run_pipeline(files, run_settings, fetcher, merger, dry_run=dry_run, on_result=on_result)
    except HmumError as e:
        err_console.print(f"[red bold]Error:[/red bold] {escape(e.describe())}")
        err_console.print("[dim]No further changes were made.[/dim]")
        raise typer.Exit(code=1)
    finally:
        fetcher.close()
