"""hmum check - Report available chart updates without changing anything."""

from __future__ import annotations

from pathlib import Path
from typing import List

import typer

from helm_update_manager.cli.options import FilesOption, OutputOption, VerboseOption
from helm_update_manager.cli.runner import configure_logging, execute
from helm_update_manager.output.formatters import output_results

app = typer.Typer()


@app.callback(invoke_without_command=True)
def check(
    helmsmanconfig: List[Path] = FilesOption,
    output: str = OutputOption,
    verbose: int = VerboseOption,
) -> None:
    """Compare pinned chart versions with the latest in each repository index."""
    configure_logging(verbose)
    results = execute(helmsmanconfig, dry_run=True)
    output_results(results, output, title="Available Chart Updates")
