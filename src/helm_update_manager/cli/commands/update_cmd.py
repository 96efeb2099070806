"""hmum update - Bump chart pins and merge values files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from helm_update_manager.cli.options import FilesOption, OutputOption, VerboseOption
from helm_update_manager.cli.runner import configure_logging, execute
from helm_update_manager.output.formatters import output_results

app = typer.Typer()


@app.callback(invoke_without_command=True)
def update(
    helmsmanconfig: List[Path] = FilesOption,
    output: str = OutputOption,
    merge_tool: Optional[str] = typer.Option(
        None, "--merge-tool", "-m", help="Three-way merge backend: builtin or git (default from HMUM_MERGE_TOOL, else builtin)",
    ),
    verbose: int = VerboseOption,
) -> None:
    """Update every tracked app to its chart's latest version and merge its values file."""
    configure_logging(verbose)
    results = execute(helmsmanconfig, merge_tool=merge_tool)
    output_results(results, output, title="Chart Updates", verbose=verbose > 0)
