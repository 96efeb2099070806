"""Shared CLI options."""

from __future__ import annotations

import typer

FilesOption = typer.Option(
    ..., "--helmsmanconfig", "-f", help="Helmsman desired state file (repeatable)",
    exists=True, dir_okay=False, readable=True,
)
OutputOption = typer.Option("table", "--output", "-o", help="Output format: table, json, yaml")
VerboseOption = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)")
