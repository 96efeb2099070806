"""Table / JSON / YAML output dispatch."""

from __future__ import annotations

import json
from typing import Any

import yaml
from rich.console import Console

from helm_update_manager.models.report import AppResult
from helm_update_manager.utils.version_compare import classify_update

console = Console()


def result_to_dict(r: AppResult) -> dict[str, Any]:
    return {
        "document": str(r.document),
        "app": r.app_name,
        "chart": r.chart or None,
        "current_version": r.current_version,
        "latest_version": r.latest_version or None,
        "update_type": classify_update(r.current_version, r.latest_version) if r.chart else None,
        "state": r.state.value,
        "merge": r.merge_outcome.value if r.merge_outcome else None,
        "values_file": str(r.overlay_path) if r.overlay_path else None,
        "notices": r.notices,
        "default_changes": r.default_changes,
    }


def output_results(results: list[AppResult], fmt: str, title: str = "Chart Updates", verbose: bool = False) -> None:
    if fmt == "json":
        data = [result_to_dict(r) for r in results]
        console.print_json(json.dumps(data, indent=2))
    elif fmt == "yaml":
        data = [result_to_dict(r) for r in results]
        console.print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    else:
        from helm_update_manager.output.tables import default_changes_panel, results_table
        console.print(results_table(results, title=title))
        if verbose:
            for r in results:
                if r.default_changes:
                    console.print(default_changes_panel(r))
        _print_summary(results)


def _print_summary(results: list[AppResult]) -> None:
    rewritten = [r for r in results if r.changed]
    review = [r for r in results if r.needs_review]
    for r in results:
        for notice in r.notices:
            console.print(f"[dim]{r.app_name}: {notice}[/dim]")
    if review:
        names = ", ".join(str(r.overlay_path) for r in review)
        console.print(f"\n[red bold]{len(review)} values file(s) have merge conflicts to resolve:[/red bold] {names}")
    if rewritten:
        console.print(f"\n[cyan]{len(rewritten)} version pin(s) updated[/cyan]")
