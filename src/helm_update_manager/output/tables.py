"""Rich table builders for pipeline results."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table

from helm_update_manager.models.report import AppResult
from helm_update_manager.output.themes import styled_outcome, styled_state, styled_update
from helm_update_manager.utils.version_compare import classify_update


def results_table(results: list[AppResult], title: str = "Chart Updates") -> Table:
    table = Table(title=title, expand=True)
    table.add_column("Document", style="blue", no_wrap=True, max_width=30)
    table.add_column("App", style="bold white", no_wrap=True)
    table.add_column("Chart", style="magenta", no_wrap=True)
    table.add_column("Current", style="dim")
    table.add_column("Latest", style="bold")
    table.add_column("Update Type", no_wrap=True)
    table.add_column("State", no_wrap=True)
    table.add_column("Merge", no_wrap=True)

    for r in results:
        update_type = classify_update(r.current_version, r.latest_version) if r.chart else "-"
        table.add_row(
            r.document.name,
            r.app_name,
            r.chart or "-",
            r.current_version,
            r.latest_version or "-",
            styled_update(update_type) if r.chart else "-",
            styled_state(r.state),
            styled_outcome(r.merge_outcome),
        )
    return table


def default_changes_panel(result: AppResult, limit: int = 20) -> Panel:
    lines = result.default_changes[:limit]
    if len(result.default_changes) > limit:
        lines.append(f"... +{len(result.default_changes) - limit} more")
    body = "\n".join(lines) if lines else "(no changes to default values)"
    title = f"[bold]{result.app_name}: {result.current_version} -> {result.latest_version}[/bold]"
    return Panel(body, title=title, border_style="blue")
