"""Per-application pipeline results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from helm_update_manager.models import AppState, MergeOutcome


@dataclass
class AppResult:
    document: Path
    app_name: str
    chart: str = ""
    current_version: str = ""
    latest_version: str = ""
    state: AppState = AppState.LOADED
    merge_outcome: MergeOutcome | None = None
    overlay_path: Path | None = None
    notices: list[str] = field(default_factory=list)
    default_changes: list[str] = field(default_factory=list)

    @property
    def needs_review(self) -> bool:
        return self.merge_outcome is MergeOutcome.CONFLICTED

    @property
    def changed(self) -> bool:
        return self.state is AppState.PIN_REWRITTEN
