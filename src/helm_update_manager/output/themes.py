"""State, outcome and update-type color maps."""

from helm_update_manager.models import AppState, MergeOutcome

STATE_COLORS: dict[AppState, str] = {
    AppState.SKIPPED: "dim",
    AppState.UP_TO_DATE: "green",
    AppState.UPDATE_AVAILABLE: "yellow",
    AppState.PIN_REWRITTEN: "cyan bold",
    AppState.FAILED: "red bold",
}

OUTCOME_COLORS: dict[MergeOutcome, str] = {
    MergeOutcome.CLEAN: "green",
    MergeOutcome.CONFLICTED: "red bold",
}

UPDATE_COLORS: dict[str, str] = {
    "major": "red bold",
    "minor": "yellow",
    "patch": "green",
    "downgrade": "magenta",
    "equivalent": "yellow",
    "up-to-date": "dim",
    "unknown": "dim",
}


def styled_state(state: AppState) -> str:
    color = STATE_COLORS.get(state, "white")
    return f"[{color}]{state.value}[/{color}]"


def styled_outcome(outcome: MergeOutcome | None) -> str:
    if outcome is None:
        return "[dim]-[/dim]"
    color = OUTCOME_COLORS.get(outcome, "white")
    return f"[{color}]{outcome.value}[/{color}]"


def styled_update(update_type: str) -> str:
    color = UPDATE_COLORS.get(update_type, "white")
    return f"[{color}]{update_type}[/{color}]"
