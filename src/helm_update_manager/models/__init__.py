"""Data models for Helm Update Manager."""

from __future__ import annotations

import enum


class AppState(enum.Enum):
    LOADED = "loaded"
    SKIPPED = "skipped"
    REPO_RESOLVED = "repo-resolved"
    VERSION_COMPARED = "version-compared"
    UP_TO_DATE = "up-to-date"
    UPDATE_AVAILABLE = "update-available"
    MERGING = "merging"
    MERGED = "merged"
    PIN_REWRITTEN = "pin-rewritten"
    FAILED = "failed"


class MergeOutcome(enum.Enum):
    CLEAN = "clean"
    CONFLICTED = "conflicted"
