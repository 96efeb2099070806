"""Three-way merge of a values overlay with old and new chart defaults."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Any, Protocol

import yaml
from deepdiff import DeepDiff

from helm_update_manager.core.diff3 import merge3
from helm_update_manager.errors import DefaultConfigMissing, MergeIOError, MergeToolUnavailable
from helm_update_manager.models import MergeOutcome

logger = logging.getLogger(__name__)

CURRENT_LABEL = "current"
BASE_LABEL = "base"
NEW_LABEL = "new"


class ThreeWayMerge(Protocol):
    def merge(self, current: Path, base: Path, other: Path) -> MergeOutcome:
        """Merge the changes from ``base`` to ``other`` into ``current`` in place."""
        ...


class GitMergeFile:
    """Runs ``git merge-file``, which needs no repository."""

    def __init__(self, git_binary: str = "git"):
        self.git_binary = git_binary

    def merge(self, current: Path, base: Path, other: Path) -> MergeOutcome:
        cmd = [
            self.git_binary, "merge-file", "--diff3",
            "-L", CURRENT_LABEL, "-L", BASE_LABEL, "-L", NEW_LABEL,
            str(current), str(base), str(other),
        ]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise MergeToolUnavailable(f"`{self.git_binary}` is not installed or not on PATH") from e
        except OSError as e:
            raise MergeToolUnavailable(f"Could not launch `{self.git_binary} merge-file`: {e}") from e

        # Exit status is the number of conflicts (capped at 127); errors are negative (255).
        if result.returncode == 0:
            return MergeOutcome.CLEAN
        if 0 < result.returncode < 128:
            return MergeOutcome.CONFLICTED
        raise MergeIOError(
            f"`git merge-file` failed on {current} (exit {result.returncode}): {result.stderr.strip()}"
        )


class BuiltinDiff3:
    """In-process diff3; the default backend.

    Unlike ``git merge-file`` it combines edits that only touch adjacent lines.
    """

    def merge(self, current: Path, base: Path, other: Path) -> MergeOutcome:
        try:
            current_text = current.read_text(encoding="utf-8")
            base_text = base.read_text(encoding="utf-8")
            other_text = other.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise MergeIOError(f"Could not read merge input: {e}") from e

        result = merge3(current_text, base_text, other_text, CURRENT_LABEL, BASE_LABEL, NEW_LABEL)
        try:
            with current.open("w", encoding="utf-8", newline="") as fh:
                fh.write(result.text)
        except OSError as e:
            raise MergeIOError(f"Could not write merge result to {current}: {e}") from e
        return MergeOutcome.CONFLICTED if result.conflicts else MergeOutcome.CLEAN


def make_merger(name: str, git_binary: str = "git") -> ThreeWayMerge:
    if name == "git":
        return GitMergeFile(git_binary)
    if name == "builtin":
        return BuiltinDiff3()
    raise ValueError(f"Unknown merge tool `{name}` (expected `git` or `builtin`)")


class OverlayMerger:
    """Checks the three inputs and delegates to a merge primitive."""

    def __init__(self, merger: ThreeWayMerge):
        self.merger = merger

    def merge(self, overlay: Path, base_default: Path, new_default: Path) -> MergeOutcome:
        if not base_default.is_file():
            raise DefaultConfigMissing(f"The currently pinned chart has no default values at {base_default.name}")
        if not new_default.is_file():
            raise DefaultConfigMissing(f"The latest chart has no default values at {new_default.name}")
        if not overlay.is_file():
            raise MergeIOError(f"Values file {overlay} disappeared before it could be merged")

        outcome = self.merger.merge(overlay, base_default, new_default)
        if outcome is MergeOutcome.CONFLICTED:
            logger.warning("Merge of %s left conflict markers; review before committing", overlay)
        else:
            logger.info("Merged upstream default changes into %s", overlay)
        return outcome


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        logger.debug("Failed to parse %s", path, exc_info=True)
        return None


def describe_default_changes(base_default: Path, new_default: Path) -> list[str]:
    """List what upstream changed in the chart defaults, in readable form."""
    old = _load_yaml(base_default)
    new = _load_yaml(new_default)
    if old is None and new is None:
        return []

    diff = DeepDiff(old or {}, new or {}, ignore_order=True, verbose_level=2)
    details: list[str] = []

    for path, change in diff.get("values_changed", {}).items():
        details.append(f"Changed {path}: {change.get('old_value')!r} -> {change.get('new_value')!r}")
    for path, change in diff.get("type_changes", {}).items():
        details.append(f"Changed {path}: {change.get('old_value')!r} -> {change.get('new_value')!r}")
    for path in diff.get("dictionary_item_added", {}):
        details.append(f"Added: {path}")
    for path in diff.get("dictionary_item_removed", {}):
        details.append(f"Removed: {path}")
    for path in diff.get("iterable_item_added", {}):
        details.append(f"List item added: {path}")
    for path in diff.get("iterable_item_removed", {}):
        details.append(f"List item removed: {path}")
    return details
