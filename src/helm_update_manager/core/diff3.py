"""Line-based three-way merge with diff3 semantics.

Each divergent version is diffed against the common ancestor into hunks, i.e.
base line ranges with their replacement lines.  Hunks from both sides are
grouped wherever their base ranges overlap.  A group touched by one side only
takes that side; a group both sides rewrote identically is taken once;
anything else becomes a conflict carrying all three variants.  Edits that
merely sit next to each other, such as an insertion right after a line the
other side changed, combine cleanly.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Iterator

START_MARKER = "<<<<<<<"
BASE_MARKER = "|||||||"
MID_MARKER = "======="
END_MARKER = ">>>>>>>"

CURRENT = "current"
OTHER = "other"


@dataclass
class MergeResult:
    lines: list[str]
    conflicts: int

    @property
    def text(self) -> str:
        return "".join(self.lines)


@dataclass(frozen=True)
class Hunk:
    """Base lines ``[start, end)`` replaced by ``lines`` on one side."""

    side: str
    start: int
    end: int
    lines: tuple[str, ...]


def diff_hunks(base: list[str], version: list[str], side: str) -> list[Hunk]:
    matcher = SequenceMatcher(None, base, version, autojunk=False)
    return [
        Hunk(side, i1, i2, tuple(version[j1:j2]))
        for tag, i1, i2, j1, j2 in matcher.get_opcodes()
        if tag != "equal"
    ]


def _overlaps(hunk: Hunk, lo: int, hi: int) -> bool:
    # Two insertions at the same point collide; touching ranges do not.
    if hunk.start == hunk.end and lo == hi:
        return hunk.start == lo
    return hunk.start < hi and lo < hunk.end


def group_hunks(current: list[Hunk], other: list[Hunk]) -> Iterator[tuple[int, int, list[Hunk]]]:
    """Yield ``(lo, hi, hunks)`` for each run of hunks whose base ranges overlap."""
    group: list[Hunk] = []
    lo = hi = 0
    for hunk in sorted(current + other, key=lambda h: (h.start, h.end)):
        if group and not _overlaps(hunk, lo, hi):
            yield lo, hi, group
            group = []
        if not group:
            lo, hi = hunk.start, hunk.end
        group.append(hunk)
        lo, hi = min(lo, hunk.start), max(hi, hunk.end)
    if group:
        yield lo, hi, group


def _apply(base: list[str], lo: int, hi: int, hunks: list[Hunk]) -> list[str]:
    out: list[str] = []
    pos = lo
    for hunk in hunks:
        out.extend(base[pos:hunk.start])
        out.extend(hunk.lines)
        pos = hunk.end
    out.extend(base[pos:hi])
    return out


def _terminated(lines: list[str]) -> list[str]:
    if lines and not lines[-1].endswith("\n"):
        return lines[:-1] + [lines[-1] + "\n"]
    return lines


def merge3(
    current: str,
    base: str,
    other: str,
    current_label: str = "current",
    base_label: str = "base",
    other_label: str = "new",
) -> MergeResult:
    """Merge ``other``'s changes to ``base`` into ``current``."""
    base_lines = base.splitlines(keepends=True)
    current_hunks = diff_hunks(base_lines, current.splitlines(keepends=True), CURRENT)
    other_hunks = diff_hunks(base_lines, other.splitlines(keepends=True), OTHER)

    out: list[str] = []
    conflicts = 0
    pos = 0
    for lo, hi, hunks in group_hunks(current_hunks, other_hunks):
        out.extend(base_lines[pos:lo])
        pos = hi
        ours = _apply(base_lines, lo, hi, [h for h in hunks if h.side == CURRENT])
        theirs = _apply(base_lines, lo, hi, [h for h in hunks if h.side == OTHER])
        sides = {h.side for h in hunks}
        if OTHER not in sides or ours == theirs:
            out.extend(ours)
        elif CURRENT not in sides:
            out.extend(theirs)
        else:
            conflicts += 1
            out = _terminated(out)
            out.append(f"{START_MARKER} {current_label}\n")
            out.extend(_terminated(ours))
            out.append(f"{BASE_MARKER} {base_label}\n")
            out.extend(_terminated(base_lines[lo:hi]))
            out.append(f"{MID_MARKER}\n")
            out.extend(_terminated(theirs))
            out.append(f"{END_MARKER} {other_label}\n")
    out.extend(base_lines[pos:])
    return MergeResult(lines=out, conflicts=conflicts)
