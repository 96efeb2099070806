"""Semver classification for reporting.

Only used to label updates for the operator.  Whether an application is up to
date is decided by plain string equality in the pipeline.
"""

from __future__ import annotations

from packaging.version import InvalidVersion, Version


def parse_version(v: str) -> Version | None:
    """Parse a version string, returning None on failure."""
    try:
        return Version(v)
    except InvalidVersion:
        # Try stripping leading 'v'
        if v.startswith("v"):
            try:
                return Version(v[1:])
            except InvalidVersion:
                pass
    return None


def classify_update(current: str, latest: str) -> str:
    """Classify the update type between two version strings.

    Returns: "major", "minor", "patch", "up-to-date", "equivalent", "downgrade"
    or "unknown".  "equivalent" marks differently written pins of the same
    version, e.g. 1.0 and 1.0.0.
    """
    if not latest:
        return "unknown"
    if current == latest:
        return "up-to-date"
    cur = parse_version(current)
    lat = parse_version(latest)

    if cur is None or lat is None:
        return "unknown"
    if lat == cur:
        return "equivalent"
    if lat < cur:
        return "downgrade"
    if lat.major > cur.major:
        return "major"
    if lat.minor > cur.minor:
        return "minor"
    return "patch"
