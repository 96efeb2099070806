"""In-place rewrite of a version pin in a desired state file.

The document is edited as text, never re-serialized, so comments, key order
and formatting of the hand-maintained file survive untouched.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from helm_update_manager.errors import AmbiguousVersionPin, DocumentUnreadable, VersionPinNotFound

logger = logging.getLogger(__name__)


def version_pin_pattern(version: str) -> re.Pattern[str]:
    """Match ``version: <version>`` lines, quoted or not, with an optional trailing comment.

    Group ``value`` spans exactly the version text.
    """
    return re.compile(
        r"^(?P<prefix>[ \t]*version[ \t]*:[ \t]*)"
        r"(?P<quote>[\"']?)(?P<value>" + re.escape(version) + r")(?P=quote)"
        r"(?P<suffix>[ \t]*(?:#[^\r\n]*)?)(?=\r?$)",
        re.MULTILINE,
    )


def _read(document_path: Path) -> str:
    try:
        with document_path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentUnreadable(f"Could not open file `{document_path}`: {e}") from e


def _single_pin(text: str, document_path: Path, application_name: str, expected: str) -> re.Match[str]:
    matches = list(version_pin_pattern(expected).finditer(text))
    if not matches:
        raise VersionPinNotFound(
            f"Could not find `version: {expected}` for app `{application_name}` "
            f"in {document_path}; did the file change concurrently?"
        )
    if len(matches) > 1:
        lines = ", ".join(str(text.count("\n", 0, m.start()) + 1) for m in matches)
        raise AmbiguousVersionPin(
            f"`version: {expected}` occurs {len(matches)} times in {document_path} "
            f"(lines {lines}); refusing to guess which one belongs to app `{application_name}`"
        )
    return matches[0]


def find_version_pin(document_path: Path, application_name: str, expected_current_version: str) -> int:
    """Return the 1-based line of the one pin ``rewrite_version`` would change.

    Raises the same errors ``rewrite_version`` would, without touching the file.
    """
    text = _read(document_path)
    match = _single_pin(text, document_path, application_name, expected_current_version)
    return text.count("\n", 0, match.start()) + 1


def rewrite_version(
    document_path: Path,
    application_name: str,
    expected_current_version: str,
    new_version: str,
) -> None:
    text = _read(document_path)
    match = _single_pin(text, document_path, application_name, expected_current_version)
    start, end = match.span("value")
    updated = text[:start] + new_version + text[end:]
    try:
        with document_path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(updated)
    except OSError as e:
        raise DocumentUnreadable(f"Could not write file `{document_path}`: {e}") from e
    logger.info("%s: %s pinned %s -> %s", document_path, application_name, expected_current_version, new_version)
