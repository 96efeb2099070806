"""Error taxonomy for the update pipeline.

Every error carries a context chain.  Layers that know more about where a
failure happened (the document, the application, the chart) append to it with
:meth:`HmumError.add_context` before re-raising, so the operator sees the full
trail once the run halts.
"""

from __future__ import annotations


class HmumError(Exception):
    """Base class for all pipeline failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, context: str) -> HmumError:
        self.context.append(context)
        return self

    def describe(self) -> str:
        lines = [self.message]
        lines.extend(f"  while {c}" for c in self.context)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()


class ScratchUnavailable(HmumError):
    """The scratch area could not be created or written to."""


class FetchError(HmumError):
    """A URL could not be fetched (transport error or non-success response)."""

    def __init__(self, message: str, url: str = "", status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


# Release-spec documents

class DocumentUnreadable(HmumError):
    pass


class DocumentMalformed(HmumError):
    pass


class RepositoryUndeclared(HmumError):
    pass


# Repository indices

class IndexUnreachable(HmumError):
    pass


class IndexMalformed(HmumError):
    pass


class IndexShapeInvalid(HmumError):
    pass


class ChartNotFound(HmumError):
    pass


class VersionNotFound(HmumError):
    pass


# Chart archives

class ArchiveUrlInvalid(HmumError):
    pass


class ArchiveUnreachable(HmumError):
    pass


class ArchiveCorrupt(HmumError):
    pass


# Merging

class DefaultConfigMissing(HmumError):
    pass


class MergeToolUnavailable(HmumError):
    pass


class MergeIOError(HmumError):
    pass


# Pin rewriting

class VersionPinNotFound(HmumError):
    pass


class AmbiguousVersionPin(HmumError):
    pass
