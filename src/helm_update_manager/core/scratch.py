"""Ephemeral scratch storage for one pipeline run.

All downloads of a run (repository indices, chart archives and their
extracted contents) live in a single temporary directory that is removed when
the run ends, whichever way it ends.  The area is an explicitly owned object
passed to whoever needs it; nothing here is module-global.
"""

from __future__ import annotations

import logging
import secrets
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from helm_update_manager.core.fetcher import Fetcher
from helm_update_manager.errors import ScratchUnavailable

logger = logging.getLogger(__name__)

# 128 bits of randomness per file name
_NAME_BYTES = 16


class ScratchArea:
    def __init__(self, root: Path):
        self.root = root

    @classmethod
    @contextmanager
    def acquire(cls, parent: Path | None = None) -> Iterator[ScratchArea]:
        try:
            root = Path(tempfile.mkdtemp(prefix="hmum-", dir=parent))
        except OSError as e:
            raise ScratchUnavailable(f"Could not create a scratch directory: {e}") from e
        logger.debug("Scratch area at %s", root)
        try:
            yield cls(root)
        finally:
            shutil.rmtree(root, ignore_errors=True)
            logger.debug("Removed scratch area %s", root)

    def _fresh_path(self) -> Path:
        return self.root / secrets.token_hex(_NAME_BYTES)

    def put(self, chunks: Iterable[bytes]) -> Path:
        """Write a byte stream to a new randomly named file and return its path."""
        path = self._fresh_path()
        try:
            with path.open("xb") as fh:
                for chunk in chunks:
                    fh.write(chunk)
        except OSError as e:
            raise ScratchUnavailable(f"Could not write to scratch file {path}: {e}") from e
        return path

    def mkdir(self) -> Path:
        path = self._fresh_path()
        try:
            path.mkdir()
        except OSError as e:
            raise ScratchUnavailable(f"Could not create scratch directory {path}: {e}") from e
        return path

    def download(self, url: str, fetcher: Fetcher) -> Path:
        """Fetch ``url`` into the scratch area; FetchError propagates to the caller."""
        path = self.put(fetcher.fetch(url))
        logger.debug("Downloaded %s -> %s", url, path.name)
        return path
