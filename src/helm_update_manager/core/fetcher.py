"""HTTP transport for index and chart archive downloads."""

from __future__ import annotations

import logging
from typing import Iterator, Protocol

import requests

from helm_update_manager import __version__
from helm_update_manager.errors import FetchError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
# requests has no adapter for file: or other schemes
FETCHABLE_SCHEMES = ("http", "https")


class Fetcher(Protocol):
    def fetch(self, url: str) -> Iterator[bytes]:
        """Yield the body of ``url`` in chunks; raise FetchError on any failure."""
        ...


class HttpFetcher:
    """Streams URLs with a shared requests session."""

    def __init__(self, timeout: float | None = None, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", f"hmum/{__version__}")

    def fetch(self, url: str) -> Iterator[bytes]:
        logger.debug("GET %s", url)
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Could not fetch {url}: {e}", url=url) from e

        with response:
            if not response.ok:
                raise FetchError(
                    f"Could not fetch {url}: HTTP {response.status_code} {response.reason}",
                    url=url,
                    status_code=response.status_code,
                )
            try:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        yield chunk
            except requests.RequestException as e:
                raise FetchError(f"Connection to {url} broke off: {e}", url=url) from e

    def close(self) -> None:
        self.session.close()
