"""
Shared fixtures for helm-update-manager tests.

Provides:
- A fake fetcher serving in-memory repository indices and chart archives
- Builders for chart .tgz archives and helmsman desired state files
- A scratch area per test
"""
import io
import tarfile
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import pytest
import yaml

from helm_update_manager.config.settings import Settings
from helm_update_manager.core.scratch import ScratchArea
from helm_update_manager.errors import FetchError

REPO_URL = "https://charts.example.com/stable"


def build_chart_archive(chart_name: str, values: Optional[str], extra: Optional[Dict[str, str]] = None) -> bytes:
    """Build a gzip tarball laid out like `helm package` output."""
    files = {f"{chart_name}/Chart.yaml": f"apiVersion: v2\nname: {chart_name}\n"}
    if values is not None:
        files[f"{chart_name}/values.yaml"] = values
    files.update(extra or {})

    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


class FakeFetcher:
    """Serves registered URLs from memory and records every request."""

    def __init__(self):
        self.responses: Dict[str, bytes] = {}
        self.requested: List[str] = []

    def add(self, url: str, body: bytes) -> None:
        self.responses[url] = body

    def fetch(self, url: str) -> Iterator[bytes]:
        self.requested.append(url)
        if url not in self.responses:
            raise FetchError(f"Could not fetch {url}: HTTP 404 Not Found", url=url, status_code=404)
        body = self.responses[url]
        # two chunks, to exercise streaming writes
        yield body[: len(body) // 2]
        yield body[len(body) // 2:]

    def close(self) -> None:
        pass

    def archive_requests(self) -> List[str]:
        return [u for u in self.requested if u.endswith(".tgz")]


class FakeChartRepo:
    """A chart repository whose index and archives are served by a FakeFetcher."""

    def __init__(self, fetcher: FakeFetcher, base_url: str = REPO_URL):
        self.fetcher = fetcher
        self.base_url = base_url
        self.entries: Dict[str, list] = {}

    def add_version(self, chart: str, version: str, values: Optional[str] = "", relative_url: bool = True,
                    archive: Optional[bytes] = None) -> None:
        """Append a version; call in newest-first order like a real index."""
        filename = f"{chart}-{version}.tgz"
        url = filename if relative_url else f"{self.base_url}/{filename}"
        self.entries.setdefault(chart, []).append({
            "apiVersion": "v2",
            "name": chart,
            "version": version,
            "appVersion": version,
            "urls": [url],
            "digest": "0" * 64,
        })
        self.fetcher.add(f"{self.base_url}/{filename}", archive if archive is not None
                         else build_chart_archive(chart, values))
        self.publish()

    def publish(self) -> None:
        index = {"apiVersion": "v1", "entries": self.entries, "generated": "2024-01-01T00:00:00Z"}
        self.fetcher.add(f"{self.base_url}/index.yaml", yaml.safe_dump(index).encode("utf-8"))


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def chart_repo(fetcher: FakeFetcher) -> FakeChartRepo:
    return FakeChartRepo(fetcher)


@pytest.fixture
def scratch() -> Iterator[ScratchArea]:
    with ScratchArea.acquire() as area:
        yield area


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    return Settings(
        index_name="index.yaml",
        default_config_name="values.yaml",
        merge_tool="builtin",
        git_binary="git",
        http_timeout=None,
        scratch_parent=None,
    )


@pytest.fixture
def write_dsf(tmp_path: Path):
    """Factory fixture writing a desired state file into tmp_path."""
    def _write(content: str, name: str = "dsf.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
