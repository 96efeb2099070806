"""Chart archive download and extraction."""

from __future__ import annotations

import logging
import tarfile
import zlib
from pathlib import Path
from urllib.parse import urljoin, urlparse

from helm_update_manager.core.fetcher import FETCHABLE_SCHEMES, Fetcher
from helm_update_manager.core.scratch import ScratchArea
from helm_update_manager.errors import ArchiveCorrupt, ArchiveUnreachable, ArchiveUrlInvalid, FetchError
from helm_update_manager.models.repo import ChartVersion, Repository

logger = logging.getLogger(__name__)


def _is_absolute(url: str) -> bool:
    parsed = urlparse(url)
    return bool(parsed.scheme) and bool(parsed.netloc)


def resolve_archive_url(record: ChartVersion, repository: Repository) -> str:
    """Return the absolute URL of a record's first archive location.

    Charts published with relative URLs are resolved against the repository's
    base URL.
    """
    if not record.urls:
        raise ArchiveUrlInvalid(f"Chart `{record.name}` {record.version} has no download URLs")
    url = record.urls[0].strip()
    if not _is_absolute(url):
        base = repository.base_url if repository.base_url.endswith("/") else repository.base_url + "/"
        url = urljoin(base, url)
    parsed = urlparse(url)
    if parsed.scheme not in FETCHABLE_SCHEMES or not _is_absolute(url):
        raise ArchiveUrlInvalid(
            f"Cannot make sense of download URL `{record.urls[0]}` for chart `{record.name}` {record.version}"
        )
    return url


def _safe_members(archive: tarfile.TarFile, target: Path) -> list[tarfile.TarInfo]:
    """Reject members that would land outside ``target``."""
    root = target.resolve()
    members = archive.getmembers()
    for member in members:
        if member.issym() or member.islnk() or member.isdev():
            raise ArchiveCorrupt(f"Archive member `{member.name}` is a link or device")
        destination = (root / member.name).resolve()
        if destination != root and root not in destination.parents:
            raise ArchiveCorrupt(f"Archive member `{member.name}` escapes the extraction directory")
    return members


def extract_archive(archive_path: Path, target: Path) -> None:
    try:
        with tarfile.open(archive_path, mode="r:gz") as archive:
            archive.extractall(target, members=_safe_members(archive, target))
    except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
        raise ArchiveCorrupt(f"Could not unpack chart archive: {e}") from e


def materialize_default_config(
    scratch: ScratchArea,
    record: ChartVersion,
    repository: Repository,
    fetcher: Fetcher,
    chart_name: str | None = None,
    default_config_name: str = "values.yaml",
) -> Path:
    """Download and unpack a chart version; return the path of its default values file.

    The file is not checked for existence here: charts are expected to keep
    it at ``<chart>/<default_config_name>`` and the merge step reports it
    missing if they do not.
    """
    url = resolve_archive_url(record, repository)
    try:
        archive_path = scratch.download(url, fetcher)
    except FetchError as e:
        raise ArchiveUnreachable(f"Chart `{record.name}` {record.version} is unreachable: {e.message}") from e

    target = scratch.mkdir()
    try:
        extract_archive(archive_path, target)
    except ArchiveCorrupt as e:
        e.add_context(f"unpacking chart `{record.name}` {record.version} from {url}")
        raise
    logger.info("Unpacked %s %s", record.name, record.version)
    return target / (chart_name or record.name) / default_config_name
