"""Chart repository and index models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Repository:
    name: str
    base_url: str
    index_location: Path


@dataclass(frozen=True)
class ChartVersion:
    """One version record of a chart as published in a repository index."""

    name: str
    version: str
    urls: tuple[str, ...] = ()
    app_version: str = ""
    digest: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, d: dict) -> ChartVersion:
        urls = d.get("urls") or []
        if isinstance(urls, str):
            urls = [urls]
        return cls(
            name=str(d.get("name", "")),
            version=str(d.get("version", "")),
            urls=tuple(str(u) for u in urls),
            app_version=str(d.get("appVersion", "") or ""),
            digest=str(d.get("digest", "") or ""),
            raw=d,
        )


@dataclass
class IndexDocument:
    repository: Repository
    entries: Any
    api_version: str = ""
    generated: str = ""

    @classmethod
    def from_dict(cls, repository: Repository, d: dict) -> IndexDocument:
        return cls(
            repository=repository,
            entries=d.get("entries"),
            api_version=str(d.get("apiVersion", "") or ""),
            generated=str(d.get("generated", "") or ""),
        )
