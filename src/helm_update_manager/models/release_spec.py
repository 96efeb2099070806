"""Release-spec (helmsman desired state file) models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from helm_update_manager.errors import RepositoryUndeclared
from helm_update_manager.models.repo import Repository

_CHART_DECLARATION = re.compile(r"^([^/\s]+)/([^/\s]+)$")


@dataclass(frozen=True)
class ChartRef:
    repo_name: str
    chart_name: str

    @classmethod
    def parse(cls, declaration: str) -> ChartRef | None:
        """Split a ``repo/chart`` declaration, or return None if it is not of that shape."""
        match = _CHART_DECLARATION.match(declaration.strip())
        if match is None:
            return None
        return cls(repo_name=match.group(1), chart_name=match.group(2))

    def __str__(self) -> str:
        return f"{self.repo_name}/{self.chart_name}"


@dataclass(frozen=True)
class Application:
    name: str
    chart: ChartRef | None
    current_version: str
    overlay_path: Path | None = None

    @property
    def is_tracked(self) -> bool:
        return self.chart is not None

    @property
    def repo_name(self) -> str | None:
        return self.chart.repo_name if self.chart else None

    @property
    def chart_name(self) -> str | None:
        return self.chart.chart_name if self.chart else None


@dataclass
class ReleaseSpec:
    path: Path
    repositories: dict[str, Repository] = field(default_factory=dict)
    applications: list[Application] = field(default_factory=list)

    def repository(self, name: str) -> Repository:
        try:
            return self.repositories[name]
        except KeyError:
            raise RepositoryUndeclared(
                f"Repository `{name}` is not declared in `helmRepos` of {self.path}"
            ) from None

    @property
    def tracked_applications(self) -> list[Application]:
        return [a for a in self.applications if a.is_tracked]
