"""Load helmsman desired state files into Repository/Application models."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml

from helm_update_manager.core.fetcher import FETCHABLE_SCHEMES, Fetcher
from helm_update_manager.core.repo_index import fetch_index
from helm_update_manager.core.scratch import ScratchArea
from helm_update_manager.errors import DocumentMalformed, DocumentUnreadable, HmumError
from helm_update_manager.models.release_spec import Application, ChartRef, ReleaseSpec

logger = logging.getLogger(__name__)

REPOS_KEY = "helmRepos"
APPS_KEY = "apps"


def read_document(path: Path) -> dict[str, Any]:
    """Parse a desired state file into a mapping."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentUnreadable(f"Could not open file `{path}`: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentMalformed(f"Could not parse helmsman config file `{path}`: {e}") from e
    if not isinstance(data, dict):
        raise DocumentMalformed(f"The helmsman config file `{path}` is not a mapping")
    return data


def _section(data: dict[str, Any], key: str, path: Path) -> dict[Any, Any]:
    if key not in data:
        raise DocumentMalformed(f"The helmsman DSF `{path}` doesn't define `{key}`!")
    section = data[key]
    if not isinstance(section, dict):
        raise DocumentMalformed(f"The `{key}` syntax in helmsman DSF `{path}` is incorrect!")
    return section


def parse_repositories(data: dict[str, Any], path: Path) -> dict[str, str]:
    """Return repo name -> base URL, validating shapes."""
    repos: dict[str, str] = {}
    for name, url in _section(data, REPOS_KEY, path).items():
        if not isinstance(name, str):
            raise DocumentMalformed(f"Helm repo name `{name}` is not a proper string in `{path}`")
        if not isinstance(url, str):
            raise DocumentMalformed(f"Helm repo URL of `{name}` is not a proper string in `{path}`")
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            raise DocumentMalformed(f"Could not parse URL `{url}` of repo `{name}` in `{path}`")
        if parsed.scheme not in FETCHABLE_SCHEMES:
            raise DocumentMalformed(
                f"Repo `{name}` in `{path}` uses `{parsed.scheme}:`; only http and https repositories are supported"
            )
        repos[name] = url
    return repos


def _overlay_declaration(name: str, record: dict[Any, Any], path: Path) -> str | None:
    """Return the declared values file, preferring `valuesFile` over the first of `valuesFiles`."""
    if record.get("valuesFile") is not None:
        value = record["valuesFile"]
        if not isinstance(value, str):
            raise DocumentMalformed(
                f"The value of the `valuesFile` property in app `{name}` in `{path}` is not a proper string!"
            )
        return value
    values = record.get("valuesFiles")
    if values is None:
        return None
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise DocumentMalformed(
            f"The `valuesFiles` property in app `{name}` in `{path}` is not a list of strings!"
        )
    return values[0] if values else None


def _resolve_overlay(name: str, declared: str | None, path: Path) -> Path | None:
    if declared is None:
        return None
    overlay = Path(declared)
    if not overlay.is_absolute():
        overlay = path.parent / overlay
    if not overlay.is_file():
        logger.warning("Values file %s of app %s does not exist; it will not be merged", overlay, name)
        return None
    return overlay


def parse_application(name: Any, record: Any, path: Path) -> Application:
    if not isinstance(name, str):
        raise DocumentMalformed(f"App name `{name}` is not a proper string in `{path}`")
    if not isinstance(record, dict):
        raise DocumentMalformed(f"The syntax of the app `{name}` in helmsman DSF `{path}` is incorrect!")

    declaration = record.get("chart")
    if declaration is None:
        raise DocumentMalformed(f"App `{name}` is missing the `chart` property in `{path}`")
    if not isinstance(declaration, str):
        raise DocumentMalformed(f"The value of the `chart` property in app `{name}` in `{path}` is not a proper string!")

    version = record.get("version")
    if version is None:
        raise DocumentMalformed(f"App `{name}` is missing the `version` property in `{path}`")
    if not isinstance(version, str):
        raise DocumentMalformed(
            f"The value of the `version` property in app `{name}` in `{path}` is not a proper string! "
            f"Quote it, e.g. version: \"{version}\""
        )

    chart = ChartRef.parse(declaration)
    if chart is None:
        logger.info("App %s uses chart `%s` which is not of the form repo/chart; not tracking it", name, declaration)

    return Application(
        name=name,
        chart=chart,
        current_version=version,
        overlay_path=_resolve_overlay(name, _overlay_declaration(name, record, path), path),
    )


def parse_applications(data: dict[str, Any], path: Path) -> list[Application]:
    return [parse_application(name, record, path) for name, record in _section(data, APPS_KEY, path).items()]


def load_release_spec(
    path: Path,
    scratch: ScratchArea,
    fetcher: Fetcher,
    index_name: str = "index.yaml",
) -> ReleaseSpec:
    """Load one desired state file, fetching the index of every declared repository."""
    data = read_document(path)
    repo_urls = parse_repositories(data, path)
    applications = parse_applications(data, path)

    spec = ReleaseSpec(path=path, applications=applications)
    for name, url in repo_urls.items():
        try:
            spec.repositories[name] = fetch_index(scratch, name, url, fetcher, index_name=index_name)
        except HmumError as e:
            e.add_context(f"loading repositories of {path}")
            raise
    logger.info("Loaded %s: %d repos, %d apps", path, len(spec.repositories), len(applications))
    return spec
