"""Drive resolution, merge and pin rewriting over every application."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from helm_update_manager.config.settings import Settings
from helm_update_manager.core.chart_archive import materialize_default_config
from helm_update_manager.core.fetcher import Fetcher
from helm_update_manager.core.merge_engine import OverlayMerger, ThreeWayMerge, describe_default_changes
from helm_update_manager.core.pin_rewriter import find_version_pin, rewrite_version
from helm_update_manager.core.repo_index import IndexResolver, latest_version, version_record
from helm_update_manager.core.scratch import ScratchArea
from helm_update_manager.core.spec_loader import load_release_spec
from helm_update_manager.errors import HmumError
from helm_update_manager.models import AppState
from helm_update_manager.models.release_spec import Application, ReleaseSpec
from helm_update_manager.models.report import AppResult

logger = logging.getLogger(__name__)

ResultCallback = Callable[[AppResult], None]


@dataclass
class _RunContext:
    scratch: ScratchArea
    fetcher: Fetcher
    merger: OverlayMerger
    resolver: IndexResolver
    settings: Settings
    dry_run: bool


def _process_app(spec: ReleaseSpec, app: Application, ctx: _RunContext, result: AppResult) -> None:
    """Advance one application through the state machine; result.state tracks progress."""
    if app.chart is None:
        result.state = AppState.SKIPPED
        result.notices.append("chart is not of the form repo/chart; not tracked")
        return

    repository = spec.repository(app.chart.repo_name)
    index = ctx.resolver.index_for(repository)
    result.state = AppState.REPO_RESOLVED

    latest = latest_version(index, app.chart.chart_name)
    result.latest_version = latest.version
    result.state = AppState.VERSION_COMPARED

    if latest.version == app.current_version:
        result.state = AppState.UP_TO_DATE
        return
    if ctx.dry_run:
        result.state = AppState.UPDATE_AVAILABLE
        return

    # The pin must be unambiguous before the overlay is touched.
    line = find_version_pin(spec.path, app.name, app.current_version)
    logger.debug("%s: pin for %s found on line %d", spec.path, app.name, line)

    if app.overlay_path is None:
        result.notices.append("no values file declared or found; nothing merged")
    else:
        result.state = AppState.MERGING
        current = version_record(index, app.chart.chart_name, app.current_version)
        base_default = materialize_default_config(
            ctx.scratch, current, repository, ctx.fetcher,
            chart_name=app.chart.chart_name,
            default_config_name=ctx.settings.default_config_name,
        )
        new_default = materialize_default_config(
            ctx.scratch, latest, repository, ctx.fetcher,
            chart_name=app.chart.chart_name,
            default_config_name=ctx.settings.default_config_name,
        )
        result.merge_outcome = ctx.merger.merge(app.overlay_path, base_default, new_default)
        result.default_changes = describe_default_changes(base_default, new_default)
        result.state = AppState.MERGED

    rewrite_version(spec.path, app.name, app.current_version, latest.version)
    result.state = AppState.PIN_REWRITTEN


def process_release_spec(
    spec: ReleaseSpec,
    ctx: _RunContext,
    on_result: ResultCallback | None = None,
) -> list[AppResult]:
    results: list[AppResult] = []
    for app in spec.applications:
        result = AppResult(
            document=spec.path,
            app_name=app.name,
            chart=str(app.chart) if app.chart else "",
            current_version=app.current_version,
            overlay_path=app.overlay_path,
        )
        try:
            _process_app(spec, app, ctx, result)
        except HmumError as e:
            failed_in = result.state
            result.state = AppState.FAILED
            e.add_context(
                f"processing app `{app.name}` (chart {result.chart or '-'}, state {failed_in.value}) "
                f"of {spec.path}"
            )
            if on_result:
                on_result(result)
            raise
        logger.info("%s: %s -> %s", app.name, app.current_version, result.state.value)
        results.append(result)
        if on_result:
            on_result(result)
    return results


def run_pipeline(
    paths: Iterable[Path],
    settings: Settings,
    fetcher: Fetcher,
    merger: ThreeWayMerge,
    dry_run: bool = False,
    on_result: ResultCallback | None = None,
) -> list[AppResult]:
    """Process every document in order, halting on the first error."""
    results: list[AppResult] = []
    with ScratchArea.acquire(settings.scratch_parent) as scratch:
        for path in paths:
            ctx = _RunContext(
                scratch=scratch,
                fetcher=fetcher,
                merger=OverlayMerger(merger),
                resolver=IndexResolver(),
                settings=settings,
                dry_run=dry_run,
            )
            spec = load_release_spec(path, scratch, fetcher, index_name=settings.index_name)
            results.extend(process_release_spec(spec, ctx, on_result))
    return results
