"""High-level orchestration for the Plex to Stash migration."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from tqdm import tqdm

from .applier import apply_updates
from .checks import build_worklist
from .client import GraphQLClient, StashClient, fetch_all_scenes
from .config import MigrationConfig
from .matching import match_records
from .models import CatalogRecord, ExternalRecord, RunSummary
from .normalization import load_plex_export, load_stash_scenes
from .report import DEFAULT_REPORT_NAME, write_results

LOGGER = logging.getLogger(__name__)

_BAR_FORMAT = "{desc} |{bar}| {percentage:3.0f}% || {n_fmt}/{total_fmt} Scenes || ETA: {remaining}"


@dataclass
class MigrationContext:
    """Everything a run needs, built once at startup."""

    config: MigrationConfig
    client: GraphQLClient

    @classmethod
    def from_config(cls, config: MigrationConfig) -> "MigrationContext":
        client = StashClient(config.graphql_url, config.graphql_api_key)
        return cls(config=config, client=client)


def load_catalog(context: MigrationContext, *, fetch_live: bool = False) -> list[CatalogRecord]:
    stash_json = context.config.stash_json
    if stash_json is not None and not fetch_live:
        LOGGER.info("Reading Stash scenes from %s", stash_json)
        return load_stash_scenes(stash_json)
    return fetch_all_scenes(context.client)


def _counted(pairs: Iterable[Tuple[ExternalRecord, CatalogRecord]], summary: RunSummary) -> Iterator[Tuple[ExternalRecord, CatalogRecord]]:
    for pair in pairs:
        summary.matched += 1
        yield pair


def run_migration(
    context: MigrationContext,
    *,
    output_path: Path = Path(DEFAULT_REPORT_NAME),
    simple_csv: bool = False,
    fetch_live: bool = False,
    dry_run: bool = False,
    show_progress: bool = True,
) -> RunSummary:
    """Load both sources, compute the worklist and apply it.

    Missing input files raise ``FileNotFoundError`` before any remote call.
    Nothing is written when the worklist is empty or ``dry_run`` is set.
    """

    summary = RunSummary(dry_run=dry_run)

    external = load_plex_export(context.config.plex_csv, simple=simple_csv)
    catalog = load_catalog(context, fetch_live=fetch_live)
    summary.external_total = len(external)
    summary.catalog_total = len(catalog)

    with tqdm(
        total=len(external),
        desc="Matching items",
        bar_format=_BAR_FORMAT,
        disable=not show_progress,
    ) as bar:
        pairs = match_records(external, catalog, on_progress=lambda position: bar.update(position - bar.n))
        worklist = build_worklist(_counted(pairs, summary))
    summary.candidates = len(worklist)

    LOGGER.info(
        "Found %d scenes to update out of %d total scenes",
        summary.candidates,
        summary.catalog_total,
    )
    if dry_run:
        for candidate in worklist:
            LOGGER.info(
                "[DRY RUN] %s (scene %s): views=%s rating=%s",
                candidate.path,
                candidate.id,
                candidate.views or "-",
                candidate.rating or "-",
            )
    if not worklist or dry_run:
        return summary

    with tqdm(
        total=len(worklist),
        desc="Updating scenes",
        bar_format=_BAR_FORMAT,
        disable=not show_progress,
    ) as bar:
        outcomes = apply_updates(
            context.client,
            worklist,
            observer=lambda done, total: bar.update(done - bar.n),
        )

    summary.succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
    summary.failed = len(outcomes) - summary.succeeded

    write_results(output_path, outcomes)
    summary.report_path = output_path
    return summary
