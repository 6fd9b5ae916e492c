"""
One crawl run: fetch every source, extract, merge, compose, write.

Sources are fetched one after another. A source that fails only costs its own
fields, which fall back to local or previous data; the only error that stops
a run is failing to write the snapshot files.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from config.settings import Settings
from crawler.compose import build_snapshots, compose_profile
from crawler.degradation import (
    metrics_with_fallback,
    publications_with_fallback,
    work_history_with_fallback,
)
from crawler.source_urls import NCL, ORCID_EMPLOYMENT, ORCID_WORKS, SCHOLAR, source_urls
from crawler.sources import orcid, scholar
from crawler.sources.data import (
    PublicationSnapshot,
    Snapshot,
    load_base_profile,
    load_default_qualifications,
    load_overrides,
    load_previous_publications,
    load_previous_snapshot,
    write_snapshots,
)
from crawler.sources.fetcher import FetchOutcome, SourceFetcher, skipped
from crawler.sources.staff_profile import parse_staff_profile

logger = logging.getLogger(__name__)


@dataclass
class CrawlReport:
    """Result of a crawl run."""

    snapshot: Snapshot
    publications: PublicationSnapshot
    unavailable: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _warn(report_warnings: List[str], message: str) -> None:
    logger.warning(message)
    report_warnings.append(message)


def run_crawl(
    settings: Settings,
    fetcher: Optional[SourceFetcher] = None,
    skip_scholar: Optional[bool] = None,
    write: bool = True,
) -> CrawlReport:
    """
    Crawl all sources and write ``crawl.yml`` and ``publications.yml``.

    Args:
        settings: Source URLs and data paths.
        fetcher: Fetcher to use; one is built from ``settings`` if omitted.
        skip_scholar: Disable the Scholar source; defaults to ``settings.skip_scholar``.
        write: Persist the snapshots. Off for dry runs.

    Returns:
        CrawlReport with the composed documents and any warnings.

    Raises:
        SnapshotWriteError: if the snapshots cannot be written.
    """
    if fetcher is None:
        fetcher = SourceFetcher(
            user_agent=settings.user_agent,
            timeout=settings.request_timeout,
            capture_path=settings.raw_capture_path,
        )
    if skip_scholar is None:
        skip_scholar = settings.skip_scholar

    warnings: List[str] = []
    urls = source_urls(settings)

    previous = load_previous_snapshot(settings.snapshot_path)
    previous_pubs = load_previous_publications(settings.publications_path)

    # Fetch
    outcomes = {NCL: fetcher.fetch_html(NCL, urls[NCL])}
    if skip_scholar:
        _warn(warnings, "Skipping Scholar crawl in restricted environment to avoid 403 blocking")
        outcomes[SCHOLAR] = skipped(SCHOLAR)
    else:
        outcomes[SCHOLAR] = fetcher.fetch_html(SCHOLAR, urls[SCHOLAR])
    outcomes[ORCID_WORKS] = fetcher.fetch_json(ORCID_WORKS, urls[ORCID_WORKS])
    outcomes[ORCID_EMPLOYMENT] = fetcher.fetch_json(ORCID_EMPLOYMENT, urls[ORCID_EMPLOYMENT])

    unavailable = [name for name, outcome in outcomes.items() if not outcome.available]
    for name in unavailable:
        if not outcomes[name].skipped:
            _warn(warnings, f"{name} crawl failed; raw response saved to {settings.raw_capture_path(name)}")

    # Extract
    staff_doc = outcomes[NCL].document
    scholar_doc = outcomes[SCHOLAR].document

    staff = parse_staff_profile(
        staff_doc,
        urls[NCL],
        affiliation=settings.staff_affiliation,
        photo_url=settings.staff_photo_url,
    )
    if staff_doc is not None and not staff.name:
        _warn(warnings, f"{NCL} name extraction empty; check {settings.raw_capture_path(NCL)}")

    metrics, notes = metrics_with_fallback(scholar.extract_metrics(scholar_doc), previous)
    for note in notes:
        _warn(warnings, note)

    items, notes = publications_with_fallback(
        scholar.parse_publications(scholar_doc) if scholar_doc is not None else None,
        orcid.parse_works(outcomes[ORCID_WORKS].document) if outcomes[ORCID_WORKS].available else None,
        previous_pubs,
    )
    for note in notes:
        _warn(warnings, note)

    employment = _employment(outcomes[ORCID_EMPLOYMENT])
    work_history, notes = work_history_with_fallback(employment, previous)
    for note in notes:
        _warn(warnings, note)

    # Compose
    profile = compose_profile(
        scholar.extract_scholar_name(scholar_doc),
        staff,
        load_base_profile(settings.profile_path),
        previous.profile,
    )
    if not profile.name:
        _warn(warnings, "Profile name is empty after all fallbacks")

    snapshot, publications = build_snapshots(
        profile=profile,
        metrics=metrics,
        work_history=work_history,
        qualifications=load_default_qualifications(settings.sections_extra_path),
        sources=list(urls.values()),
        publications=items,
        overrides=load_overrides(settings.overrides_path),
    )

    if write:
        write_snapshots(snapshot, publications, settings.snapshot_path, settings.publications_path)

    return CrawlReport(
        snapshot=snapshot,
        publications=publications,
        unavailable=unavailable,
        warnings=warnings,
    )


def _employment(outcome: FetchOutcome):
    if not outcome.available:
        return None
    return orcid.parse_employments(outcome.document)
