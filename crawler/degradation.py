"""
Fallback to the previous run's data when a source is unavailable.

Each function returns the value to publish plus, when earlier data had to
stand in or nothing usable was left, a warning message for the run report.
"""

from typing import List, Optional, Tuple

from crawler.sources.data import (
    MetricSet,
    PublicationRecord,
    PublicationSnapshot,
    Snapshot,
    WorkHistoryEntry,
)
from crawler.source_urls import ORCID_LABEL
from crawler.sources.publications import merge_publications


def metrics_with_fallback(
    scraped: MetricSet, previous: Snapshot
) -> Tuple[MetricSet, List[str]]:
    """Use the previous metrics as a whole when nothing was scraped this run."""
    warnings = []
    metrics = scraped
    if scraped.is_empty() and not previous.metrics.is_empty():
        metrics = previous.metrics.model_copy()
        warnings.append("Scholar metrics empty; using metrics from previous snapshot")
    if metrics.is_empty():
        warnings.append("Scholar metrics empty; possible blocking or HTML change")
    return metrics, warnings


def publications_with_fallback(
    scholar_items: Optional[List[PublicationRecord]],
    orcid_items: Optional[List[PublicationRecord]],
    previous: PublicationSnapshot,
) -> Tuple[List[PublicationRecord], List[str]]:
    """
    Merge publication candidates, standing in previous items for a missing source.

    A source that gave no rows this run (unreachable, skipped, or an empty
    page such as a bot check) is treated as unavailable.

    Args:
        scholar_items: Scholar rows, or None if Scholar was not crawled.
        orcid_items: Works from the registry, or None if it was unavailable.
        previous: Publications written by the previous run.
    """
    warnings = []
    if scholar_items:
        base = list(scholar_items)
    else:
        base = [_copy(item) for item in previous.items]
        warnings.append("Scholar crawl unavailable; keeping previous Scholar items and merging ORCID")

    if orcid_items:
        registry = list(orcid_items)
    else:
        registry = [_copy(item) for item in previous.items if ORCID_LABEL in item.sources]
        if registry:
            warnings.append("ORCID works unavailable; keeping previous ORCID items")

    items = merge_publications(base + registry)
    if not items:
        warnings.append("No publications from any source or previous snapshot")
    return items, warnings


def _copy(item: PublicationRecord) -> PublicationRecord:
    return item.model_copy(update={"sources": list(item.sources)})


def work_history_with_fallback(
    crawled: Optional[List[WorkHistoryEntry]], previous: Snapshot
) -> Tuple[List[WorkHistoryEntry], List[str]]:
    """Keep the previous work history when the employment source was unavailable."""
    if crawled is not None:
        return crawled, []
    if previous.work_history:
        return (
            [entry.model_copy() for entry in previous.work_history],
            ["ORCID employment unavailable; using work history from previous snapshot"],
        )
    return [], ["ORCID employment unavailable and no previous work history"]
