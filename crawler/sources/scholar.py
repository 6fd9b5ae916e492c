"""Parsing of a Google Scholar citations profile page."""

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from crawler.source_urls import SCHOLAR_LABEL
from .data import MetricSet, PublicationRecord
from .extract import safe_text

SCHOLAR_BASE_URL = "https://scholar.google.com"

# Row label in the statistics table -> MetricSet field
METRIC_LABELS = {
    "citations": "citations",
    "h-index": "h_index",
    "i10-index": "i10_index",
}


def extract_scholar_name(doc: Optional[BeautifulSoup]) -> str:
    if doc is None:
        return ""
    return safe_text(doc.select_one("#gsc_prf_in"))


def extract_metrics(doc: Optional[BeautifulSoup]) -> MetricSet:
    """
    Read citations, h-index and i10-index from the statistics table.

    Only the first value column ("All") is used. Rows with other labels are
    ignored; an absent page or table gives an all-empty MetricSet.
    """
    values = {}
    if doc is None:
        return MetricSet()

    for row in doc.select("#gsc_rsb_st tr"):
        label = safe_text(row.select_one(".gsc_rsb_f")).lower()
        field = METRIC_LABELS.get(label)
        if field is None:
            continue
        cells = row.select(".gsc_rsb_std")
        values[field] = safe_text(cells[0]) if cells else ""

    return MetricSet(**values)


def parse_publications(doc: Optional[BeautifulSoup]) -> List[PublicationRecord]:
    """Publication rows of the profile, in page order. Untitled rows are kept for the merger to drop."""
    if doc is None:
        return []

    publications = []
    for row in doc.select("#gsc_a_b .gsc_a_tr"):
        title_link = row.select_one(".gsc_a_at")
        gray = row.select(".gs_gray")
        href = title_link.get("href") if title_link is not None else None

        publications.append(
            PublicationRecord(
                title=safe_text(title_link),
                authors=safe_text(gray[0]) if gray else "",
                venue=safe_text(gray[1]) if len(gray) >= 2 else "",
                year=safe_text(row.select_one(".gsc_a_y span")),
                citations=safe_text(row.select_one(".gsc_a_c")),
                url=urljoin(SCHOLAR_BASE_URL, href) if href else "",
                sources=[SCHOLAR_LABEL],
            )
        )
    return publications
