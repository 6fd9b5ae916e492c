"""
Field extraction from fetched HTML documents.

A field is pulled out by an ordered list of strategies. Each strategy is a
plain function taking the parsed document and returning text or None; the
first non-empty result wins.
"""

import json
import logging
from typing import Callable, Iterable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], Optional[str]]

# Page titles that say nothing about who the page is for
GENERIC_TITLES = {
    "staff profile",
    "profile",
    "people profile",
    "person profile",
    "staff",
    "profile page",
}


def squish(text: Optional[str]) -> str:
    """Trim and collapse internal whitespace."""
    if not text:
        return ""
    return " ".join(str(text).split())


def safe_text(node) -> str:
    """Visible text of a node, or an empty string for a missing node."""
    if node is None:
        return ""
    return squish(node.get_text(" ", strip=True))


def is_generic_title(text: str) -> bool:
    return squish(text).lower() in GENERIC_TITLES


def first_non_empty(values: Iterable[Optional[str]]) -> str:
    """Return the first value that is a non-empty string."""
    for value in values:
        if value:
            return value
    return ""


def css(*selectors: str) -> Strategy:
    """Strategy: text of the first element matching any selector, in order."""

    def strategy(doc: BeautifulSoup) -> Optional[str]:
        for selector in selectors:
            text = safe_text(doc.select_one(selector))
            if text:
                return text
        return None

    return strategy


def meta(*selectors: str) -> Strategy:
    """Strategy: ``content`` attribute of the first matching metadata tag."""

    def strategy(doc: BeautifulSoup) -> Optional[str]:
        for selector in selectors:
            node = doc.select_one(selector)
            if node is not None and squish(node.get("content")):
                return squish(node.get("content"))
        return None

    return strategy


def json_ld(key: str = "name") -> Strategy:
    """Strategy: ``key`` of the first embedded JSON-LD block that has one.

    A block that is an array contributes its first element. Blocks that do not
    parse are skipped.
    """

    def strategy(doc: BeautifulSoup) -> Optional[str]:
        for node in doc.select("script[type='application/ld+json']"):
            text = node.string or node.get_text()
            if not text or not text.strip():
                continue
            try:
                data = json.loads(text)
            except ValueError:
                logger.debug("Ignoring malformed JSON-LD block")
                continue
            if isinstance(data, list):
                data = data[0] if data else None
            if not isinstance(data, dict):
                continue
            candidate = data.get(key)
            if candidate is not None and not isinstance(candidate, (dict, list)) and squish(str(candidate)):
                return squish(str(candidate))
        return None

    return strategy


def page_title() -> Strategy:
    """Strategy: the document ``<title>``."""

    def strategy(doc: BeautifulSoup) -> Optional[str]:
        return safe_text(doc.find("title")) or None

    return strategy


def extract(
    doc: Optional[BeautifulSoup],
    strategies: List[Strategy],
    reject: Optional[Callable[[str], bool]] = None,
) -> str:
    """
    Run strategies in order and return the first usable value.

    Args:
        doc: Parsed page, or None when the source was unavailable.
        strategies: Ordered extraction strategies.
        reject: Optional predicate; values it accepts are discarded and the
            chain moves on.

    Returns:
        The trimmed value, or an empty string when every strategy misses.
    """
    if doc is None:
        return ""
    for strategy in strategies:
        value = squish(strategy(doc))
        if not value:
            continue
        if reject is not None and reject(value):
            logger.debug(f"Rejected placeholder value {value!r}")
            continue
        return value
    return ""


def collect_text(doc: Optional[BeautifulSoup], selectors: List[str]) -> str:
    """Text of the first selector that matches something non-empty."""
    return extract(doc, [css(*selectors)])


def collect_list(doc: Optional[BeautifulSoup], selectors: List[str]) -> List[str]:
    """Texts of every element matching any selector, de-duplicated in order."""
    if doc is None:
        return []
    items: List[str] = []
    for selector in selectors:
        for node in doc.select(selector):
            text = safe_text(node)
            if text and text not in items:
                items.append(text)
    return items


def collect_image(doc: Optional[BeautifulSoup], selectors: List[str], base_url: str) -> str:
    """Absolute ``src`` of the first matching image."""
    if doc is None:
        return ""
    for selector in selectors:
        node = doc.select_one(selector)
        if node is not None and squish(node.get("src")):
            return urljoin(base_url, squish(node.get("src")))
    return ""


# Name of the person a profile page is about. The site name and secondary
# headings at the end only come into play when everything above was missing
# or a generic placeholder.
NAME_STRATEGIES: List[Strategy] = [
    *(
        css(selector)
        for selector in (
            "h1",
            ".profile__name",
            ".person-name",
            ".profile-name",
            ".profile h1",
            ".page-title",
            ".profile__title",
        )
    ),
    meta("meta[property='og:title']"),
    meta(
        "meta[name='author']",
        "meta[name='citation_author']",
        "meta[name='DC.creator']",
        "meta[name='dc.creator']",
    ),
    json_ld("name"),
    page_title(),
    meta("meta[property='og:site_name']"),
    *(css(selector) for selector in ("header h1", ".profile__header h1", ".profile h1", "h2")),
]


def extract_name(doc: Optional[BeautifulSoup]) -> str:
    """Person name from a profile page, skipping generic titles like "Staff Profile"."""
    return extract(doc, NAME_STRATEGIES, reject=is_generic_title)
