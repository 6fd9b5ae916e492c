"""
Parsing of ORCID public API (v3.0) responses.

Works become publication candidates and employments become work history.
The API nests most values as ``{"value": ...}`` and leaves absent parts as
null, so every lookup goes through ``dig``.
"""

from typing import Any, List

from crawler.source_urls import ORCID_LABEL
from .data import PublicationRecord, WorkHistoryEntry, clean_scalar


def dig(data: Any, *keys: Any) -> Any:
    """Follow ``keys`` through nested dicts/lists, returning None on any miss."""
    for key in keys:
        if isinstance(data, dict):
            data = data.get(key)
        elif isinstance(data, list) and isinstance(key, int) and -len(data) <= key < len(data):
            data = data[key]
        else:
            return None
    return data


def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def format_orcid_date(date: Any) -> str:
    """``{"year": {"value": "2020"}, "month": {"value": "03"}}`` -> ``"2020-03"``."""
    if date is None:
        return ""
    if not isinstance(date, dict):
        return clean_scalar(date)
    parts = [clean_scalar(dig(date, part, "value")) for part in ("year", "month", "day")]
    return "-".join(part for part in parts if part)


def parse_works(data: Any) -> List[PublicationRecord]:
    """Publication candidates from a ``/works`` response, one per work summary."""
    publications = []
    for group in as_list(dig(data, "group")):
        for summary in as_list(dig(group, "work-summary")):
            publications.append(
                PublicationRecord(
                    title=clean_scalar(dig(summary, "title", "title", "value")),
                    venue=clean_scalar(dig(summary, "journal-title", "value")),
                    year=clean_scalar(dig(summary, "publication-date", "year", "value")),
                    url=clean_scalar(dig(summary, "url", "value")),
                    sources=[ORCID_LABEL],
                )
            )
    return publications


def _employment_summaries(group: Any) -> List[Any]:
    for path in (("employment-summary",), ("summaries", "employment-summary"), ("summary",), ("summaries",)):
        found = dig(group, *path)
        if found:
            return as_list(found)
    return []


def parse_employments(data: Any) -> List[WorkHistoryEntry]:
    """Work history from an ``/employments`` response, in API order."""
    groups = dig(data, "affiliation-group")
    if groups is None:
        groups = dig(data, "group")

    history = []
    for group in as_list(groups):
        for summary in _employment_summaries(group):
            payload = dig(summary, "employment-summary") or summary
            if not isinstance(payload, dict):
                continue
            history.append(
                WorkHistoryEntry(
                    role=clean_scalar(payload.get("role-title")),
                    organization=clean_scalar(dig(payload, "organization", "name")),
                    start_date=format_orcid_date(payload.get("start-date")),
                    end_date=format_orcid_date(payload.get("end-date")),
                )
            )
    return history
