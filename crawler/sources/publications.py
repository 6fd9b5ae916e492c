"""
Merging of publication records from several sources.

Records are identified by their normalized title. When two sources list the
same publication, the record seen first keeps its values and only borrows the
fields it is missing from later ones.
"""

import re
from typing import Dict, Iterable, List

from .data import PublicationRecord

MERGED_FIELDS = ("authors", "venue", "year", "citations", "url")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_title(title: str) -> str:
    """Merge key for a title: lowercase, non-alphanumeric runs become one space."""
    if not title:
        return ""
    return _NON_ALNUM.sub(" ", title.lower()).strip()


def merge_publications(candidates: Iterable[PublicationRecord]) -> List[PublicationRecord]:
    """
    Collapse candidates that share a merge key.

    Args:
        candidates: Records from all sources, highest-priority source first.

    Returns:
        One record per key, in the order keys were first seen. Candidates
        whose title normalizes to nothing are dropped.
    """
    merged: Dict[str, PublicationRecord] = {}

    for item in candidates:
        key = normalize_title(item.title)
        if not key:
            continue

        existing = merged.get(key)
        if existing is None:
            merged[key] = item.model_copy(update={"sources": list(dict.fromkeys(item.sources))})
            continue

        for field in MERGED_FIELDS:
            if not getattr(existing, field):
                setattr(existing, field, getattr(item, field))
        for source in item.sources:
            if source not in existing.sources:
                existing.sources.append(source)

    return list(merged.values())
