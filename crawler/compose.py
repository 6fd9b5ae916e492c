"""Assembly of the snapshot documents from extracted and local data."""

from datetime import datetime, timezone
from typing import List, Optional

from crawler.sources.data import (
    MetricSet,
    ProfileFields,
    ProfileOverrides,
    PublicationRecord,
    PublicationSnapshot,
    Snapshot,
    WorkHistoryEntry,
)
from crawler.sources.extract import first_non_empty

SCALAR_FIELDS = ("role", "affiliation", "email", "location", "bio", "photo_url")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def compose_profile(
    scholar_name: str,
    staff: ProfileFields,
    base: ProfileFields,
    previous: ProfileFields,
) -> ProfileFields:
    """
    Resolve every profile field independently, first non-empty wins.

    The name prefers Scholar, then the staff page; all other fields start at
    the staff page. The local base profile and then the previous snapshot fill
    whatever is still missing.
    """
    name = first_non_empty([scholar_name, staff.name, base.name, previous.name])
    values = {
        field: first_non_empty([getattr(staff, field), getattr(base, field), getattr(previous, field)])
        for field in SCALAR_FIELDS
    }
    interests = staff.research_interests or base.research_interests or previous.research_interests

    return ProfileFields(
        name=name,
        research_interests=list(interests),
        photo_alt=first_non_empty([staff.photo_alt, base.photo_alt, previous.photo_alt, name]),
        **values,
    )


def apply_overrides(snapshot: Snapshot, overrides: ProfileOverrides) -> Snapshot:
    """Replace composed values with every non-empty override. Lists are replaced whole."""
    profile_updates = {}
    if overrides.bio:
        profile_updates["bio"] = overrides.bio
    if overrides.research_interests:
        profile_updates["research_interests"] = list(overrides.research_interests)
    if overrides.photo_url:
        profile_updates["photo_url"] = overrides.photo_url
    if overrides.photo_alt:
        profile_updates["photo_alt"] = overrides.photo_alt

    updates = {"profile": snapshot.profile.model_copy(update=profile_updates)}
    if overrides.work_history:
        updates["work_history"] = [entry.model_copy() for entry in overrides.work_history]
    if overrides.qualifications:
        updates["qualifications"] = list(overrides.qualifications)
    return snapshot.model_copy(update=updates)


def build_snapshots(
    profile: ProfileFields,
    metrics: MetricSet,
    work_history: List[WorkHistoryEntry],
    qualifications: List[str],
    sources: List[str],
    publications: List[PublicationRecord],
    overrides: ProfileOverrides,
    generated_at: Optional[str] = None,
) -> tuple[Snapshot, PublicationSnapshot]:
    """Both output documents, stamped with the same time, overrides applied."""
    generated_at = generated_at or utc_timestamp()
    snapshot = Snapshot(
        generated_at=generated_at,
        profile=profile,
        metrics=metrics,
        work_history=work_history,
        qualifications=qualifications,
        sources=sources,
    )
    return (
        apply_overrides(snapshot, overrides),
        PublicationSnapshot(generated_at=generated_at, items=publications),
    )
