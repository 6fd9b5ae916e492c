"""Operator-maintained documents: base profile, overrides, extra sections."""

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator

from .models import ProfileFields, WorkHistoryEntry, clean_list
from .snapshot_store import load_yaml_document


class ProfileOverrides(BaseModel):
    """Values that replace crawled data whenever they are non-empty."""

    bio: str = ""
    research_interests: List[str] = Field(default_factory=list)
    photo_url: str = ""
    photo_alt: str = ""
    work_history: List[WorkHistoryEntry] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)

    @field_validator("research_interests", "qualifications", mode="before")
    @classmethod
    def _strings(cls, value):
        return clean_list(value)

    @field_validator("bio", "photo_url", "photo_alt", mode="before")
    @classmethod
    def _scalar(cls, value):
        return "" if value is None else str(value)

    @field_validator("work_history", mode="before")
    @classmethod
    def _entries(cls, value):
        if not isinstance(value, list):
            return []
        return [v for v in value if isinstance(v, dict)]


def load_base_profile(path: Path) -> ProfileFields:
    """Lowest-priority profile values from ``profile.yml``."""
    data = load_yaml_document(path)
    if not isinstance(data, dict):
        return ProfileFields()
    return ProfileFields.model_validate(
        {k: v for k, v in data.items() if k in ProfileFields.model_fields}
    )


def load_overrides(path: Path) -> ProfileOverrides:
    """Read ``overrides.yml``.

    The profile keys live under ``profile:``; ``work_history`` and
    ``qualifications`` sit at the top level.
    """
    data = load_yaml_document(path)
    if not isinstance(data, dict):
        return ProfileOverrides()
    profile = data.get("profile") if isinstance(data.get("profile"), dict) else {}
    return ProfileOverrides(
        bio=profile.get("bio"),
        research_interests=profile.get("research_interests"),
        photo_url=profile.get("photo_url"),
        photo_alt=profile.get("photo_alt"),
        work_history=data.get("work_history"),
        qualifications=data.get("qualifications"),
    )


def load_default_qualifications(path: Path, section_id: str = "qualification") -> List[str]:
    """Items of the ``qualification`` section in ``sections_extra.yml``; the last match wins."""
    data = load_yaml_document(path)
    sections = data.get("sections") if isinstance(data, dict) else None
    qualifications: List[str] = []
    for section in sections or []:
        if isinstance(section, dict) and section.get("id") == section_id and section.get("items") is not None:
            qualifications = clean_list(section["items"])
    return qualifications
