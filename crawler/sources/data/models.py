"""Data models for crawled profile information."""

from dataclasses import dataclass
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def clean_scalar(value: Any) -> str:
    """Coerce a loosely typed scalar (YAML int, None, NaN) to a string."""
    if value is None:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    if isinstance(value, (list, dict)):
        return ""
    return str(value)


def clean_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [text for text in (clean_scalar(v) for v in value) if text]


@dataclass(frozen=True)
class RawFetchResult:
    """What one source attempt returned, persisted as-is for diagnostics."""

    url: str
    http_status: Optional[int] = None
    content_type: Optional[str] = None
    body: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.http_status is not None and self.http_status < 400

    def to_dict(self) -> dict:
        if self.error is not None and self.http_status is None:
            return {"url": self.url, "error": self.error}
        return {
            "url": self.url,
            "status": self.http_status,
            "content_type": self.content_type or "",
            "body": self.body if self.body is not None else "",
        }


class _ScalarModel(BaseModel):
    """Base for models whose string fields accept loose YAML scalars."""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: Any, info):
        annotation = cls.model_fields[info.field_name].annotation
        if annotation is str:
            return clean_scalar(value)
        if annotation == List[str]:
            return clean_list(value)
        return value


class ProfileFields(_ScalarModel):
    """Resolved profile shown on the site. Missing data is an empty string."""

    name: str = ""
    role: str = ""
    affiliation: str = ""
    email: str = ""
    location: str = ""
    bio: str = ""
    research_interests: List[str] = Field(default_factory=list)
    photo_url: str = ""
    photo_alt: str = ""


class MetricSet(_ScalarModel):
    """Citation statistics as displayed by the citation index ("All" column)."""

    citations: str = ""
    h_index: str = ""
    i10_index: str = ""

    def is_empty(self) -> bool:
        return not (self.citations or self.h_index or self.i10_index)


class PublicationRecord(_ScalarModel):
    """A publication as seen by one or more sources."""

    title: str = ""
    authors: str = ""
    venue: str = ""
    year: str = ""
    citations: str = ""
    url: str = ""
    sources: List[str] = Field(default_factory=list)

    @classmethod
    def from_previous(cls, item: Any) -> "PublicationRecord":
        """Re-normalize an item read back from an earlier publications file.

        Older files tag items with a single ``source`` instead of ``sources``.
        """
        if not isinstance(item, dict):
            return cls()
        data = dict(item)
        sources = clean_list(data.pop("sources", None)) or clean_list(data.pop("source", None))
        data.pop("source", None)
        return cls(**{k: v for k, v in data.items() if k in cls.model_fields}, sources=sources)


class WorkHistoryEntry(_ScalarModel):
    role: str = ""
    organization: str = ""
    start_date: str = ""
    end_date: str = ""


class Snapshot(_ScalarModel):
    """Profile, metrics and history written to ``crawl.yml``."""

    generated_at: str = ""
    profile: ProfileFields = Field(default_factory=ProfileFields)
    metrics: MetricSet = Field(default_factory=MetricSet)
    work_history: List[WorkHistoryEntry] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)

    @field_validator("profile", "metrics", mode="before")
    @classmethod
    def _mapping_or_empty(cls, value: Any):
        return value if isinstance(value, dict) or isinstance(value, BaseModel) else {}

    @field_validator("work_history", mode="before")
    @classmethod
    def _entries(cls, value: Any):
        if not isinstance(value, list):
            return []
        return [v for v in value if isinstance(v, (dict, WorkHistoryEntry))]


class PublicationSnapshot(_ScalarModel):
    """Merged publication list written to ``publications.yml``."""

    generated_at: str = ""
    items: List[PublicationRecord] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, value: Any):
        if not isinstance(value, list):
            return []
        return [
            v if isinstance(v, PublicationRecord) else PublicationRecord.from_previous(v)
            for v in value
        ]
