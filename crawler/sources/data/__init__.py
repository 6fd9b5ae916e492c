"""Data models and file storage for crawled profile information."""

from .models import (
    MetricSet,
    ProfileFields,
    PublicationRecord,
    PublicationSnapshot,
    RawFetchResult,
    Snapshot,
    WorkHistoryEntry,
    clean_list,
    clean_scalar,
)
from .snapshot_store import (
    SnapshotWriteError,
    load_previous_publications,
    load_previous_snapshot,
    load_yaml_document,
    write_raw_capture,
    write_snapshots,
    write_yaml_atomic,
)
from .local_files import (
    ProfileOverrides,
    load_base_profile,
    load_default_qualifications,
    load_overrides,
)

__all__ = [
    "MetricSet",
    "ProfileFields",
    "PublicationRecord",
    "PublicationSnapshot",
    "RawFetchResult",
    "Snapshot",
    "WorkHistoryEntry",
    "clean_list",
    "clean_scalar",
    "SnapshotWriteError",
    "load_previous_publications",
    "load_previous_snapshot",
    "load_yaml_document",
    "write_raw_capture",
    "write_snapshots",
    "write_yaml_atomic",
    "ProfileOverrides",
    "load_base_profile",
    "load_default_qualifications",
    "load_overrides",
]
