"""Reading and writing the YAML documents the crawler works with."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from .models import PublicationSnapshot, RawFetchResult, Snapshot

logger = logging.getLogger(__name__)


class SnapshotWriteError(RuntimeError):
    """Raised when a snapshot document cannot be persisted."""


def load_yaml_document(path: Path) -> Any:
    """
    Load a YAML document, treating a missing or unreadable file as empty.

    Args:
        path: File to read.

    Returns:
        The parsed document, or an empty dict.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug(f"{path} not found; using empty document")
        return {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return {}
    return data if data is not None else {}


def load_previous_snapshot(path: Path) -> Snapshot:
    """Read the previous run's ``crawl.yml``; an empty Snapshot if there is none."""
    data = load_yaml_document(path)
    if not isinstance(data, dict):
        return Snapshot()
    return Snapshot.model_validate(data)


def load_previous_publications(path: Path) -> PublicationSnapshot:
    """Read the previous run's ``publications.yml``."""
    data = load_yaml_document(path)
    if not isinstance(data, dict):
        return PublicationSnapshot()
    return PublicationSnapshot.model_validate(data)


def _dump(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)


def write_yaml_atomic(data: Any, path: Path) -> None:
    """
    Replace ``path`` with ``data`` serialized as YAML.

    The document is written to a temporary file in the same directory and
    moved into place, so readers never see a partial file.

    Raises:
        SnapshotWriteError: if serialization or any filesystem step fails.
    """
    tmp_name = None
    try:
        text = _dump(data)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600; readers such as the site build need the usual mode
        os.chmod(tmp_name, path.stat().st_mode & 0o777 if path.exists() else 0o644)
        os.replace(tmp_name, path)
    except (OSError, yaml.YAMLError) as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SnapshotWriteError(f"Failed to write {path}: {e}") from e


def write_snapshots(snapshot: Snapshot, publications: PublicationSnapshot,
                    snapshot_path: Path, publications_path: Path) -> None:
    """Persist both snapshot documents."""
    write_yaml_atomic(snapshot.model_dump(), snapshot_path)
    write_yaml_atomic(publications.model_dump(), publications_path)
    logger.info(f"Wrote {snapshot_path} and {publications_path} ({len(publications.items)} publications)")


def write_raw_capture(result: RawFetchResult, path: Path) -> None:
    """
    Save a raw fetch result for later inspection.

    Capture files are diagnostics only, so a failure here is logged and the
    crawl carries on.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(_dump(result.to_dict()))
    except OSError as e:
        logger.warning(f"Could not save raw capture {path}: {e}")
