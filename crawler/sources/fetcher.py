"""
Network retrieval of profile sources.

Every attempt is written to a raw capture file, whether it succeeded or not,
and failures are returned as an unavailable ``FetchOutcome`` instead of being
raised. Callers fall back to earlier data when a source is unavailable.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import requests
from bs4 import BeautifulSoup

from .data import RawFetchResult, write_raw_capture

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    """A fetch attempt plus the parsed document, if there is one."""

    source: str
    raw: Optional[RawFetchResult]
    document: Any = None
    skipped: bool = False

    @property
    def available(self) -> bool:
        return self.document is not None


class SourceFetcher:
    """Fetches sources with a fixed timeout and user agent. No retries."""

    DEFAULT_HEADERS = {
        "Accept": "text/html,application/xhtml+xml",
        "Accept-Language": "en-US,en;q=0.9",
    }

    def __init__(
        self,
        user_agent: str,
        timeout: float = 60,
        capture_path: Optional[Callable[[str], Path]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.capture_path = capture_path
        self.session = session or requests.Session()
        self.session.headers.update(self.DEFAULT_HEADERS)
        self.session.headers["User-Agent"] = user_agent

    def fetch(self, url: str, headers: Optional[dict] = None) -> RawFetchResult:
        """
        Perform one GET request.

        Returns:
            RawFetchResult with status and body, or with ``error`` set when
            the request did not complete.
        """
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.Timeout:
            return RawFetchResult(url=url, error=f"Timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            return RawFetchResult(url=url, error=str(e))

        return RawFetchResult(
            url=url,
            http_status=response.status_code,
            content_type=response.headers.get("content-type", ""),
            body=response.text,
        )

    def _record(self, source: str, result: RawFetchResult) -> None:
        if self.capture_path is not None:
            write_raw_capture(result, self.capture_path(source))
        if result.error is not None:
            logger.warning(f"{source}: request to {result.url} failed: {result.error}")
        elif not result.ok:
            logger.warning(f"{source}: {result.url} returned HTTP {result.http_status}")
        else:
            logger.info(f"{source}: fetched {result.url} (HTTP {result.http_status})")

    def fetch_html(self, source: str, url: str) -> FetchOutcome:
        """Fetch and parse an HTML page."""
        result = self.fetch(url)
        self._record(source, result)
        if not result.ok:
            return FetchOutcome(source=source, raw=result)
        return FetchOutcome(source=source, raw=result, document=BeautifulSoup(result.body, "html.parser"))

    def fetch_json(self, source: str, url: str) -> FetchOutcome:
        """Fetch a JSON endpoint. A body that is not valid JSON counts as unavailable."""
        result = self.fetch(url, headers={"Accept": "application/json"})
        self._record(source, result)
        if not result.ok:
            return FetchOutcome(source=source, raw=result)
        try:
            data = json.loads(result.body)
        except ValueError as e:
            logger.warning(f"{source}: response from {url} is not JSON: {e}")
            return FetchOutcome(source=source, raw=result)
        return FetchOutcome(source=source, raw=result, document=data)


def skipped(source: str) -> FetchOutcome:
    """Outcome for a source that was disabled for this run."""
    return FetchOutcome(source=source, raw=None, skipped=True)
