from pathlib import Path

import pytest
import requests

from config.settings import Settings

FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200, content_type: str = "text/html; charset=utf-8"):
        self.text = text
        self.status_code = status_code
        self.headers = {"content-type": content_type}


class FakeSession:
    """Stands in for requests.Session; maps URLs to responses or exceptions."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.headers = {}
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        route = self.routes.get(url)
        if route is None:
            raise requests.exceptions.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        staff_url="https://www.ncl.ac.uk/medical-sciences/people/profile/trinhdong.html",
        scholar_url="https://scholar.google.com/citations?user=TEST",
        orcid_id="0000-0000-0000-0001",
        orcid_api_base="https://pub.orcid.org/v3.0",
        staff_photo_url="https://example.org/photo.jpg",
        skip_scholar=False,
    )


@pytest.fixture
def all_sources_up(settings) -> dict:
    return {
        settings.staff_url: FakeResponse(read_fixture("staff_profile.html")),
        settings.scholar_url: FakeResponse(read_fixture("scholar_profile.html")),
        settings.orcid_works_url: FakeResponse(
            read_fixture("orcid_works.json"), content_type="application/json"
        ),
        settings.orcid_employment_url: FakeResponse(
            read_fixture("orcid_employments.json"), content_type="application/json"
        ),
    }
