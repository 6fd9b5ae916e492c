"""Configuration settings for the profile crawler.

Handles source URLs, request settings, and data file paths.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Project root directory
ROOT_DIR = Path(__file__).parent.parent


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Data paths
    data_dir: Path = ROOT_DIR / os.getenv("DATA_DIR", "data")

    # Request settings
    user_agent: str = os.getenv(
        "CRAWL_USER_AGENT",
        "Mozilla/5.0 (compatible; TrinhDongCrawl/1.0; +https://github.com/trinhdhk)",
    )
    request_timeout: float = float(os.getenv("CRAWL_TIMEOUT", "60"))

    # Sources
    staff_url: str = os.getenv(
        "STAFF_PROFILE_URL",
        "https://www.ncl.ac.uk/medical-sciences/people/profile/trinhdong.html",
    )
    staff_affiliation: str = os.getenv("STAFF_AFFILIATION", "Newcastle University")
    staff_photo_url: str = os.getenv(
        "STAFF_PHOTO_URL",
        "https://includes.ncl.ac.uk/cmswebservices/myimpact/2020ws/picture/picture.php"
        "?wk=newcastleuniversity&pk=trinh.dong",
    )
    scholar_url: str = os.getenv(
        "SCHOLAR_URL", "https://scholar.google.com/citations?user=8VPRg4kAAAAJ&hl=en&oi=ao"
    )
    orcid_id: str = os.getenv("ORCID_ID", "0000-0003-4281-4929")
    orcid_api_base: str = os.getenv("ORCID_API_BASE", "https://pub.orcid.org/v3.0")

    # Scholar answers CI runners with 403s
    skip_scholar: bool = _env_flag("SKIP_SCHOLAR") or _env_flag("GITHUB_ACTIONS")

    @property
    def orcid_works_url(self) -> str:
        return f"{self.orcid_api_base}/{self.orcid_id}/works"

    @property
    def orcid_employment_url(self) -> str:
        return f"{self.orcid_api_base}/{self.orcid_id}/employments"

    @property
    def crawl_dir(self) -> Path:
        return self.data_dir / "crawl"

    @property
    def profile_path(self) -> Path:
        return self.data_dir / "profile.yml"

    @property
    def overrides_path(self) -> Path:
        return self.data_dir / "overrides.yml"

    @property
    def sections_extra_path(self) -> Path:
        return self.data_dir / "sections_extra.yml"

    @property
    def snapshot_path(self) -> Path:
        return self.crawl_dir / "crawl.yml"

    @property
    def publications_path(self) -> Path:
        return self.crawl_dir / "publications.yml"

    def raw_capture_path(self, source: str) -> Path:
        """Diagnostic capture file for one source, e.g. ``data/crawl/ncl_raw.yml``."""
        return self.crawl_dir / f"{source}_raw.yml"


settings = Settings()
