"""Names and URLs of the remote sources, in fetch order."""

from config.settings import Settings

NCL = "ncl"
SCHOLAR = "scholar"
ORCID_WORKS = "orcid_works"
ORCID_EMPLOYMENT = "orcid_employment"

# Attribution labels written into publication records
SCHOLAR_LABEL = "Scholar"
ORCID_LABEL = "orcid"


def source_urls(settings: Settings) -> dict[str, str]:
    """Map each source name to its URL for the given settings."""
    return {
        NCL: settings.staff_url,
        SCHOLAR: settings.scholar_url,
        ORCID_WORKS: settings.orcid_works_url,
        ORCID_EMPLOYMENT: settings.orcid_employment_url,
    }
