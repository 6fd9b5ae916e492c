"""Extraction of profile fields from the university staff profile page."""

from typing import Optional

from bs4 import BeautifulSoup

from .data import ProfileFields
from .extract import collect_image, collect_list, collect_text, extract_name, safe_text

ROLE_SELECTORS = [".profile-title", ".person-title", ".profile__jobTitle", ".profile__title"]
LOCATION_SELECTORS = [".profile__location", ".profile-location"]
BIO_SELECTORS = [
    ".profile__bio",
    ".profile__summary",
    ".profile__content .profile__intro",
    ".profile__content .profile__bio",
    "#biography",
    ".biography",
    ".profile-bio",
]
INTEREST_SELECTORS = [
    ".profile__research-interests li",
    ".profile__research li",
    ".research-interests li",
    ".profile__interests li",
    ".research-areas li",
]
PHOTO_SELECTORS = [".profile__image img", ".profile__photo img", ".profile-photo img"]


def extract_email(doc: BeautifulSoup) -> str:
    """Email from the first mailto link, preferring the address in the href."""
    link = doc.select_one("a[href^='mailto:']")
    if link is None:
        return ""
    address = link["href"].replace("mailto:", "", 1).split("?")[0].strip()
    return address or safe_text(link)


def parse_staff_profile(
    doc: Optional[BeautifulSoup],
    page_url: str,
    affiliation: str = "",
    photo_url: str = "",
) -> ProfileFields:
    """
    Pull profile fields out of a staff profile page.

    Args:
        doc: Parsed page, or None if the page could not be fetched.
        page_url: URL the page came from, for resolving relative image paths.
        affiliation: Institution the page belongs to.
        photo_url: Known portrait URL, used when the page shows no image.

    Returns:
        ProfileFields with whatever was found. When ``doc`` is None only the
        configured affiliation and photo are filled in.
    """
    if doc is None:
        return ProfileFields(affiliation=affiliation, photo_url=photo_url)

    return ProfileFields(
        name=extract_name(doc),
        role=collect_text(doc, ROLE_SELECTORS),
        affiliation=affiliation,
        email=extract_email(doc),
        location=collect_text(doc, LOCATION_SELECTORS),
        bio=collect_text(doc, BIO_SELECTORS),
        research_interests=collect_list(doc, INTEREST_SELECTORS),
        photo_url=collect_image(doc, PHOTO_SELECTORS, page_url) or photo_url,
    )
