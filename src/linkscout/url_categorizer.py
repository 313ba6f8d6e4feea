"""Categorization of discovered URLs by platform type."""

import logging
from typing import Dict, Iterable, List

from linkscout.backlinks import hostname_of
from linkscout.constants import (
    CATEGORY_CONTENT_PLATFORM,
    CATEGORY_ERROR,
    CATEGORY_OTHER,
    CATEGORY_SOCIAL_MEDIA,
    CONTENT_PLATFORMS,
    SOCIAL_MEDIA_DOMAINS,
)
from linkscout.exceptions import ParseError
from linkscout.models import SearchResult, UrlCategorization

logger = logging.getLogger(__name__)

CATEGORIES = (
    CATEGORY_SOCIAL_MEDIA,
    CATEGORY_CONTENT_PLATFORM,
    CATEGORY_OTHER,
    CATEGORY_ERROR,
)


def categorize_url(url: str) -> UrlCategorization:
    """Categorize a URL as social media, content platform or other.

    Matching is a substring test against the hostname with any leading
    "www." removed, so subdomains such as uk.linkedin.com match too.
    """
    try:
        hostname = hostname_of(url)
    except ParseError as e:
        logger.error(f"Error categorizing URL {url}: {e}")
        return UrlCategorization(url=url, category=CATEGORY_ERROR, error=str(e))

    if hostname.startswith("www."):
        hostname = hostname[4:]

    if any(domain in hostname for domain in SOCIAL_MEDIA_DOMAINS):
        category = CATEGORY_SOCIAL_MEDIA
    elif any(domain in hostname for domain in CONTENT_PLATFORMS):
        category = CATEGORY_CONTENT_PLATFORM
    else:
        category = CATEGORY_OTHER

    return UrlCategorization(url=url, category=category, domain=hostname)


def categorize_search_results(
    results: Iterable[SearchResult],
) -> Dict[str, List[UrlCategorization]]:
    """Group search results by category, keeping their order within each group."""
    categories: Dict[str, List[UrlCategorization]] = {name: [] for name in CATEGORIES}

    for result in results:
        categorization = categorize_url(result.link)
        categorization.title = result.title
        categorization.snippet = result.snippet
        categorization.keyword = result.keyword
        categories[categorization.category].append(categorization)

    return categories
