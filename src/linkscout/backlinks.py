"""Backlink discovery through search and on-page verification."""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from linkscout.exceptions import FetchError, ParseError
from linkscout.external.google_search import GoogleSearchClient
from linkscout.fetcher import PageFetcher, gather_in_windows
from linkscout.models import Backlink, LinkInfo, VerifiedBacklink

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def clean_domain(domain: str) -> str:
    """Strip the scheme and a trailing slash: https://example.com/ -> example.com"""
    return _SCHEME_RE.sub("", domain.strip()).rstrip("/")


def bare_hostname(target: str) -> str:
    """Reduce a URL or domain to its host: https://example.com/a/b -> example.com"""
    return clean_domain(target).split("/", 1)[0]


def hostname_of(url: str) -> str:
    """Hostname of an absolute URL.

    Raises:
        ParseError: If the URL is malformed or has no host
    """
    try:
        hostname = urlparse(url).hostname
    except (ValueError, AttributeError) as e:
        raise ParseError(f"Malformed URL: {url!r}") from e

    if not hostname:
        raise ParseError(f"URL has no hostname: {url!r}")
    return hostname


def get_unique_referring_domains(backlinks: Iterable[Backlink]) -> List[str]:
    """Distinct hostnames of the backlinks' source pages, in first-seen order.

    Source URLs that cannot be parsed are skipped.
    """
    domains: dict = {}
    for backlink in backlinks:
        try:
            domains.setdefault(hostname_of(backlink.source_url), None)
        except ParseError:
            logger.debug(f"Skipping unparseable source URL: {backlink.source_url!r}")
    return list(domains)


def find_links_to(html: str, host: str) -> List[LinkInfo]:
    """Anchors whose href contains host, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    links = []

    for anchor in soup.find_all("a", href=lambda href: bool(href) and host in href):
        rel = anchor.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        links.append(LinkInfo(
            href=anchor["href"],
            anchor_text=anchor.get_text(strip=True),
            is_nofollow=any(value.lower() == "nofollow" for value in rel),
        ))

    return links


class BacklinkFinder:
    """Finds candidate backlinks by searching for mentions of a target."""

    def __init__(self, search_client: GoogleSearchClient):
        self.search_client = search_client

    def find_backlinks_for_domain(self, domain: str, num_results: int = 50) -> List[Backlink]:
        """Find pages mentioning a domain, excluding the domain's own pages.

        Args:
            domain: Domain to find backlinks for (scheme and trailing slash allowed)
            num_results: Maximum number of backlinks

        Returns:
            Backlinks tagged with the cleaned target domain

        Raises:
            FetchError: If the search fails
        """
        logger.info(f"Finding backlinks for domain: {domain}")
        target = clean_domain(domain)
        query = f'"{target}" -site:{target}'

        try:
            results = self.search_client.search(query, num_results)
        except FetchError as e:
            logger.error(f"Error finding backlinks for {domain}: {e}")
            raise

        backlinks = [
            Backlink(
                source_url=result.link,
                source_title=result.title,
                snippet=result.snippet,
                target_domain=target,
            )
            for result in results
        ]

        logger.info(f"Found {len(backlinks)} potential backlinks for {domain}")
        return backlinks

    def find_backlinks_for_url(self, url: str, num_results: int = 100) -> List[Backlink]:
        """Find pages mentioning an exact URL.

        Raises:
            FetchError: If the search fails
        """
        logger.info(f"Finding backlinks for specific URL: {url}")
        query = f'"{url}"'

        try:
            results = self.search_client.search(query, num_results)
        except FetchError as e:
            logger.error(f"Error finding backlinks for {url}: {e}")
            raise

        backlinks = [
            Backlink(
                source_url=result.link,
                source_title=result.title,
                snippet=result.snippet,
                target_url=url,
            )
            for result in results
        ]

        logger.info(f"Found {len(backlinks)} potential backlinks for {url}")
        return backlinks

    @staticmethod
    def get_unique_referring_domains(backlinks: Iterable[Backlink]) -> List[str]:
        return get_unique_referring_domains(backlinks)


class BacklinkVerifier:
    """Checks that candidate backlink pages really link to the target."""

    def __init__(self, fetcher: Optional[PageFetcher] = None):
        self.fetcher = fetcher or PageFetcher()

    async def _verify_one(self, backlink: Backlink, host: str) -> VerifiedBacklink:
        try:
            page = await self.fetcher.fetch(backlink.source_url)
        except FetchError as e:
            return VerifiedBacklink.from_backlink(
                backlink,
                verified=False,
                links=[],
                status_code=e.status_code or 0,
                error=str(e),
            )

        links = find_links_to(page.html, host)
        return VerifiedBacklink.from_backlink(
            backlink,
            verified=bool(links),
            links=links,
            status_code=page.status_code,
        )

    async def verify_backlinks(
        self,
        backlinks: List[Backlink],
        target: str,
        concurrency: int = 5,
    ) -> List[VerifiedBacklink]:
        """Fetch each source page and look for anchors pointing at target.

        Pages are fetched in consecutive windows of `concurrency`; a window
        finishes completely before the next one starts. Every input backlink
        yields exactly one record, in input order, including failed fetches.

        Args:
            backlinks: Candidate backlinks
            target: Target URL or domain; only its hostname is matched
            concurrency: Window size

        Returns:
            One VerifiedBacklink per input backlink
        """
        if not backlinks:
            return []

        host = bare_hostname(target)
        if not host:
            raise ValueError(f"Cannot verify backlinks against empty target {target!r}")

        logger.info(f"Verifying {len(backlinks)} backlinks for {target}")

        def _progress(done: int, total: int) -> None:
            logger.info(f"Verified {done} of {total} backlinks")

        async with self.fetcher.session():
            results = await gather_in_windows(
                backlinks,
                concurrency,
                lambda backlink: self._verify_one(backlink, host),
                on_window=_progress,
            )

        verified = []
        for backlink, result in zip(backlinks, results):
            if isinstance(result, VerifiedBacklink):
                verified.append(result)
            else:
                # Parsing blew up or the task died; keep the record anyway
                logger.error(f"Unexpected error verifying {backlink.source_url}: {result}")
                verified.append(VerifiedBacklink.from_backlink(
                    backlink,
                    verified=False,
                    links=[],
                    status_code=getattr(result, "status_code", None) or 0,
                    error=str(result) or type(result).__name__,
                ))

        return verified
