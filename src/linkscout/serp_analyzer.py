"""SERP and competitor backlink analysis."""

import logging
from typing import Iterable, List

from linkscout.backlinks import BacklinkFinder, get_unique_referring_domains, hostname_of
from linkscout.exceptions import ParseError
from linkscout.external.google_search import GoogleSearchClient
from linkscout.models import BacklinkAnalysis, CompetitorAnalysis, RankedPage

logger = logging.getLogger(__name__)


def extract_unique_domains(urls: Iterable[str]) -> List[str]:
    """Distinct hostnames of urls, in first-seen order.

    Unlike referring-domain extraction, a value that is not a URL is kept
    verbatim rather than dropped.
    """
    domains: dict = {}
    for url in urls:
        try:
            domains.setdefault(hostname_of(url), None)
        except ParseError:
            domains.setdefault(url, None)
    return list(domains)


class SERPAnalyzer:
    """Turns keyword search results into ranked pages."""

    def __init__(self, search_client: GoogleSearchClient):
        self.search_client = search_client

    def analyze_serp(self, keyword: str, num_results: int = 10) -> List[RankedPage]:
        """Top-ranking pages for a keyword, positions starting at 1.

        Raises:
            FetchError: If the search fails
        """
        logger.info(f"Analyzing SERP for keyword: \"{keyword}\"")

        results = self.search_client.search(keyword, num_results)
        pages = [
            RankedPage(
                position=index,
                url=result.link,
                title=result.title,
                display_url=result.display_link,
                snippet=result.snippet,
            )
            for index, result in enumerate(results, start=1)
        ]

        logger.info(f"Found {len(pages)} results in SERP for \"{keyword}\"")
        return pages


class CompetitorAnalyzer:
    """Builds backlink profiles for the pages ranking on a keyword."""

    def __init__(
        self,
        search_client: GoogleSearchClient,
        continue_on_error: bool = False,
    ):
        """Initialize the analyzer.

        Args:
            search_client: Search API client shared by both stages
            continue_on_error: Record a failed ranked page with no backlinks
                instead of aborting the whole analysis
        """
        self.serp_analyzer = SERPAnalyzer(search_client)
        self.backlink_finder = BacklinkFinder(search_client)
        self.continue_on_error = continue_on_error

    def analyze_top_ranking_backlinks(
        self,
        keyword: str,
        num_results: int = 10,
        max_backlinks_per_url: int = 100,
    ) -> CompetitorAnalysis:
        """Analyze backlinks of the top-ranking pages for a keyword.

        Ranked pages are processed one at a time, in rank order; each page
        costs its own series of search calls.

        Args:
            keyword: Keyword to analyze
            num_results: Number of top results to analyze
            max_backlinks_per_url: Maximum backlinks to find per ranked URL

        Returns:
            CompetitorAnalysis with one backlinks entry per ranked page

        Raises:
            FetchError: If the SERP search fails, or a ranked page's backlink
                search fails and continue_on_error is off
        """
        logger.info(f"===== ANALYZING TOP {num_results} RANKING PAGES FOR \"{keyword}\" =====")

        top_pages = self.serp_analyzer.analyze_serp(keyword, num_results)
        analysis = CompetitorAnalysis(keyword=keyword, top_pages=top_pages)

        for page in top_pages:
            logger.info(f"[{page.position}/{len(top_pages)}] Analyzing backlinks for: {page.url}")

            try:
                backlinks = self.backlink_finder.find_backlinks_for_url(
                    page.url, max_backlinks_per_url
                )
            except Exception as e:
                if not self.continue_on_error:
                    logger.error(f"Error analyzing top-ranking backlinks for \"{keyword}\": {e}")
                    raise
                logger.warning(f"Skipping backlinks for {page.url}: {e}")
                analysis.backlinks_analysis.append(BacklinkAnalysis(
                    position=page.position,
                    url=page.url,
                    title=page.title,
                    error=str(e),
                ))
                continue

            unique_domains = get_unique_referring_domains(backlinks)
            analysis.backlinks_analysis.append(BacklinkAnalysis(
                position=page.position,
                url=page.url,
                title=page.title,
                backlinks=backlinks,
                unique_domains=unique_domains,
            ))

            logger.info(f"Found {len(backlinks)} backlinks from {len(unique_domains)} unique domains")

        return analysis
