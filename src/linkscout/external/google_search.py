"""
Google Custom Search JSON API Client

Provides paged keyword search over a Programmable Search Engine.
API Documentation: https://developers.google.com/custom-search/v1/reference/rest/v1/cse/list

Limits:
- 10 results per request
- start index may not exceed 100
- 100 queries per day (free tier)
"""

import logging
import math
import time
from typing import Iterable, List, Optional

import httpx

from linkscout.constants import (
    H2_KEYWORDS_PER_PAGE,
    MAX_METADATA_KEYWORDS,
    SEARCH_MAX_START_INDEX,
    SEARCH_PAGE_SIZE,
)
from linkscout.exceptions import FetchError
from linkscout.models import PageMetadata, SearchResult

logger = logging.getLogger(__name__)


class GoogleSearchClient:
    """Client for the Google Custom Search JSON API v1"""

    API_URL = "https://www.googleapis.com/customsearch/v1"

    def __init__(
        self,
        api_key: str,
        cse_id: str,
        page_size: int = SEARCH_PAGE_SIZE,
        request_delay: float = 1.0,
        rate_limit_delay: float = 5.0,
        keyword_delay: float = 2.0,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the search client.

        Args:
            api_key: Google API key with the Custom Search API enabled
            cse_id: Programmable Search Engine ID (cx)
            page_size: Results requested per call (the API maximum is 10)
            request_delay: Seconds to sleep after each call in lenient mode
            rate_limit_delay: Seconds to sleep after a rate-limited call
            keyword_delay: Seconds to sleep between keywords in multi-keyword search
            timeout: HTTP timeout for API calls
            http_client: Optional preconfigured httpx.Client (closed by the caller)
        """
        self.api_key = api_key
        self.cse_id = cse_id
        self.page_size = page_size
        self.request_delay = request_delay
        self.rate_limit_delay = rate_limit_delay
        self.keyword_delay = keyword_delay

        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(timeout=timeout)

        self.total_requests = 0
        self.failed_requests = 0

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "GoogleSearchClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _page_plan(self, num_results: int) -> List[int]:
        """Start indexes (1-based) of the pages needed for num_results."""
        num_calls = math.ceil(max(num_results, 0) / self.page_size)
        starts = [i * self.page_size + 1 for i in range(num_calls)]
        return [start for start in starts if start <= SEARCH_MAX_START_INDEX]

    def _fetch_page(self, query: str, start: int, num: int) -> List[dict]:
        """
        Request a single result page.

        Raises:
            FetchError: If the API call fails for any reason
        """
        params = {
            'key': self.api_key,
            'cx': self.cse_id,
            'q': query,
            'start': start,
            'num': num,
        }

        try:
            self.total_requests += 1
            response = self.client.get(self.API_URL, params=params)
            response.raise_for_status()
            data = response.json()

        except httpx.TimeoutException:
            self.failed_requests += 1
            logger.error(f"[Search] Timeout fetching results {start}-{start + num - 1} for '{query}'")
            raise FetchError(f"Search API timeout for '{query}'")

        except httpx.HTTPStatusError as e:
            self.failed_requests += 1
            status = e.response.status_code
            logger.error(f"[Search] API error {status} for '{query}' (start={start})")
            raise FetchError(
                f"Search API returned {status} for '{query}'",
                status_code=status,
            ) from e

        except httpx.HTTPError as e:
            self.failed_requests += 1
            logger.error(f"[Search] Request failed for '{query}': {e}")
            raise FetchError(f"Search request failed for '{query}': {e}") from e

        except ValueError as e:
            self.failed_requests += 1
            logger.error(f"[Search] Invalid JSON for '{query}'")
            raise FetchError(f"Search API returned invalid JSON for '{query}'") from e

        return data.get('items') or []

    def search(self, query: str, num_results: int = 10) -> List[SearchResult]:
        """
        Search and return up to num_results results in rank order.

        A failed page aborts the whole search; no partial results are returned.

        Args:
            query: Search query
            num_results: Maximum number of results

        Returns:
            List of SearchResult, at most num_results long

        Raises:
            FetchError: If any page call fails
        """
        logger.info(f"Searching for: \"{query}\"")
        items: List[dict] = []

        for start in self._page_plan(num_results):
            num = min(self.page_size, num_results - len(items))
            page_items = self._fetch_page(query, start, num)
            items.extend(page_items)

            # Only an empty page ends the search; short pages are normal
            if not page_items:
                break

        results = [SearchResult.from_api_item(item) for item in items[:num_results]]
        logger.info(f"Found {len(results)} results")
        return results

    def search_with_backoff(self, query: str, num_results: int = 10) -> List[SearchResult]:
        """
        Search tolerating per-page failures.

        Failed pages are logged and skipped. The client sleeps request_delay
        after each successful call and rate_limit_delay after a rate-limited
        one; failed calls are not retried.

        Args:
            query: Search query
            num_results: Maximum number of results

        Returns:
            List of SearchResult from every page that succeeded
        """
        logger.info(f"Searching (lenient) for: \"{query}\"")
        items: List[dict] = []

        for page_number, start in enumerate(self._page_plan(num_results), start=1):
            num = min(self.page_size, num_results - len(items))
            if num <= 0:
                break

            try:
                items.extend(self._fetch_page(query, start, num))
            except FetchError as e:
                logger.warning(f"Search request {page_number} for '{query}' failed: {e}")
                if e.is_rate_limited:
                    logger.info(f"Rate limit hit, waiting {self.rate_limit_delay}s before continuing...")
                    time.sleep(self.rate_limit_delay)
                continue

            time.sleep(self.request_delay)

        return [SearchResult.from_api_item(item) for item in items[:num_results]]

    def search_multiple_keywords(
        self,
        keywords: Iterable[str],
        num_results_per_keyword: int = 10,
    ) -> List[SearchResult]:
        """
        Run a lenient search per keyword and merge the results.

        Each URL is kept once, tagged with the first keyword that found it.
        """
        all_results: List[SearchResult] = []
        seen_urls = set()

        keywords = list(keywords)
        for index, keyword in enumerate(keywords):
            try:
                results = self.search_with_backoff(keyword, num_results_per_keyword)
            except Exception as e:
                logger.error(f"Error searching for keyword '{keyword}': {e}")
                continue

            for result in results:
                if result.link in seen_urls:
                    continue
                seen_urls.add(result.link)
                all_results.append(SearchResult.from_api_item(result.to_dict(), keyword=keyword))

            if index < len(keywords) - 1:
                time.sleep(self.keyword_delay)

        return all_results

    def search_from_metadata(
        self,
        metadata: List[PageMetadata],
        num_results_per_keyword: int = 10,
    ) -> List[SearchResult]:
        """Search for keywords derived from scraped page metadata."""
        keywords = keywords_from_metadata(metadata)
        logger.info(f"Extracted {len(keywords)} keywords for searching")
        return self.search_multiple_keywords(keywords, num_results_per_keyword)


def keywords_from_metadata(
    metadata: List[PageMetadata],
    limit: int = MAX_METADATA_KEYWORDS,
) -> List[str]:
    """
    Collect search keywords from scraped metadata.

    Uses comma-separated meta keywords, every H1 and the first few H2s of
    each page. Order of first appearance is kept.
    """
    keywords: dict = {}

    for page in metadata:
        if page.keywords:
            for keyword in page.keywords.split(','):
                keyword = keyword.strip()
                if keyword:
                    keywords.setdefault(keyword, None)

        for tag in page.h1_tags:
            keywords.setdefault(tag, None)

        for tag in page.h2_tags[:H2_KEYWORDS_PER_PAGE]:
            keywords.setdefault(tag, None)

    return list(keywords)[:limit]
