"""Page metadata extraction for SEO research."""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from linkscout.fetcher import PageFetcher, gather_in_windows
from linkscout.models import PageMetadata

logger = logging.getLogger(__name__)


def _heading_texts(soup: BeautifulSoup, tag: str) -> List[str]:
    texts = (h.get_text(strip=True) for h in soup.find_all(tag))
    return [text for text in texts if text]


def parse_metadata(url: str, html: str) -> PageMetadata:
    """Extract metadata from HTML content.

    Args:
        url: The page URL
        html: HTML content

    Returns:
        PageMetadata with title, description, keywords and h1-h3 text
    """
    soup = BeautifulSoup(html, "html.parser")

    # Title
    title = soup.find("title")
    title_text = title.get_text(strip=True) if title else ""

    # Meta description
    description_tag = soup.find("meta", attrs={"name": "description"})
    description = description_tag.get("content", "") if description_tag else ""

    # Meta keywords, kept as the raw comma-separated string
    keywords_tag = soup.find("meta", attrs={"name": "keywords"})
    keywords = keywords_tag.get("content", "") if keywords_tag else ""

    return PageMetadata(
        url=url,
        title=title_text,
        description=description or "",
        keywords=keywords or "",
        h1_tags=_heading_texts(soup, "h1"),
        h2_tags=_heading_texts(soup, "h2"),
        h3_tags=_heading_texts(soup, "h3"),
    )


class MetadataExtractor:
    """Fetches pages and extracts their SEO metadata."""

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        concurrent_requests: int = 5,
    ):
        """Initialize the extractor.

        Args:
            fetcher: Page fetcher (a default one is created if None)
            concurrent_requests: Pages fetched together per window
        """
        self.fetcher = fetcher or PageFetcher()
        self.concurrent_requests = concurrent_requests

    async def extract(self, url: str) -> PageMetadata:
        """Extract metadata from a single page.

        Never raises: a failed fetch yields an empty record carrying the
        error message.
        """
        logger.info(f"Extracting metadata from: {url}")
        try:
            page = await self.fetcher.fetch(url)
            return parse_metadata(url, page.html)
        except Exception as e:
            logger.error(f"Error extracting metadata from {url}: {e}")
            return PageMetadata(url=url, error=str(e) or type(e).__name__)

    async def extract_many(self, urls: List[str]) -> List[PageMetadata]:
        """Extract metadata from many pages in fixed-size windows.

        Results keep the order of urls.
        """
        logger.info(
            f"Extracting metadata from {len(urls)} URLs "
            f"({self.concurrent_requests} concurrent requests)"
        )

        def _progress(done: int, total: int) -> None:
            logger.info(f"Processed {done} of {total} URLs")

        async with self.fetcher.session():
            results = await gather_in_windows(
                urls, self.concurrent_requests, self.extract, on_window=_progress
            )

        return [
            result if isinstance(result, PageMetadata)
            else PageMetadata(url=url, error=str(result) or type(result).__name__)
            for url, result in zip(urls, results)
        ]
