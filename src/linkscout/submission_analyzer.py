"""Detection of guest-post and article submission opportunities."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from linkscout.constants import (
    ACCEPTS_SUBMISSIONS_THRESHOLD,
    CONTACT_FORM_POINTS,
    HIGH_POTENTIAL_THRESHOLD,
    LOW_POTENTIAL_THRESHOLD,
    MAX_CONFIDENCE,
    MEDIUM_POTENTIAL_THRESHOLD,
    SUBMISSION_BODY_KEYWORD_POINTS,
    SUBMISSION_KEYWORDS,
    SUBMISSION_LINK_KEYWORD_POINTS,
    SUBMISSION_URL_PATTERNS,
    SUBMISSION_URL_POINTS,
    WORDPRESS_POINTS,
)
from linkscout.fetcher import PageFetcher, gather_in_windows
from linkscout.models import SubmissionAnalysis, UrlCategorization

logger = logging.getLogger(__name__)

SiteRecord = Union[UrlCategorization, Dict[str, Any]]


def _pattern_words(pattern: str) -> str:
    """'/write-for-us' -> 'write for us'"""
    return pattern.replace("/", " ").replace("-", " ").strip()


def _safe_hostname(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def analyze_html(url: str, html: str) -> SubmissionAnalysis:
    """Score a page for signs that the site accepts article submissions.

    Args:
        url: Page URL, used to resolve relative links
        html: Page HTML

    Returns:
        SubmissionAnalysis with a confidence between 0 and 100
    """
    parsed = urlparse(url)
    base_url = f"{parsed.scheme}://{parsed.hostname}/"
    soup = BeautifulSoup(html, "html.parser")

    result = SubmissionAnalysis(url=url, domain=parsed.hostname or "")
    confidence = 0

    # Links to submission pages, and link text mentioning submissions
    for anchor in soup.find_all("a"):
        href = anchor.get("href")
        if not href:
            continue
        link_text = anchor.get_text().lower().strip()

        for pattern in SUBMISSION_URL_PATTERNS:
            if pattern in href or _pattern_words(pattern) in link_text:
                full_url = href if href.startswith("http") else urljoin(base_url, href)
                if full_url not in result.submission_page_urls:
                    result.submission_page_urls.append(full_url)
                    confidence += SUBMISSION_URL_POINTS

        for keyword in SUBMISSION_KEYWORDS:
            if keyword in link_text and keyword not in result.submission_keywords_found:
                result.submission_keywords_found.append(keyword)
                confidence += SUBMISSION_LINK_KEYWORD_POINTS

    # Keywords anywhere in the body text
    body = soup.body or soup
    page_text = body.get_text().lower()
    for keyword in SUBMISSION_KEYWORDS:
        if keyword in page_text and keyword not in result.submission_keywords_found:
            result.submission_keywords_found.append(keyword)
            confidence += SUBMISSION_BODY_KEYWORD_POINTS

    has_contact_form = bool(soup.find("form")) and any(
        word in page_text for word in ("contact", "message", "email")
    )
    if has_contact_form:
        result.notes.append("Has contact form that might be used for submissions")
        confidence += CONTACT_FORM_POINTS

    generator = soup.find("meta", attrs={"name": "generator"})
    has_wordpress = (
        bool(generator and "WordPress" in (generator.get("content") or ""))
        or soup.find("link", rel="https://api.w.org/") is not None
    )
    if has_wordpress:
        result.notes.append("WordPress site (more likely to accept submissions)")
        confidence += WORDPRESS_POINTS

    result.confidence = min(confidence, MAX_CONFIDENCE)
    result.accepts_submissions = result.confidence >= ACCEPTS_SUBMISSIONS_THRESHOLD

    if result.accepts_submissions:
        result.notes.append(f"Confidence level: {result.confidence}%")
    else:
        result.notes.append("No clear submission opportunities found")

    return result


def _failed_analysis(url: str, note: str, extra: Optional[dict] = None) -> SubmissionAnalysis:
    return SubmissionAnalysis(
        url=url,
        domain=_safe_hostname(url),
        notes=[note],
        extra=extra or {},
    )


def _site_fields(site: SiteRecord) -> Dict[str, Any]:
    return site.to_dict() if hasattr(site, "to_dict") else dict(site)


class SubmissionAnalyzer:
    """Checks sites for article submission opportunities."""

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        batch_size: int = 5,
        batch_pause: float = 3.0,
    ):
        """Initialize the analyzer.

        Args:
            fetcher: Page fetcher (a default one with a 15s timeout if None)
            batch_size: Sites analyzed together per window
            batch_pause: Seconds to pause between windows
        """
        self.fetcher = fetcher or PageFetcher(timeout=15.0)
        self.batch_size = batch_size
        self.batch_pause = batch_pause

    async def analyze_site(self, url: str) -> SubmissionAnalysis:
        """Fetch a site's page and score it. Never raises."""
        logger.info(f"Analyzing site for submission opportunities: {url}")
        try:
            page = await self.fetcher.fetch(url)
            return analyze_html(url, page.html)
        except Exception as e:
            logger.error(f"Error analyzing site {url}: {e}")
            return _failed_analysis(url, f"Error during analysis: {e}")

    async def analyze_batch(
        self,
        sites: List[SiteRecord],
        batch_size: Optional[int] = None,
        batch_pause: Optional[float] = None,
    ) -> List[SubmissionAnalysis]:
        """Analyze sites in windows, merging each site's fields into its result.

        Every site yields a record, in input order. batch_size and
        batch_pause override the analyzer's defaults for this call.
        """
        batch_size = batch_size or self.batch_size
        batch_pause = self.batch_pause if batch_pause is None else batch_pause

        logger.info(f"Analyzing {len(sites)} sites for submission opportunities...")
        total_batches = -(-len(sites) // batch_size) if sites else 0

        def _progress(done: int, total: int) -> None:
            batch_number = -(-done // batch_size)
            logger.info(f"Processed batch {batch_number}/{total_batches}")

        fields = [_site_fields(site) for site in sites]
        async with self.fetcher.session():
            results = await gather_in_windows(
                [f.get("url", "") for f in fields],
                batch_size,
                self.analyze_site,
                on_window=_progress,
                pause=batch_pause,
            )

        analyzed = []
        for site, result in zip(fields, results):
            if isinstance(result, SubmissionAnalysis):
                result.extra = {**site, **result.extra}
                analyzed.append(result)
            else:
                logger.error(f"Failed to analyze {site.get('url')}: {result}")
                analyzed.append(_failed_analysis(
                    site.get("url", ""), f"Analysis failed: {result}", extra=site
                ))

        return analyzed


def organize_potential_sites(
    analyzed_sites: Iterable[SubmissionAnalysis],
) -> Dict[str, List[SubmissionAnalysis]]:
    """Split analyzed sites into confidence bands."""
    organized: Dict[str, List[SubmissionAnalysis]] = {
        "high_potential": [],
        "medium_potential": [],
        "low_potential": [],
        "rejected": [],
    }

    for site in analyzed_sites:
        if site.confidence >= HIGH_POTENTIAL_THRESHOLD:
            organized["high_potential"].append(site)
        elif site.confidence >= MEDIUM_POTENTIAL_THRESHOLD:
            organized["medium_potential"].append(site)
        elif site.confidence >= LOW_POTENTIAL_THRESHOLD:
            organized["low_potential"].append(site)
        else:
            organized["rejected"].append(site)

    return organized


def summarize_potential_sites(organized: Dict[str, List[SubmissionAnalysis]]) -> Dict[str, int]:
    rejected = len(organized.get("rejected", []))
    total = sum(len(sites) for sites in organized.values())
    return {
        "total": total,
        "accepted": total - rejected,
        "rejected": rejected,
    }
