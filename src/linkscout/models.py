"""Data models for search, backlink and site research."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class SearchResult:
    """A single organic result returned by the search API."""

    title: str
    link: str
    snippet: str = ""
    display_link: str = ""
    keyword: Optional[str] = None  # Set by multi-keyword searches only

    @classmethod
    def from_api_item(cls, item: dict, keyword: Optional[str] = None) -> "SearchResult":
        """Build a result from a raw Custom Search API item."""
        return cls(
            title=item.get("title", ""),
            link=item.get("link", ""),
            snippet=item.get("snippet", ""),
            display_link=item.get("displayLink", ""),
            keyword=keyword,
        )

    def to_dict(self) -> dict:
        data = {
            "title": self.title,
            "link": self.link,
            "snippet": self.snippet,
            "displayLink": self.display_link,
        }
        if self.keyword is not None:
            data["keyword"] = self.keyword
        return data


@dataclass
class Backlink:
    """A page that appears to reference a target domain or URL."""

    source_url: str
    source_title: str = ""
    snippet: str = ""
    target_domain: Optional[str] = None
    target_url: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "sourceUrl": self.source_url,
            "sourceTitle": self.source_title,
            "snippet": self.snippet,
        }
        if self.target_domain is not None:
            data["targetDomain"] = self.target_domain
        if self.target_url is not None:
            data["targetUrl"] = self.target_url
        return data


@dataclass
class LinkInfo:
    """An anchor on a source page pointing at the target."""

    href: str
    anchor_text: str = ""
    is_nofollow: bool = False

    def to_dict(self) -> dict:
        return {
            "href": self.href,
            "anchorText": self.anchor_text,
            "isNofollow": self.is_nofollow,
        }


@dataclass
class VerifiedBacklink(Backlink):
    """Backlink after its source page has been fetched and inspected.

    A failed fetch still produces a record: verified is False, links is
    empty and error carries the failure message.
    """

    verified: bool = False
    links: list[LinkInfo] = field(default_factory=list)
    status_code: int = 0
    error: Optional[str] = None

    @classmethod
    def from_backlink(cls, backlink: Backlink, **kwargs) -> "VerifiedBacklink":
        return cls(
            source_url=backlink.source_url,
            source_title=backlink.source_title,
            snippet=backlink.snippet,
            target_domain=backlink.target_domain,
            target_url=backlink.target_url,
            **kwargs,
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "verified": self.verified,
            "links": [link.to_dict() for link in self.links],
            "statusCode": self.status_code,
        })
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class RankedPage:
    """A page at a given SERP position (1-based)."""

    position: int
    url: str
    title: str = ""
    display_url: str = ""
    snippet: str = ""

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "url": self.url,
            "title": self.title,
            "displayUrl": self.display_url,
            "snippet": self.snippet,
        }


@dataclass
class BacklinkAnalysis:
    """Backlink profile of one ranked page."""

    position: int
    url: str
    title: str = ""
    backlinks: list[Backlink] = field(default_factory=list)
    unique_domains: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def backlinks_count(self) -> int:
        return len(self.backlinks)

    @property
    def unique_domains_count(self) -> int:
        return len(self.unique_domains)

    def to_dict(self) -> dict:
        data = {
            "position": self.position,
            "url": self.url,
            "title": self.title,
            "backlinksCount": self.backlinks_count,
            "uniqueDomainsCount": self.unique_domains_count,
            "backlinks": [b.to_dict() for b in self.backlinks],
            "uniqueDomains": list(self.unique_domains),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class CompetitorAnalysis:
    """Backlink comparison of the top-ranking pages for a keyword."""

    keyword: str
    top_pages: list[RankedPage] = field(default_factory=list)
    backlinks_analysis: list[BacklinkAnalysis] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "keyword": self.keyword,
            "topPages": [p.to_dict() for p in self.top_pages],
            "backlinksAnalysis": [a.to_dict() for a in self.backlinks_analysis],
        }


@dataclass
class PageMetadata:
    """SEO metadata scraped from a page."""

    url: str
    title: str = ""
    description: str = ""
    keywords: str = ""
    h1_tags: list[str] = field(default_factory=list)
    h2_tags: list[str] = field(default_factory=list)
    h3_tags: list[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "keywords": self.keywords,
            "h1Tags": list(self.h1_tags),
            "h2Tags": list(self.h2_tags),
            "h3Tags": list(self.h3_tags),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class UrlCategorization:
    """Platform category of a discovered URL."""

    url: str
    category: str
    domain: str = ""
    title: str = ""
    snippet: str = ""
    keyword: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "url": self.url,
            "category": self.category,
            "domain": self.domain,
            "title": self.title,
            "snippet": self.snippet,
            "keyword": self.keyword or "",
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class SubmissionAnalysis:
    """Result of checking a site for article submission opportunities."""

    url: str
    domain: str = ""
    accepts_submissions: bool = False
    confidence: int = 0  # 0-100
    submission_page_urls: list[str] = field(default_factory=list)
    submission_keywords_found: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)  # Site fields merged in by batch runs

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data.update({
            "url": self.url,
            "domain": self.domain,
            "acceptsSubmissions": self.accepts_submissions,
            "confidence": self.confidence,
            "submissionPageUrls": list(self.submission_page_urls),
            "submissionKeywordsFound": list(self.submission_keywords_found),
            "notes": list(self.notes),
        })
        return data
