"""Search, backlink and submission-opportunity research for SEO."""

__version__ = "0.1.0"

from linkscout.external.google_search import GoogleSearchClient
from linkscout.fetcher import PageFetcher, gather_in_windows
from linkscout.metadata_extractor import MetadataExtractor, parse_metadata
from linkscout.backlinks import (
    BacklinkFinder,
    BacklinkVerifier,
    get_unique_referring_domains,
)
from linkscout.serp_analyzer import SERPAnalyzer, CompetitorAnalyzer, extract_unique_domains
from linkscout.url_categorizer import categorize_url, categorize_search_results
from linkscout.submission_analyzer import (
    SubmissionAnalyzer,
    analyze_html,
    organize_potential_sites,
)
from linkscout.exporters import DataExporter
from linkscout.models import (
    SearchResult,
    Backlink,
    LinkInfo,
    VerifiedBacklink,
    RankedPage,
    BacklinkAnalysis,
    CompetitorAnalysis,
    PageMetadata,
    UrlCategorization,
    SubmissionAnalysis,
)
from linkscout.exceptions import LinkscoutError, FetchError, ParseError, ExportError
from linkscout.config import Config

__all__ = [
    # Core
    "GoogleSearchClient",
    "PageFetcher",
    "gather_in_windows",
    "MetadataExtractor",
    "parse_metadata",
    "BacklinkFinder",
    "BacklinkVerifier",
    "get_unique_referring_domains",
    "SERPAnalyzer",
    "CompetitorAnalyzer",
    "extract_unique_domains",
    "categorize_url",
    "categorize_search_results",
    "SubmissionAnalyzer",
    "analyze_html",
    "organize_potential_sites",
    "DataExporter",
    # Models
    "SearchResult",
    "Backlink",
    "LinkInfo",
    "VerifiedBacklink",
    "RankedPage",
    "BacklinkAnalysis",
    "CompetitorAnalysis",
    "PageMetadata",
    "UrlCategorization",
    "SubmissionAnalysis",
    # Errors
    "LinkscoutError",
    "FetchError",
    "ParseError",
    "ExportError",
    "Config",
]
