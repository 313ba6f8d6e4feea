"""End-to-end research workflows combining search, scraping and export."""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from linkscout.backlinks import BacklinkFinder, BacklinkVerifier
from linkscout.config import Config
from linkscout.constants import CATEGORY_SOCIAL_MEDIA
from linkscout.exporters import DataExporter
from linkscout.external.google_search import GoogleSearchClient
from linkscout.fetcher import PageFetcher
from linkscout.metadata_extractor import MetadataExtractor
from linkscout.serp_analyzer import CompetitorAnalyzer
from linkscout.submission_analyzer import SubmissionAnalyzer, organize_potential_sites, summarize_potential_sites
from linkscout.url_categorizer import categorize_search_results

logger = logging.getLogger(__name__)


@dataclass
class ResearchOptions:
    """What a research run should do."""
    keywords: str = ""
    num_results: int = 10
    find_backlinks: bool = False
    target_domain: str = ""
    target_url: str = ""
    num_backlinks: Optional[int] = None  # Defaults: 50 for domains, 100 for URLs
    analyze_competitors: bool = False
    verify_links: bool = False
    continue_on_error: bool = False
    output_prefix: str = ""

    def validate(self) -> None:
        """Raise ValueError if the options describe no runnable work."""
        if not self.keywords and not self.find_backlinks:
            raise ValueError("Either keywords or find_backlinks must be specified")
        if self.find_backlinks and not self.target_domain and not self.target_url:
            raise ValueError("Either target_domain or target_url must be specified when finding backlinks")
        if self.analyze_competitors and not self.keywords:
            raise ValueError("keywords must be specified when analyzing competitors")
        if self.num_results < 1:
            raise ValueError("num_results must be at least 1")


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%dT%H-%M-%S")


class ResearchRunner:
    """Runs research workflows with shared clients and exporters."""

    def __init__(
        self,
        config: Optional[Config] = None,
        search_client: Optional[GoogleSearchClient] = None,
        fetcher: Optional[PageFetcher] = None,
        exporter: Optional[DataExporter] = None,
    ):
        """Initialize the runner.

        Args:
            config: Run configuration (loaded from the environment if None)
            search_client: Search API client (built from config if None)
            fetcher: Page fetcher shared by the scraping stages
            exporter: Output writer (built from config if None)
        """
        self.config = config or Config.from_env()

        if search_client is None:
            if not self.config.has_search_credentials:
                raise ValueError("GOOGLE_API_KEY and GOOGLE_CSE_ID must be set to search")
            search_client = GoogleSearchClient(
                api_key=self.config.google_api_key,
                cse_id=self.config.google_cse_id,
                request_delay=self.config.search_delay,
                rate_limit_delay=self.config.rate_limit_delay,
                keyword_delay=self.config.keyword_delay,
            )
        self.search_client = search_client

        self.fetcher = fetcher or PageFetcher(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout,
        )
        self.exporter = exporter or DataExporter.from_config(self.config)

    def run_research(self, options: ResearchOptions) -> Dict[str, Any]:
        """Run keyword, backlink and competitor research as requested.

        Errors are logged and reported in the returned summary rather than
        raised; a failing stage exports nothing.

        Returns:
            Summary dict with "success" and per-stage counts, or "error"
        """
        logger.info("Starting SEO research run...")
        logger.info(f"Options: {options}")
        start_time = time.time()
        results: Dict[str, Any] = {}

        try:
            options.validate()

            if options.keywords and not options.analyze_competitors:
                self._keyword_stage(options, results)

            if options.find_backlinks and options.target_domain:
                self._domain_backlinks_stage(options, results)

            if options.find_backlinks and options.target_url:
                self._url_backlinks_stage(options, results)

            if options.analyze_competitors and options.keywords:
                self._competitor_stage(options, results)

        except Exception as e:
            logger.error(f"Error running SEO research: {e}")
            return {"success": False, "error": str(e)}

        duration = time.time() - start_time
        logger.info(f"SEO research completed in {duration:.2f} seconds")

        competitor = results.get("competitor_analysis")
        return {
            "success": True,
            "duration": duration,
            "search_results_count": len(results.get("search_results", [])),
            "metadata_count": len(results.get("metadata", [])),
            "backlinks_count": len(results.get("backlinks", [])),
            "url_backlinks_count": len(results.get("url_backlinks", [])),
            "competitor_analysis": {
                "keyword": competitor.keyword,
                "top_pages_count": len(competitor.top_pages),
                "backlinks_analysis_count": len(competitor.backlinks_analysis),
            } if competitor else None,
        }

    def _keyword_stage(self, options: ResearchOptions, results: Dict[str, Any]) -> None:
        logger.info("--- SEARCHING GOOGLE ---")
        search_results = self.search_client.search(options.keywords, options.num_results)
        results["search_results"] = search_results

        urls = [result.link for result in search_results]
        if not urls:
            return

        logger.info("--- EXTRACTING METADATA ---")
        extractor = MetadataExtractor(self.fetcher, self.config.concurrent_requests)
        metadata = asyncio.run(extractor.extract_many(urls))
        results["metadata"] = metadata

        logger.info("--- EXPORTING RESULTS ---")
        prefix = options.output_prefix or f"search_{_timestamp()}"
        self.exporter.export_to_json(metadata, f"{prefix}_metadata")
        self.exporter.export_to_csv(metadata, f"{prefix}_metadata")

    def _verify(self, backlinks, target: str):
        verifier = BacklinkVerifier(self.fetcher)
        return asyncio.run(verifier.verify_backlinks(
            backlinks, target, concurrency=self.config.concurrent_requests
        ))

    def _export_backlinks(self, records, prefix: str) -> None:
        self.exporter.export_to_json(records, f"{prefix}_backlinks")
        if records:
            self.exporter.export_to_csv(records, f"{prefix}_backlinks")
        else:
            logger.warning("No backlinks found; skipping CSV export")

    def _domain_backlinks_stage(self, options: ResearchOptions, results: Dict[str, Any]) -> None:
        logger.info("--- FINDING BACKLINKS FOR DOMAIN ---")
        finder = BacklinkFinder(self.search_client)
        backlinks = finder.find_backlinks_for_domain(options.target_domain, options.num_backlinks or 50)
        results["backlinks"] = backlinks

        records = backlinks
        if options.verify_links:
            logger.info("--- VERIFYING BACKLINKS ---")
            records = self._verify(backlinks, options.target_domain)
            results["verified_backlinks"] = records

        logger.info("--- EXPORTING BACKLINKS ---")
        prefix = options.output_prefix or f"backlinks_domain_{_timestamp()}"
        self._export_backlinks(records, prefix)

    def _url_backlinks_stage(self, options: ResearchOptions, results: Dict[str, Any]) -> None:
        logger.info("--- FINDING BACKLINKS FOR SPECIFIC URL ---")
        finder = BacklinkFinder(self.search_client)
        backlinks = finder.find_backlinks_for_url(options.target_url, options.num_backlinks or 100)
        results["url_backlinks"] = backlinks

        records = backlinks
        if options.verify_links:
            logger.info("--- VERIFYING URL BACKLINKS ---")
            records = self._verify(backlinks, options.target_url)
            results["verified_url_backlinks"] = records

        logger.info("--- EXPORTING URL BACKLINKS ---")
        prefix = options.output_prefix or f"backlinks_url_{_timestamp()}"
        self._export_backlinks(records, prefix)

    def _competitor_stage(self, options: ResearchOptions, results: Dict[str, Any]) -> None:
        logger.info("--- ANALYZING TOP-RANKING COMPETITORS ---")
        analyzer = CompetitorAnalyzer(self.search_client, continue_on_error=options.continue_on_error)
        analysis = analyzer.analyze_top_ranking_backlinks(
            options.keywords,
            options.num_results,
            options.num_backlinks or 100,
        )
        results["competitor_analysis"] = analysis

        logger.info("--- EXPORTING COMPETITOR ANALYSIS ---")
        prefix = options.output_prefix or f"competitor_analysis_{_timestamp()}"
        self.exporter.export_backlink_analysis(analysis, prefix)

    def run_submission_research(
        self,
        urls: List[str],
        num_results_per_keyword: int = 10,
    ) -> Dict[str, Any]:
        """Find sites likely to accept article submissions.

        Scrapes the seed URLs, searches for keywords found in their metadata,
        categorizes the hits and scores every non-social site.

        Returns:
            Summary dict with "success" and stage counts, or "error"
        """
        logger.info("Starting article research workflow...")
        start_time = time.time()

        try:
            # Seed strings may carry trailing notes after the URL
            clean_urls = [url.split(" ")[0] for url in urls if url.strip()]
            logger.info(f"Processing {len(clean_urls)} URLs...")

            extractor = MetadataExtractor(self.fetcher, self.config.concurrent_requests)
            metadata = asyncio.run(extractor.extract_many(clean_urls))
            logger.info(f"Extracted metadata from {len(metadata)} URLs")
            self.exporter.export_to_json(metadata, "metadata")
            self.exporter.export_metadata(metadata)

            logger.info("Performing Google searches based on extracted keywords...")
            search_results = self.search_client.search_from_metadata(metadata, num_results_per_keyword)
            logger.info(f"Found {len(search_results)} unique search results")
            self.exporter.export_to_json(search_results, "all_search_results")
            if search_results:
                self.exporter.export_search_results(search_results)

            categorized = categorize_search_results(search_results)
            self.exporter.export_to_json(categorized, "all_categorized_sites")
            self.exporter.export_categorized_sites(categorized)

            candidates = [
                site
                for category, sites in categorized.items()
                if category not in (CATEGORY_SOCIAL_MEDIA, "error")
                for site in sites
            ]
            analyzer = SubmissionAnalyzer(
                self.fetcher,
                batch_size=self.config.concurrent_requests,
                batch_pause=self.config.batch_pause,
            )
            analyzed = asyncio.run(analyzer.analyze_batch(candidates))
            organized = organize_potential_sites(analyzed)
            self.exporter.export_potential_sites(organized)

        except Exception as e:
            logger.error(f"Error in article research workflow: {e}")
            return {"success": False, "error": str(e)}

        duration = time.time() - start_time
        summary = summarize_potential_sites(organized)
        logger.info(
            f"Workflow completed in {duration:.2f} seconds: "
            f"{summary['accepted']} of {summary['total']} sites accept submissions"
        )
        return {
            "success": True,
            "duration": duration,
            "metadata_count": len(metadata),
            "search_results_count": len(search_results),
            "categories": {name: len(sites) for name, sites in categorized.items()},
            "potential_sites": summary,
        }
