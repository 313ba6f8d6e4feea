"""Command-line interface for linkscout."""

import sys
from pathlib import Path

from linkscout.config import Config
from linkscout.logging_config import setup_logging
from linkscout.workflows import ResearchOptions, ResearchRunner


def print_summary(result: dict) -> None:
    """Print a research run summary in a formatted way.

    Args:
        result: Summary returned by ResearchRunner.run_research
    """
    print("\nSummary:")
    print(f"  • Duration: {result['duration']:.2f} seconds")

    if result.get("search_results_count"):
        print(f"  • Search Results: {result['search_results_count']}")
        print(f"  • Metadata Extracted: {result['metadata_count']}")

    if result.get("backlinks_count"):
        print(f"  • Domain Backlinks Found: {result['backlinks_count']}")

    if result.get("url_backlinks_count"):
        print(f"  • URL Backlinks Found: {result['url_backlinks_count']}")

    competitor = result.get("competitor_analysis")
    if competitor:
        print(
            f"  • Competitor Analysis: Analyzed {competitor['top_pages_count']} "
            f"top pages for \"{competitor['keyword']}\""
        )


def _build_runner(args) -> ResearchRunner:
    config = Config.from_env()
    if args.output_dir:
        config.output_dir = args.output_dir
    return ResearchRunner(config)


def _run(args, options: ResearchOptions) -> None:
    try:
        options.validate()
        runner = _build_runner(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = runner.run_research(options)
    if not result["success"]:
        print(f"\nError: {result['error']}")
        sys.exit(1)

    print_summary(result)


def search_command(args):
    """Search for keywords and extract metadata from the results."""
    _run(args, ResearchOptions(
        keywords=args.keywords,
        num_results=args.num_results,
        output_prefix=args.output_prefix or "",
    ))


def backlinks_command(args):
    """Find (and optionally verify) backlinks for a domain or URL."""
    if not args.domain and not args.url:
        print("Error: Either --domain or --url must be specified")
        sys.exit(1)

    _run(args, ResearchOptions(
        find_backlinks=True,
        target_domain=args.domain or "",
        target_url=args.url or "",
        num_backlinks=args.num_backlinks,
        verify_links=args.verify,
        output_prefix=args.output_prefix or "",
    ))


def competitors_command(args):
    """Analyze backlinks of the top-ranking pages for a keyword."""
    _run(args, ResearchOptions(
        keywords=args.keywords,
        num_results=args.num_results,
        num_backlinks=args.num_backlinks,
        analyze_competitors=True,
        continue_on_error=args.continue_on_error,
        output_prefix=args.output_prefix or "",
    ))


def submissions_command(args):
    """Discover sites accepting article submissions from seed URLs."""
    urls = list(args.urls or [])
    if args.urls_file:
        path = Path(args.urls_file)
        if not path.exists():
            print(f"Error: URL file not found: {path}")
            sys.exit(1)
        urls.extend(line.strip() for line in path.read_text().splitlines() if line.strip())

    if not urls:
        print("Error: Provide seed URLs or --urls-file")
        sys.exit(1)

    try:
        runner = _build_runner(args)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = runner.run_submission_research(urls, args.results_per_keyword)
    if not result["success"]:
        print(f"\nError: {result['error']}")
        sys.exit(1)

    summary = result["potential_sites"]
    print("\nSummary:")
    print(f"  • Duration: {result['duration']:.2f} seconds")
    print(f"  • Search Results: {result['search_results_count']}")
    print(f"  • Sites Analyzed: {summary['total']}")
    print(f"  • Accepting Submissions: {summary['accepted']}")


def main():
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="linkscout - Search, backlink and submission research for SEO"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )
    parser.add_argument(
        "--output-dir",
        help="Base directory for exported files (default: LINKSCOUT_OUTPUT_DIR or ./output)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Search command parser
    search_parser = subparsers.add_parser(
        "search", help="Search keywords and extract metadata from the results."
    )
    search_parser.add_argument("keywords", help="Keywords to search for")
    search_parser.add_argument(
        "--num-results",
        "-n",
        type=int,
        default=10,
        help="Number of search results to process (default: 10)",
    )
    search_parser.add_argument(
        "--output-prefix",
        "-o",
        help="Prefix for output filenames",
    )
    search_parser.set_defaults(func=search_command)

    # Backlinks command parser
    backlinks_parser = subparsers.add_parser(
        "backlinks", help="Find backlinks for a domain or a specific URL."
    )
    backlinks_parser.add_argument(
        "--domain",
        "-d",
        help="Domain to find backlinks for",
    )
    backlinks_parser.add_argument(
        "--url",
        "-u",
        help="Specific URL to find backlinks for",
    )
    backlinks_parser.add_argument(
        "--num-backlinks",
        type=int,
        help="Number of backlinks to find (default: 50 for domains, 100 for URLs)",
    )
    backlinks_parser.add_argument(
        "--verify",
        "-v",
        action="store_true",
        help="Verify backlinks by checking source pages",
    )
    backlinks_parser.add_argument(
        "--output-prefix",
        "-o",
        help="Prefix for output filenames",
    )
    backlinks_parser.set_defaults(func=backlinks_command)

    # Competitors command parser
    competitors_parser = subparsers.add_parser(
        "competitors", help="Analyze backlinks for top-ranking pages."
    )
    competitors_parser.add_argument("keywords", help="Keyword to analyze")
    competitors_parser.add_argument(
        "--num-results",
        "-n",
        type=int,
        default=10,
        help="Number of top results to analyze (default: 10)",
    )
    competitors_parser.add_argument(
        "--num-backlinks",
        type=int,
        default=100,
        help="Maximum backlinks per ranked URL (default: 100)",
    )
    competitors_parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Record a failed ranked page and keep going instead of aborting",
    )
    competitors_parser.add_argument(
        "--output-prefix",
        "-o",
        help="Prefix for output filenames",
    )
    competitors_parser.set_defaults(func=competitors_command)

    # Submissions command parser
    submissions_parser = subparsers.add_parser(
        "submissions", help="Find sites accepting article submissions."
    )
    submissions_parser.add_argument(
        "urls", nargs="*", help="Seed article URLs"
    )
    submissions_parser.add_argument(
        "--urls-file",
        help="File with one seed URL per line",
    )
    submissions_parser.add_argument(
        "--results-per-keyword",
        type=int,
        default=10,
        help="Search results fetched per derived keyword (default: 10)",
    )
    submissions_parser.set_defaults(func=submissions_command)

    args = parser.parse_args()

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
