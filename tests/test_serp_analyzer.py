"""Tests for SERP and competitor analysis."""

from unittest.mock import Mock

import pytest

from linkscout.exceptions import FetchError
from linkscout.models import SearchResult
from linkscout.serp_analyzer import CompetitorAnalyzer, SERPAnalyzer, extract_unique_domains


def _serp(n):
    return [
        SearchResult(
            title=f"Page {i}",
            link=f"https://rank{i}.example/page",
            snippet=f"snippet {i}",
            display_link=f"rank{i}.example",
        )
        for i in range(1, n + 1)
    ]


def _mentions(url, hosts):
    return [SearchResult(title=f"Mention on {h}", link=f"https://{h}/post", snippet="") for h in hosts]


@pytest.fixture
def fake_client():
    """Search client double: the keyword returns the SERP, quoted URLs return mentions."""
    client = Mock()
    serp = _serp(3)
    mentions = {
        '"https://rank1.example/page"': ["a.example", "b.example", "a.example"],
        '"https://rank2.example/page"': [],
        '"https://rank3.example/page"': ["c.example"],
    }

    def search(query, num_results):
        if query in mentions:
            return _mentions(query, mentions[query])[:num_results]
        return serp[:num_results]

    client.search.side_effect = search
    return client


class TestSERPAnalyzer:
    """Test cases for SERPAnalyzer."""

    def test_positions_follow_rank(self, fake_client):
        pages = SERPAnalyzer(fake_client).analyze_serp("seo tools", 3)

        assert [p.position for p in pages] == [1, 2, 3]
        assert pages[0].url == "https://rank1.example/page"
        assert pages[0].display_url == "rank1.example"
        assert pages[2].title == "Page 3"

    def test_uses_real_search_client(self, search_client, search_api):
        pages = SERPAnalyzer(search_client).analyze_serp("seo tools", 12)

        assert [p.position for p in pages] == list(range(1, 13))
        assert len(search_api.calls) == 2


class TestCompetitorAnalyzer:
    """Test cases for CompetitorAnalyzer."""

    def test_analysis_in_rank_order(self, fake_client):
        analysis = CompetitorAnalyzer(fake_client).analyze_top_ranking_backlinks("seo tools", 3, 50)

        assert analysis.keyword == "seo tools"
        assert [a.position for a in analysis.backlinks_analysis] == [1, 2, 3]
        assert [a.url for a in analysis.backlinks_analysis] == [p.url for p in analysis.top_pages]

    def test_counts_and_unique_domains(self, fake_client):
        analysis = CompetitorAnalyzer(fake_client).analyze_top_ranking_backlinks("seo tools", 3, 50)
        first, second, third = analysis.backlinks_analysis

        assert first.backlinks_count == 3
        assert first.unique_domains == ["a.example", "b.example"]
        assert first.unique_domains_count == 2
        assert second.backlinks_count == 0
        assert second.unique_domains == []
        assert third.unique_domains == ["c.example"]
        assert all(b.target_url == "https://rank1.example/page" for b in first.backlinks)

    def test_ranked_pages_are_processed_sequentially(self, fake_client):
        CompetitorAnalyzer(fake_client).analyze_top_ranking_backlinks("seo tools", 3, 7)

        queries = [c.args for c in fake_client.search.call_args_list]
        assert queries == [
            ("seo tools", 3),
            ('"https://rank1.example/page"', 7),
            ('"https://rank2.example/page"', 7),
            ('"https://rank3.example/page"', 7),
        ]

    def test_failure_aborts_by_default(self, fake_client):
        original = fake_client.search.side_effect

        def failing(query, num_results):
            if query == '"https://rank2.example/page"':
                raise FetchError("quota exceeded", status_code=429)
            return original(query, num_results)

        fake_client.search.side_effect = failing

        with pytest.raises(FetchError):
            CompetitorAnalyzer(fake_client).analyze_top_ranking_backlinks("seo tools", 3)

        # Rank 3 is never attempted
        assert fake_client.search.call_count == 3

    def test_continue_on_error_records_failed_page(self, fake_client):
        original = fake_client.search.side_effect

        def failing(query, num_results):
            if query == '"https://rank2.example/page"':
                raise FetchError("quota exceeded", status_code=429)
            return original(query, num_results)

        fake_client.search.side_effect = failing

        analysis = CompetitorAnalyzer(fake_client, continue_on_error=True).analyze_top_ranking_backlinks(
            "seo tools", 3
        )

        assert [a.position for a in analysis.backlinks_analysis] == [1, 2, 3]
        assert analysis.backlinks_analysis[1].error == "quota exceeded"
        assert analysis.backlinks_analysis[1].backlinks_count == 0
        assert analysis.backlinks_analysis[2].unique_domains == ["c.example"]

    def test_serp_failure_propagates(self):
        client = Mock()
        client.search.side_effect = FetchError("down")

        with pytest.raises(FetchError):
            CompetitorAnalyzer(client, continue_on_error=True).analyze_top_ranking_backlinks("seo tools")

    def test_to_dict(self, fake_client):
        data = CompetitorAnalyzer(fake_client).analyze_top_ranking_backlinks("seo tools", 1).to_dict()

        assert data["keyword"] == "seo tools"
        assert data["topPages"][0]["position"] == 1
        entry = data["backlinksAnalysis"][0]
        assert entry["backlinksCount"] == 3
        assert entry["uniqueDomainsCount"] == 2
        assert entry["backlinks"][0]["targetUrl"] == "https://rank1.example/page"


class TestExtractUniqueDomains:
    """Test cases for extract_unique_domains."""

    def test_keeps_unparseable_values(self):
        urls = ["https://a.example/1", "not-a-url", "https://a.example/2", "https://b.example/"]

        assert extract_unique_domains(urls) == ["a.example", "not-a-url", "b.example"]
