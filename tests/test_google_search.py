"""Tests for the Custom Search client."""

import math
from unittest.mock import patch, call

import pytest

from linkscout.exceptions import FetchError
from linkscout.external.google_search import keywords_from_metadata
from linkscout.models import PageMetadata, SearchResult
from tests.conftest import FakeSearchAPI


class TestSearch:
    """Test cases for the strict search."""

    @pytest.mark.parametrize("num_results", [1, 9, 10, 11, 25, 40])
    def test_page_calls_and_result_count(self, search_api, search_client, num_results):
        """Exactly ceil(N/10) calls when results are plentiful, at most N results."""
        results = search_client.search("seo tools", num_results)

        assert len(search_api.calls) == math.ceil(num_results / 10)
        assert len(results) == num_results

    def test_requests_only_what_is_missing(self, search_api, search_client):
        """The last page asks for the remainder only."""
        search_client.search("seo tools", 25)

        assert [(c["start"], c["num"]) for c in search_api.calls] == [
            ("1", "10"),
            ("11", "10"),
            ("21", "5"),
        ]
        assert all(c["q"] == "seo tools" for c in search_api.calls)
        assert search_api.calls[0]["key"] == "test-key"
        assert search_api.calls[0]["cx"] == "test-cx"

    def test_results_in_rank_order(self, search_client):
        """Results come back flattened in API rank order."""
        results = search_client.search("seo tools", 15)

        assert [r.title for r in results] == [f"Result {i}" for i in range(1, 16)]
        assert isinstance(results[0], SearchResult)
        assert results[0].display_link == "ref1.example"

    def test_stops_when_results_run_out(self, make_search_client):
        """The first empty page ends the search early."""
        api = FakeSearchAPI(total=12)
        client = make_search_client(api)

        results = client.search("rare query", 50)

        assert [c["start"] for c in api.calls] == ["1", "11", "21"]
        assert len(results) == 12

    def test_short_page_does_not_end_search(self, make_search_client):
        """A page with fewer items than requested is followed by the next page."""
        api = FakeSearchAPI(page_sizes={1: 9})
        client = make_search_client(api)

        results = client.search("seo tools", 20)

        assert [c["start"] for c in api.calls] == ["1", "11"]
        assert len(results) == 19
        assert results[8].title == "Result 9"
        assert results[9].title == "Result 11"

    def test_stops_on_empty_page(self, make_search_client):
        """An empty first page returns no results after a single call."""
        api = FakeSearchAPI(total=0)
        client = make_search_client(api)

        assert client.search("nothing", 30) == []
        assert len(api.calls) == 1

    def test_failed_page_aborts_search(self, make_search_client):
        """A failing page raises FetchError with the HTTP status."""
        api = FakeSearchAPI(fail_starts=[11], fail_status=500)
        client = make_search_client(api)

        with pytest.raises(FetchError) as exc_info:
            client.search("seo tools", 30)

        assert exc_info.value.status_code == 500
        assert len(api.calls) == 2
        assert client.failed_requests == 1

    def test_never_requests_past_start_limit(self, search_api, search_client):
        """The API refuses start indexes above 100."""
        results = search_client.search("seo tools", 150)

        assert max(int(c["start"]) for c in search_api.calls) <= 100
        assert len(results) == 100

    def test_zero_results_makes_no_calls(self, search_api, search_client):
        assert search_client.search("seo tools", 0) == []
        assert search_api.calls == []


class TestSearchWithBackoff:
    """Test cases for the lenient SERP search."""

    def test_failed_page_is_skipped(self, make_search_client):
        """A failed page is logged and the next page is still requested."""
        api = FakeSearchAPI(fail_starts=[11], fail_status=500)
        client = make_search_client(api)

        results = client.search_with_backoff("seo tools", 30)

        assert len(api.calls) == 3
        assert [r.title for r in results][:10] == [f"Result {i}" for i in range(1, 11)]
        assert results[10].title == "Result 21"

    def test_sleeps_between_calls_and_longer_after_rate_limit(self, make_search_client):
        """request_delay after each success, rate_limit_delay after a 429."""
        api = FakeSearchAPI(fail_starts=[11], fail_status=429)
        client = make_search_client(api, request_delay=1.0, rate_limit_delay=5.0)

        with patch("linkscout.external.google_search.time.sleep") as mock_sleep:
            client.search_with_backoff("seo tools", 30)

        assert mock_sleep.call_args_list == [call(1.0), call(5.0), call(1.0)]
        # The rate-limited call is not retried
        assert [c["start"] for c in api.calls] == ["1", "11", "21"]

    def test_non_rate_limit_error_does_not_wait(self, make_search_client):
        api = FakeSearchAPI(fail_starts=[1], fail_status=500)
        client = make_search_client(api, request_delay=1.0, rate_limit_delay=5.0)

        with patch("linkscout.external.google_search.time.sleep") as mock_sleep:
            results = client.search_with_backoff("seo tools", 10)

        assert results == []
        mock_sleep.assert_not_called()


class TestMultipleKeywords:
    """Test cases for multi-keyword search."""

    def test_results_are_tagged_and_deduplicated(self, search_client):
        """The same URL found by two keywords is kept once, for the first keyword."""
        results = search_client.search_multiple_keywords(["first", "second"], 5)

        assert len(results) == 5
        assert all(r.keyword == "first" for r in results)

    def test_distinct_urls_per_keyword(self, make_search_client):
        api = FakeSearchAPI(link_template="https://ref{i}.example/{q}")
        client = make_search_client(api)

        results = client.search_multiple_keywords(["alpha", "beta"], 3)

        assert len(results) == 6
        assert [r.keyword for r in results] == ["alpha"] * 3 + ["beta"] * 3
        assert results[0].to_dict()["keyword"] == "alpha"

    def test_search_from_metadata(self, make_search_client):
        api = FakeSearchAPI(link_template="https://ref{i}.example/{q}")
        client = make_search_client(api)
        metadata = [PageMetadata(url="https://a.example/", keywords="kids fashion", h1_tags=["Uniforms"])]

        results = client.search_from_metadata(metadata, 2)

        assert [c["q"] for c in api.calls] == ["kids fashion", "Uniforms"]
        assert len(results) == 4


class TestKeywordsFromMetadata:
    """Test cases for keyword derivation."""

    def test_collects_meta_keywords_h1_and_first_h2s(self):
        metadata = [
            PageMetadata(
                url="https://a.example/",
                keywords="shoes, kids shoes , ,boots",
                h1_tags=["Best Shoes"],
                h2_tags=["One", "Two", "Three", "Four"],
            ),
            PageMetadata(url="https://b.example/", keywords="boots", h1_tags=["Best Shoes", "Other"]),
        ]

        keywords = keywords_from_metadata(metadata)

        assert keywords == ["shoes", "kids shoes", "boots", "Best Shoes", "One", "Two", "Three", "Other"]

    def test_limit(self):
        metadata = [PageMetadata(url="https://a.example/", h1_tags=[f"k{i}" for i in range(20)])]

        assert len(keywords_from_metadata(metadata, limit=5)) == 5

    def test_degraded_records_contribute_nothing(self):
        assert keywords_from_metadata([PageMetadata(url="https://a.example/", error="boom")]) == []
