"""Tests for URL categorization."""

import pytest

from linkscout.models import SearchResult
from linkscout.url_categorizer import categorize_search_results, categorize_url


class TestCategorizeUrl:
    """Test cases for categorize_url."""

    @pytest.mark.parametrize("url,category,domain", [
        ("https://www.linkedin.com/in/someone", "social_media", "linkedin.com"),
        ("https://uk.pinterest.com/pin/1", "social_media", "uk.pinterest.com"),
        ("https://medium.com/@writer/post", "social_media", "medium.com"),
        ("https://someone.wordpress.com/2024/post", "content_platform", "someone.wordpress.com"),
        ("https://news.substack.com/p/x", "content_platform", "news.substack.com"),
        ("https://www.kidsfashion.example/blog", "other", "kidsfashion.example"),
    ])
    def test_categories(self, url, category, domain):
        result = categorize_url(url)

        assert result.category == category
        assert result.domain == domain
        assert result.error is None

    def test_unparseable_url(self):
        result = categorize_url("not a url")

        assert result.category == "error"
        assert result.domain == ""
        assert result.error


class TestCategorizeSearchResults:
    """Test cases for categorize_search_results."""

    def test_groups_and_enriches(self):
        results = [
            SearchResult(title="Profile", link="https://twitter.com/x", snippet="s1", keyword="kids"),
            SearchResult(title="Blog", link="https://blog.example/post", snippet="s2", keyword="kids"),
            SearchResult(title="Broken", link="", snippet="s3"),
            SearchResult(title="Site", link="https://shop.example/", snippet="s4", keyword="shoes"),
        ]

        categories = categorize_search_results(results)

        assert set(categories) == {"social_media", "content_platform", "other", "error"}
        assert [c.title for c in categories["other"]] == ["Blog", "Site"]
        assert categories["social_media"][0].keyword == "kids"
        assert categories["error"][0].snippet == "s3"
        assert categories["content_platform"] == []
        assert categories["other"][1].to_dict()["keyword"] == "shoes"
