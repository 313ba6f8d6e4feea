# tests/conftest.py
"""Shared fixtures: fake search API and fake web pages over httpx.MockTransport."""

import asyncio

import httpx
import pytest

from linkscout.external.google_search import GoogleSearchClient
from linkscout.fetcher import PageFetcher


class FakeSearchAPI:
    """Stands in for the Custom Search endpoint.

    Serves `total` numbered results and records the params of every call.
    page_sizes maps a start index to a smaller item count for that page.
    """

    def __init__(self, total=100, fail_starts=None, fail_status=500, link_template=None, page_sizes=None):
        self.total = total
        self.page_sizes = dict(page_sizes or {})
        self.fail_starts = set(fail_starts or [])
        self.fail_status = fail_status
        self.link_template = link_template or "https://ref{i}.example/article"
        self.calls = []

    def item(self, i, query):
        return {
            "title": f"Result {i}",
            "link": self.link_template.format(i=i, q=query.replace('"', "").replace(" ", "-")),
            "snippet": f"Snippet {i} for {query}",
            "displayLink": f"ref{i}.example",
        }

    def __call__(self, request):
        params = dict(request.url.params)
        self.calls.append(params)
        start = int(params["start"])
        num = int(params["num"])

        if start in self.fail_starts:
            return httpx.Response(self.fail_status, json={"error": {"code": self.fail_status}})

        num = min(num, self.page_sizes.get(start, num))
        last = min(start + num - 1, self.total)
        items = [self.item(i, params["q"]) for i in range(start, last + 1)]
        return httpx.Response(200, json={"items": items} if items else {})


class FakeWeb:
    """Serves canned pages keyed by URL.

    A value may be an HTML string, a (status, html) tuple, or an exception
    instance to raise for that URL. Tracks how many requests are in flight
    and records when each one starts and ends.
    """

    def __init__(self, pages=None, delay=0.0):
        self.pages = dict(pages or {})
        self.delay = delay
        self.requested = []
        self.events = []  # ("start" | "end", url) in the order they happened
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, request):
        url = str(request.url)
        self.requested.append(url)
        self.events.append(("start", url))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            page = self.pages.get(url)
            if page is None:
                return httpx.Response(404, text="not found")
            if isinstance(page, Exception):
                raise page
            if isinstance(page, tuple):
                status, html = page
                return httpx.Response(status, text=html)
            return httpx.Response(200, text=page)
        finally:
            self.in_flight -= 1
            self.events.append(("end", url))


@pytest.fixture
def search_api():
    return FakeSearchAPI()


@pytest.fixture
def make_search_client():
    """Factory building a GoogleSearchClient backed by a FakeSearchAPI."""

    def _make(api, **kwargs):
        kwargs.setdefault("request_delay", 0)
        kwargs.setdefault("rate_limit_delay", 0)
        kwargs.setdefault("keyword_delay", 0)
        client = httpx.Client(transport=httpx.MockTransport(api))
        return GoogleSearchClient("test-key", "test-cx", http_client=client, **kwargs)

    return _make


@pytest.fixture
def search_client(search_api, make_search_client):
    return make_search_client(search_api)


@pytest.fixture
def make_fetcher():
    """Factory building a PageFetcher backed by a FakeWeb."""

    def _make(web):
        client = httpx.AsyncClient(transport=httpx.MockTransport(web))
        return PageFetcher(timeout=5.0, http_client=client)

    return _make
