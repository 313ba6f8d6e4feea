"""Async page fetching and fixed-window batching."""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, List, Optional, Sequence, TypeVar, Union

import httpx

from linkscout.constants import BROWSER_HEADERS, BROWSER_USER_AGENT
from linkscout.exceptions import FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class FetchedPage:
    """HTML body of a successfully fetched page."""

    url: str
    status_code: int
    html: str


class PageFetcher:
    """Fetches arbitrary pages with browser-like headers and a fixed timeout."""

    def __init__(
        self,
        user_agent: str = BROWSER_USER_AGENT,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: User-Agent header sent with every request
            timeout: Per-request timeout in seconds
            http_client: Optional shared AsyncClient (closed by the caller)
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.headers = {"User-Agent": user_agent, **BROWSER_HEADERS}
        self._client = http_client

    @asynccontextmanager
    async def session(self) -> AsyncIterator["PageFetcher"]:
        """Share one AsyncClient across every fetch made inside the block.

        An injected client is reused as is; otherwise a client is opened for
        the block and closed when it exits.
        """
        if self._client is not None:
            yield self
            return

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            self._client = client
            try:
                yield self
            finally:
                self._client = None

    async def fetch(self, url: str) -> FetchedPage:
        """Fetch a page.

        Args:
            url: Page URL

        Returns:
            FetchedPage with status and body

        Raises:
            FetchError: On timeout, connection failure or a non-2xx status
        """
        try:
            if self._client is not None:
                response = await self._client.get(url, headers=self.headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url, headers=self.headers)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            raise FetchError(f"Request timeout after {self.timeout}s", url=url) from e

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(
                f"Request failed with status code {status}",
                status_code=status,
                url=url,
            ) from e

        except httpx.HTTPError as e:
            error_msg = str(e) or type(e).__name__
            raise FetchError(f"Connection error: {error_msg}", url=url) from e

        return FetchedPage(url=url, status_code=response.status_code, html=response.text)


async def gather_in_windows(
    items: Sequence[T],
    window_size: int,
    worker: Callable[[T], Awaitable[R]],
    on_window: Optional[Callable[[int, int], None]] = None,
    pause: float = 0.0,
) -> List[Union[R, BaseException]]:
    """Run worker over items in consecutive fixed-size windows.

    Every window is awaited in full before the next one starts. The result
    list lines up with items; a worker that raised leaves its exception in
    its slot instead of a value.

    Args:
        items: Inputs, processed in order
        window_size: Maximum number of workers in flight
        worker: Coroutine function applied to each item
        on_window: Optional callback(done, total) run after each window
        pause: Seconds to sleep between windows

    Returns:
        One result (or exception) per input item, in input order
    """
    if window_size < 1:
        raise ValueError("window_size must be at least 1")

    results: List[Union[R, BaseException]] = []
    total = len(items)

    for start in range(0, total, window_size):
        window = items[start:start + window_size]
        window_results = await asyncio.gather(
            *(worker(item) for item in window),
            return_exceptions=True,
        )
        results.extend(window_results)

        if on_window is not None:
            on_window(len(results), total)

        if pause and start + window_size < total:
            logger.info("Pausing between batches...")
            await asyncio.sleep(pause)

    return results
