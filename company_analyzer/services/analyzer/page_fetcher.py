"""Page fetching strategies.

Two interchangeable implementations behind one contract: a plain HTTP GET
(httpx) and a headless-browser render (CRAWL4AI) that waits for the network
to settle. Both raise ``FetchError`` on any failure.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from crawl4ai import AsyncWebCrawler, BrowserConfig, CacheMode, CrawlerRunConfig

from company_analyzer.services.analyzer.constants import USER_AGENT
from company_analyzer.services.analyzer.errors import FetchError

logger = logging.getLogger(__name__)


class PageFetcher(ABC):
    """Retrieves the HTML of a URL."""

    @abstractmethod
    async def fetch(self, url: str, timeout: float) -> str:
        """Return the page markup or raise ``FetchError``."""

    async def aclose(self) -> None:
        """Release any held resources."""


class HttpPageFetcher(PageFetcher):
    """Plain HTTP GET; the body is read as text."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    async def fetch(self, url: str, timeout: float) -> str:
        if self._client.is_closed:
            raise FetchError(f"HTTP client closed before fetching {url}", url=url)
        try:
            resp = await self._client.get(
                url, headers={"User-Agent": USER_AGENT}, timeout=timeout
            )
        except httpx.TimeoutException as e:
            raise FetchError(f"Timed out fetching {url}", url=url) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to fetch {url}: {e}", url=url) from e

        if not resp.is_success:
            raise FetchError(
                f"HTTP {resp.status_code}: {resp.reason_phrase}",
                url=url,
                status_code=resp.status_code,
            )
        return resp.text

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class BrowserPageFetcher(PageFetcher):
    """Headless-browser render via CRAWL4AI, waiting for network idle.

    One browser is started on the first fetch and shared by every fetch
    until ``aclose``.
    """

    def __init__(self) -> None:
        self._browser_config = BrowserConfig(
            headless=True,
            verbose=False,
            user_agent=USER_AGENT,
        )
        self._crawler: Optional[AsyncWebCrawler] = None
        self._start_lock = asyncio.Lock()

    async def _get_crawler(self) -> AsyncWebCrawler:
        if self._crawler is not None:
            return self._crawler

        async with self._start_lock:
            if self._crawler is None:
                crawler = AsyncWebCrawler(config=self._browser_config)
                await crawler.start()
                logger.info("Headless browser started")
                self._crawler = crawler
        return self._crawler

    async def fetch(self, url: str, timeout: float) -> str:
        run_config = CrawlerRunConfig(
            wait_until="networkidle",
            page_timeout=int(timeout * 1000),
            cache_mode=CacheMode.BYPASS,
        )
        try:
            crawler = await self._get_crawler()
            result = await asyncio.wait_for(
                crawler.arun(url, config=run_config),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise FetchError(f"Timed out rendering {url}", url=url) from e
        except Exception as e:
            raise FetchError(f"Failed to render {url}: {e}", url=url) from e

        status = getattr(result, "status_code", None)
        if status is not None and not 200 <= status < 300:
            raise FetchError(f"HTTP {status}", url=url, status_code=status)
        if not result.success or not result.html:
            raise FetchError(
                result.error_message or f"Failed to render {url}",
                url=url,
                status_code=status,
            )
        return result.html

    async def aclose(self) -> None:
        crawler, self._crawler = self._crawler, None
        if crawler is not None:
            await crawler.close()
            logger.info("Headless browser closed")


def create_page_fetcher(mode: str) -> PageFetcher:
    """Build the fetcher selected by ``Settings.fetch_mode``."""
    if mode == "browser":
        logger.info("Using headless browser page fetcher")
        return BrowserPageFetcher()
    return HttpPageFetcher()
