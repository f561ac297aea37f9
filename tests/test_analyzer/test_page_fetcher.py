"""Tests for company_analyzer.services.analyzer.page_fetcher."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from company_analyzer.services.analyzer.constants import USER_AGENT
from company_analyzer.services.analyzer.errors import FetchError
from company_analyzer.services.analyzer.page_fetcher import (
    BrowserPageFetcher,
    HttpPageFetcher,
    create_page_fetcher,
)


def _fetcher(handler) -> HttpPageFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpPageFetcher(client)


def _crawl_result(html: str = "<html></html>", success: bool = True, status: int = 200):
    result = MagicMock()
    result.success = success
    result.html = html
    result.status_code = status
    result.error_message = "render failed" if not success else None
    return result


def _patched_crawler(arun: AsyncMock):
    crawler = MagicMock()
    crawler.arun = arun
    crawler.start = AsyncMock()
    crawler.close = AsyncMock()
    crawler_cls = MagicMock(return_value=crawler)
    return patch(
        "company_analyzer.services.analyzer.page_fetcher.AsyncWebCrawler", crawler_cls
    )


@pytest.mark.asyncio
class TestHttpPageFetcher:
    async def test_returns_body_and_sends_user_agent(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["ua"] = request.headers["User-Agent"]
            return httpx.Response(200, text="<html>ok</html>")

        html = await _fetcher(handler).fetch("https://example.com", 30)

        assert html == "<html>ok</html>"
        assert seen["ua"] == USER_AGENT

    async def test_non_2xx_raises_with_status(self):
        fetcher = _fetcher(lambda request: httpx.Response(404))

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("https://example.com/about", 15)

        assert exc_info.value.status_code == 404
        assert "HTTP 404" in str(exc_info.value)

    async def test_timeout_raises_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(FetchError) as exc_info:
            await _fetcher(handler).fetch("https://example.com", 15)
        assert exc_info.value.status_code is None
        assert "Timed out" in str(exc_info.value)

    async def test_connection_error_raises_fetch_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FetchError):
            await _fetcher(handler).fetch("https://example.com", 15)

    async def test_borrowed_client_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        fetcher = HttpPageFetcher(client)
        await fetcher.aclose()
        assert client.is_closed is False
        await client.aclose()

    async def test_closed_client_raises_fetch_error(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        fetcher = HttpPageFetcher(client)
        await client.aclose()

        with pytest.raises(FetchError, match="closed"):
            await fetcher.fetch("https://example.com/about", 15)


@pytest.mark.asyncio
class TestBrowserPageFetcher:
    async def test_returns_rendered_html(self):
        arun = AsyncMock(return_value=_crawl_result("<html>rendered</html>"))
        with _patched_crawler(arun):
            html = await BrowserPageFetcher().fetch("https://example.com", 30)

        assert html == "<html>rendered</html>"
        config = arun.call_args.kwargs["config"]
        assert config.wait_until == "networkidle"
        assert config.page_timeout == 30_000

    async def test_non_2xx_raises(self):
        arun = AsyncMock(return_value=_crawl_result(status=503))
        with _patched_crawler(arun), pytest.raises(FetchError) as exc_info:
            await BrowserPageFetcher().fetch("https://example.com", 30)
        assert exc_info.value.status_code == 503

    async def test_unsuccessful_render_raises(self):
        arun = AsyncMock(return_value=_crawl_result(success=False))
        with _patched_crawler(arun), pytest.raises(FetchError, match="render failed"):
            await BrowserPageFetcher().fetch("https://example.com", 30)

    async def test_timeout_raises(self):
        arun = AsyncMock(side_effect=asyncio.TimeoutError())
        with _patched_crawler(arun), pytest.raises(FetchError, match="Timed out"):
            await BrowserPageFetcher().fetch("https://example.com", 1)

    async def test_browser_start_failure_raises(self):
        with _patched_crawler(AsyncMock()) as crawler_cls:
            crawler_cls.return_value.start.side_effect = RuntimeError("no chromium")
            with pytest.raises(FetchError, match="no chromium"):
                await BrowserPageFetcher().fetch("https://example.com", 30)

    async def test_one_browser_shared_until_closed(self):
        arun = AsyncMock(return_value=_crawl_result("<html>rendered</html>"))
        with _patched_crawler(arun) as crawler_cls:
            fetcher = BrowserPageFetcher()
            await fetcher.fetch("https://example.com", 30)
            await fetcher.fetch("https://example.com/about", 15)
            await fetcher.aclose()

        crawler_cls.assert_called_once()
        crawler = crawler_cls.return_value
        crawler.start.assert_awaited_once()
        crawler.close.assert_awaited_once()
        assert arun.await_count == 2

    async def test_aclose_without_fetch_starts_nothing(self):
        with _patched_crawler(AsyncMock()) as crawler_cls:
            await BrowserPageFetcher().aclose()
        crawler_cls.assert_not_called()


class TestCreatePageFetcher:
    def test_http_is_default(self):
        assert isinstance(create_page_fetcher("http"), HttpPageFetcher)

    def test_browser_mode(self):
        assert isinstance(create_page_fetcher("browser"), BrowserPageFetcher)
