# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web
from playwright.async_api import TimeoutError as PlaywrightTimeout

import bank_scraper.crawler.fetcher as fetcher_module
from bank_scraper.crawler.fetcher import DocumentFetcher
from bank_scraper.crawler.models import FetchFailure, HtmlResult
from bank_scraper.exceptions import DownloadError, ErrorKind, RenderingUnavailableError
from conftest import BASE_URL, FakeBrowser, html_page


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def binary_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_pdf(request):
        assert request.headers["User-Agent"] == "TestAgent/1.0"
        return web.Response(body=b"%PDF-1.4 fake", content_type="application/pdf")

    async def handle_slow(_):
        await asyncio.sleep(2)
        return web.Response(body=b"late")

    app.router.add_get("/doc.pdf", handle_pdf)
    app.router.add_get("/slow.pdf", handle_slow)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


# --------------------------------------------------------------------------- #
#                                  fetch_html                                 #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_fetch_html_returns_markup_and_absolute_links(make_config):
    markup = html_page("Conteúdo", ["/a"])
    browser = FakeBrowser({BASE_URL: (markup, ["/a", "b", "https://other.example.com/c", ""])})
    async with DocumentFetcher(make_config(user_agent="TestAgent/1.0"), browser=browser) as fetcher:
        result = await fetcher.fetch_html(BASE_URL)

    assert isinstance(result, HtmlResult)
    assert result.markup == markup
    assert result.links == [BASE_URL + "a", BASE_URL + "b", "https://other.example.com/c"]
    assert browser.wait_conditions == ["networkidle"]
    assert browser.contexts[0].options["user_agent"] == "TestAgent/1.0"
    assert browser.contexts[0].closed
    # injected browsers are not owned by the fetcher
    assert not browser.closed


@pytest.mark.asyncio()
async def test_fetch_html_timeout_is_a_failure(basic_config):
    browser = FakeBrowser({BASE_URL: PlaywrightTimeout("Timeout 1000ms exceeded")})
    async with DocumentFetcher(basic_config, browser=browser) as fetcher:
        result = await fetcher.fetch_html(BASE_URL)

    assert isinstance(result, FetchFailure)
    assert result.kind is ErrorKind.NAVIGATION_TIMEOUT
    assert "Timeout" in result.reason
    assert browser.contexts[0].closed


@pytest.mark.asyncio()
async def test_fetch_html_navigation_error(basic_config):
    browser = FakeBrowser({})
    async with DocumentFetcher(basic_config, browser=browser) as fetcher:
        result = await fetcher.fetch_html(BASE_URL + "missing")

    assert isinstance(result, FetchFailure)
    assert result.kind is ErrorKind.NAVIGATION_ERROR
    assert browser.contexts[0].closed


@pytest.mark.asyncio()
async def test_context_closed_on_unexpected_error(basic_config):
    browser = FakeBrowser({BASE_URL: RuntimeError("renderer crashed")})
    async with DocumentFetcher(basic_config, browser=browser) as fetcher:
        with pytest.raises(RuntimeError):
            await fetcher.fetch_html(BASE_URL)
    assert browser.contexts[0].closed


@pytest.mark.asyncio()
async def test_browser_launch_failure_is_fatal(basic_config, monkeypatch):
    def no_playwright():
        raise OSError("Executable doesn't exist")

    monkeypatch.setattr(fetcher_module, "async_playwright", no_playwright)
    fetcher = DocumentFetcher(basic_config)
    with pytest.raises(RenderingUnavailableError):
        async with fetcher:
            pass
    assert fetcher.session is None


@pytest.mark.asyncio()
async def test_owned_browser_is_released(basic_config, monkeypatch):
    browser = FakeBrowser({})
    stopped = []

    class FakeChromium:
        async def launch(self, headless, args):
            assert headless is True
            assert "--no-sandbox" in args
            return browser

    class FakePlaywright:
        chromium = FakeChromium()

        async def stop(self):
            stopped.append(True)

    class FakeManager:
        async def start(self):
            return FakePlaywright()

    monkeypatch.setattr(fetcher_module, "async_playwright", FakeManager)
    async with DocumentFetcher(basic_config) as fetcher:
        assert fetcher.browser is browser
    assert browser.closed
    assert stopped == [True]


# --------------------------------------------------------------------------- #
#                                 fetch_bytes                                 #
# --------------------------------------------------------------------------- #


@pytest.mark.asyncio()
async def test_fetch_bytes(make_config, binary_server):
    config = make_config(user_agent="TestAgent/1.0")
    async with DocumentFetcher(config, browser=FakeBrowser()) as fetcher:
        data = await fetcher.fetch_bytes(f"{binary_server}/doc.pdf")
    assert data == b"%PDF-1.4 fake"


@pytest.mark.asyncio()
async def test_fetch_bytes_http_error(basic_config, binary_server):
    async with DocumentFetcher(basic_config, browser=FakeBrowser()) as fetcher:
        with pytest.raises(DownloadError, match="HTTP 404"):
            await fetcher.fetch_bytes(f"{binary_server}/missing.pdf")


@pytest.mark.asyncio()
async def test_fetch_bytes_timeout(make_config, binary_server):
    config = make_config(download_timeout_ms=200)
    async with DocumentFetcher(config, browser=FakeBrowser()) as fetcher:
        with pytest.raises(DownloadError, match="timed out"):
            await fetcher.fetch_bytes(f"{binary_server}/slow.pdf")


@pytest.mark.asyncio()
async def test_fetch_bytes_connection_error(basic_config, unused_tcp_port):
    async with DocumentFetcher(basic_config, browser=FakeBrowser()) as fetcher:
        with pytest.raises(DownloadError):
            await fetcher.fetch_bytes(f"http://localhost:{unused_tcp_port}/nothing.pdf")
