# bank_scraper/crawler/fetcher.py
"""
Fetcher module: rendered-HTML fetches through a headless browser and raw
binary downloads through aiohttp.

Both kinds of fetch carry their own timeout and never retry.
"""
from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Union
from urllib.parse import urljoin

from aiohttp import ClientError, ClientSession, ClientTimeout
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout
from playwright.async_api import async_playwright

from bank_scraper.config import ScraperConfig
from bank_scraper.crawler.models import FetchFailure, HtmlResult
from bank_scraper.exceptions import DownloadError, ErrorKind, RenderingUnavailableError
from bank_scraper.logger import logger

_LINKS_JS = "anchors => anchors.map(a => a.href).filter(href => href)"
_BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class DocumentFetcher:
    """Owns the browser and the HTTP session for one crawl run.

    Use as an async context manager; resources are released on every exit
    path. A browser may be injected (tests, shared browsers); it is then
    neither launched nor closed here.
    """

    def __init__(self, config: ScraperConfig, browser: Any = None) -> None:
        self.config = config
        self.browser = browser
        self._owns_browser = browser is None
        self._playwright: Any = None
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> DocumentFetcher:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        if self.browser is None:
            try:
                self._playwright = await async_playwright().start()
                self.browser = await self._playwright.chromium.launch(
                    headless=self.config.headless,
                    args=_BROWSER_ARGS,
                )
            except Exception as exc:
                logger.error("Failed to launch browser: %s", exc)
                await self.close()
                raise RenderingUnavailableError(f"Browser initialization failed: {exc}") from exc
            logger.info("Browser initialized")
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.download_timeout_ms / 1000),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )

    async def close(self) -> None:
        if self.session is not None and not self.session.closed:
            try:
                await self.session.close()
            except Exception as exc:
                logger.warning("Error closing HTTP session: %s", exc)
        self.session = None
        if self._owns_browser:
            if self.browser is not None:
                try:
                    await self.browser.close()
                    logger.info("Browser closed")
                except Exception as exc:
                    logger.warning("Error closing browser: %s", exc)
                self.browser = None
            if self._playwright is not None:
                try:
                    await self._playwright.stop()
                except Exception as exc:
                    logger.warning("Error stopping Playwright: %s", exc)
                self._playwright = None

    async def fetch_html(self, url: str) -> Union[HtmlResult, FetchFailure]:
        """Render *url*, wait for network idle, return markup and absolute anchor hrefs."""
        if self.browser is None:
            raise RuntimeError("Browser not initialized")
        context = await self.browser.new_context(user_agent=self.config.user_agent)
        try:
            page = await context.new_page()
            await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.config.navigation_timeout_ms,
            )
            markup = await page.content()
            hrefs: List[str] = await page.eval_on_selector_all("a[href]", _LINKS_JS)
        except PlaywrightTimeout as exc:
            logger.warning("Navigation timeout %s: %s", url, exc)
            return FetchFailure(url, f"navigation timeout: {exc}", ErrorKind.NAVIGATION_TIMEOUT)
        except PlaywrightError as exc:
            logger.warning("Navigation failed %s: %s", url, exc)
            return FetchFailure(url, f"navigation error: {exc}", ErrorKind.NAVIGATION_ERROR)
        finally:
            try:
                await context.close()
            except Exception as exc:
                logger.debug("Error closing browser context for %s: %s", url, exc)
        links = [urljoin(url, href) for href in hrefs if isinstance(href, str) and href]
        return HtmlResult(url=url, markup=markup, links=links)

    async def fetch_bytes(self, url: str) -> bytes:
        """GET *url* and return the body; raises DownloadError on any failure."""
        if self.session is None:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    raise DownloadError(f"HTTP {resp.status} for {url}")
                return await resp.read()
        except asyncio.TimeoutError as exc:
            raise DownloadError(f"download timed out after {self.config.download_timeout_ms} ms") from exc
        except ClientError as exc:
            raise DownloadError(f"download failed: {exc}") from exc
