# File: tests/conftest.py
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

import pytest
from playwright.async_api import Error as PlaywrightError

from bank_scraper.config import ScraperConfig
from bank_scraper.logger import init_logging

BASE_URL = "http://bank.test/"

PT_SENTENCE = (
    "O banco oferece contas de poupança e crédito para clientes em Moçambique "
)
EN_SENTENCE = (
    "The bank offers savings accounts and credit cards to customers across the country "
)

PageEntry = Union[Tuple[str, Sequence[str]], BaseException]


def html_page(body: str, links: Sequence[str] = ()) -> str:
    """Small HTML document with *body* inside <main> plus nav/footer noise."""
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return (
        "<html><head><title>Banco</title><script>var x = 1;</script></head><body>"
        f"<nav>Menu Principal Contactos</nav><main><p>{body}</p>{anchors}</main>"
        "<footer>Todos os direitos reservados</footer></body></html>"
    )


# --------------------------------------------------------------------------- #
#                      In-process fakes of the Playwright API                  #
# --------------------------------------------------------------------------- #


class FakePage:
    def __init__(self, browser: "FakeBrowser") -> None:
        self.browser = browser
        self._entry: Tuple[str, Sequence[str]] | None = None

    async def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None):
        self.browser.navigations.append(url)
        self.browser.wait_conditions.append(wait_until)
        self.browser.in_flight += 1
        self.browser.max_in_flight = max(self.browser.max_in_flight, self.browser.in_flight)
        try:
            await asyncio.sleep(self.browser.delay)
            entry = self.browser.pages.get(url)
            if entry is None:
                raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
            if isinstance(entry, BaseException):
                raise entry
            self._entry = entry
        finally:
            self.browser.in_flight -= 1

    async def content(self) -> str:
        assert self._entry is not None
        return self._entry[0]

    async def eval_on_selector_all(self, selector: str, expression: str) -> List[str]:
        assert self._entry is not None
        return list(self._entry[1])


class FakeContext:
    def __init__(self, browser: "FakeBrowser", options: Dict[str, object]) -> None:
        self.browser = browser
        self.options = options
        self.closed = False

    async def new_page(self) -> FakePage:
        return FakePage(self.browser)

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    """Maps URL -> (markup, hrefs) or an exception raised by goto()."""

    def __init__(self, pages: Dict[str, PageEntry] | None = None, delay: float = 0.0) -> None:
        self.pages: Dict[str, PageEntry] = dict(pages or {})
        self.delay = delay
        self.contexts: List[FakeContext] = []
        self.navigations: List[str] = []
        self.wait_conditions: List[str | None] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def new_context(self, **options) -> FakeContext:
        ctx = FakeContext(self, options)
        self.contexts.append(ctx)
        return ctx

    async def close(self) -> None:
        self.closed = True


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest.fixture()
def make_config(tmp_path: Path):
    """Factory for a ScraperConfig pointing at the fake site and tmp paths."""

    def _make(**overrides) -> ScraperConfig:
        values = dict(
            target_domain="bank.test",
            base_url=BASE_URL,
            max_concurrent_pages=3,
            max_pages=100,
            request_delay_ms=0,
            navigation_timeout_ms=1000,
            download_timeout_ms=1000,
            chunk_size=500,
            min_content_length=50,
            output_file=tmp_path / "dataset.json",
            pdfs_dir=tmp_path / "pdfs",
        )
        values.update(overrides)
        return ScraperConfig(**values)

    return _make


@pytest.fixture()
def basic_config(make_config) -> ScraperConfig:
    return make_config()


@pytest.fixture(autouse=True)
def fresh_logging():
    """Rebind the project logger to the current (captured) stdout for each test."""
    init_logging(level="DEBUG")
    yield
