# === FILE: bank_scraper/parser/html_parser.py ===
"""Text extraction and cleaning for rendered pages and PDF text.

Two entry points:

* :func:`normalize_html`: strip boilerplate and noise from markup, pick
  the main content region and clean its text.
* :func:`normalize_text`: only the character-level cleaning; used for
  text that is already plain (PDF extraction).

Boilerplate is removed *before* the main content region is chosen, so
navigation or cookie banners never leak into the ``<body>`` fallback.
"""
from __future__ import annotations

import re
from collections.abc import Sequence

from bs4 import BeautifulSoup, Comment
from soupsieve import SelectorSyntaxError

from bank_scraper.config import DEFAULT_CONTENT_SELECTORS, DEFAULT_REMOVE_SELECTORS
from bank_scraper.logger import logger

__all__: Sequence[str] = ("TextNormalizer", "normalize_html", "normalize_text")

_NOISE_TAGS = ("script", "style", "noscript")

# word chars (ASCII), whitespace, Latin-1 Supplement / Latin Extended-A, basic punctuation
_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9_\s\u00C0-\u017F.,!?;:()\-\"']")
_PUNCT_RUN_RE = re.compile(r"[.,!?;:]{2,}")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Clean plain text; idempotent on its own output."""
    if not text:
        return ""
    text = _DISALLOWED_RE.sub("", text)
    text = _PUNCT_RUN_RE.sub(".", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


class TextNormalizer:
    """Markup cleaner bound to a set of boilerplate and main-content selectors."""

    def __init__(
        self,
        remove_selectors: Sequence[str] = DEFAULT_REMOVE_SELECTORS,
        content_selectors: Sequence[str] = DEFAULT_CONTENT_SELECTORS,
    ) -> None:
        self.remove_selectors = list(remove_selectors)
        self.content_selectors = list(content_selectors)

    def normalize_html(self, markup: str) -> str:
        if not markup:
            return ""
        soup = BeautifulSoup(markup, "html.parser")

        for selector in self.remove_selectors:
            try:
                matches = soup.select(selector)
            except SelectorSyntaxError as exc:
                logger.warning("Ignoring invalid selector %r: %s", selector, exc)
                continue
            for element in matches:
                # nested matches die with their already-removed ancestor
                if not element.decomposed:
                    element.decompose()

        for element in soup(list(_NOISE_TAGS)):
            element.decompose()
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

        return normalize_text(self._main_text(soup))

    def normalize_text(self, text: str) -> str:
        return normalize_text(text)

    def _main_text(self, soup: BeautifulSoup) -> str:
        for selector in self.content_selectors:
            try:
                matches = soup.select(selector)
            except SelectorSyntaxError:
                continue
            text = " ".join(el.get_text(" ") for el in matches)
            if text.strip():
                return text
        body = soup.body
        if body is not None:
            return body.get_text(" ")
        return soup.get_text(" ")


_default = TextNormalizer()


def normalize_html(markup: str) -> str:
    """:meth:`TextNormalizer.normalize_html` with the default selectors."""
    return _default.normalize_html(markup)
