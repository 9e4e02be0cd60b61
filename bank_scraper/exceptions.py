"""
Exception classes for the BankScraper crawl pipeline.

Per-URL errors are caught where they happen and turned into
:class:`~bank_scraper.crawler.models.FetchFailure` values; only
:class:`RenderingUnavailableError` is allowed to end a run.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Per-URL failure categories carried by FetchFailure."""

    NAVIGATION_TIMEOUT = "navigation_timeout"
    NAVIGATION_ERROR = "navigation_error"
    DOWNLOAD_ERROR = "download_error"
    EXTRACTION_ERROR = "extraction_error"
    MALFORMED_URL = "malformed_url"
    FILESYSTEM_ERROR = "filesystem_error"


class ScraperError(Exception):
    """Base exception for all scraping-related errors."""

    kind: ErrorKind | None = None


class RenderingUnavailableError(ScraperError):
    """Raised when the headless browser cannot be started."""


class DownloadError(ScraperError):
    """Raised when a binary download fails or returns a non-2xx status."""

    kind = ErrorKind.DOWNLOAD_ERROR


__all__ = [
    "ErrorKind",
    "ScraperError",
    "RenderingUnavailableError",
    "DownloadError",
]
