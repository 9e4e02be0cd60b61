# File: bank_scraper/utils.py
"""bank_scraper.utils: URL helpers shared by the frontier, fetcher and PDF path."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union
from urllib.parse import urljoin, urlparse

from bank_scraper.logger import logger

__all__: Sequence[str] = (
    "resolve_url",
    "extract_hostname",
    "is_pdf_url",
    "pdf_filename",
    "has_path_marker",
    "ensure_directory",
)

_DEFAULT_PDF_NAME = "document.pdf"


def resolve_url(link: str, base: str) -> Optional[str]:
    """Resolve *link* against *base*; None when the result is not an absolute http(s) URL."""
    try:
        absolute = urljoin(base, link.strip())
        parsed = urlparse(absolute)
        # .hostname / .port raise ValueError on garbage such as "http://[::1"
        hostname = parsed.hostname
        _ = parsed.port
    except ValueError as exc:
        logger.debug("Discarding malformed URL %r: %s", link, exc)
        return None
    if parsed.scheme not in ("http", "https") or not hostname:
        return None
    return absolute


def extract_hostname(url: str) -> str:
    """Lower-case hostname of *url*, or "" when it has none."""
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def is_pdf_url(url: str, extensions: Iterable[str] = (".pdf",)) -> bool:
    """True when any configured extension occurs in the lower-cased URL."""
    lowered = url.lower()
    return any(ext in lowered for ext in extensions)


def pdf_filename(pdf_url: str) -> str:
    """Last path segment of *pdf_url*, defaulting to document.pdf, always ending in .pdf."""
    path = urlparse(urljoin("https://example.com", pdf_url)).path
    name = posixpath.basename(path) or _DEFAULT_PDF_NAME
    if not name.lower().endswith(".pdf"):
        name += ".pdf"
    return name


def has_path_marker(url: str, markers: Iterable[str]) -> bool:
    """True when the URL path contains any of the given markers (e.g. "/en/")."""
    try:
        path = urlparse(url).path.lower()
    except ValueError:
        return False
    return any(marker.lower() in path for marker in markers)


def ensure_directory(path: Union[str, Path]) -> Optional[OSError]:
    """Create *path* (with parents). Returns the error instead of raising it."""
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return exc
    return None
