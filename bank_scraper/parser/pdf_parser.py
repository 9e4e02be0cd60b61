"""PDF download, storage and text extraction."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import Protocol, Tuple, Union

import pdfplumber

from bank_scraper.crawler.models import FetchFailure, PdfResult
from bank_scraper.exceptions import DownloadError, ErrorKind
from bank_scraper.logger import logger
from bank_scraper.parser.html_parser import normalize_text
from bank_scraper.utils import ensure_directory, pdf_filename, resolve_url


class BinaryFetcher(Protocol):
    async def fetch_bytes(self, url: str) -> bytes: ...


def extract_pdf_text(data: bytes) -> Tuple[str, int]:
    """Return the raw text of every page and the page count."""
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    return "\n".join(pages), len(pages)


class PdfExtractor:
    """Download a PDF, keep a copy under *pdfs_dir*, return its normalized text.

    Every failure is returned as a :class:`FetchFailure`; nothing raises past
    :meth:`fetch_and_extract`.
    """

    def __init__(self, fetcher: BinaryFetcher, pdfs_dir: Union[str, Path]) -> None:
        self.fetcher = fetcher
        self.pdfs_dir = Path(pdfs_dir)
        # best effort: a missing directory surfaces later as a per-PDF write failure
        error = ensure_directory(self.pdfs_dir)
        if error is not None:
            logger.error("Error creating PDFs directory %s: %s", self.pdfs_dir, error)

    async def fetch_and_extract(self, pdf_url: str, base_url: str) -> Union[PdfResult, FetchFailure]:
        logger.info("Processing PDF: %s", pdf_url)
        absolute = resolve_url(pdf_url, base_url)
        if absolute is None:
            return FetchFailure(pdf_url, "malformed PDF URL", ErrorKind.MALFORMED_URL)

        try:
            data = await self.fetcher.fetch_bytes(absolute)
        except DownloadError as exc:
            logger.warning("Error downloading PDF %s: %s", absolute, exc)
            return FetchFailure(absolute, str(exc), ErrorKind.DOWNLOAD_ERROR)

        # stored by basename: a later PDF with the same name overwrites the file,
        # text is always extracted from the downloaded bytes
        filename = pdf_filename(pdf_url)
        target = self.pdfs_dir / filename
        try:
            await asyncio.to_thread(target.write_bytes, data)
        except OSError as exc:
            logger.warning("Error saving PDF %s to %s: %s", absolute, target, exc)
            return FetchFailure(absolute, f"could not save {target}: {exc}", ErrorKind.FILESYSTEM_ERROR)

        try:
            raw_text, page_count = await asyncio.to_thread(extract_pdf_text, data)
        except Exception as exc:
            # pdfminer raises a variety of parser errors on corrupt input
            logger.warning("Error extracting PDF %s: %s", absolute, exc)
            return FetchFailure(absolute, f"text extraction failed: {exc}", ErrorKind.EXTRACTION_ERROR)

        text = normalize_text(raw_text)
        logger.info("PDF processed: %s (%d characters)", filename, len(text))
        return PdfResult(url=absolute, text=text, page_count=page_count, filename=filename)
