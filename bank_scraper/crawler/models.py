# bank_scraper/crawler/models.py
"""
Data models for the BankScraper crawler.

Fetch results, crawl tasks and output records are immutable values; the
only mutable state of a run lives in :class:`CrawlState`, which is owned
by the orchestrator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from bank_scraper.exceptions import ErrorKind
from bank_scraper.utils import is_pdf_url

if TYPE_CHECKING:
    from bank_scraper.crawler.frontier import Frontier


class ContentType(str, Enum):
    HTML = "html"
    PDF = "pdf"


class CrawlStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    COMPLETED = "completed"
    TERMINATED = "terminated"


def utc_timestamp() -> str:
    """Current time as an ISO-8601 string in UTC."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# --------------------------------------------------------------------------- #
# Fetch results                                                               #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class HtmlResult:
    """Rendered markup of a page plus every anchor href found in it (absolute)."""

    url: str
    markup: str
    links: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PdfResult:
    """Normalized text of a downloaded PDF."""

    url: str
    text: str
    page_count: int
    filename: str


@dataclass(frozen=True, slots=True)
class FetchFailure:
    """A per-URL failure; the URL is abandoned for the rest of the run."""

    url: str
    reason: str
    kind: ErrorKind


FetchResult = Union[HtmlResult, PdfResult, FetchFailure]


# --------------------------------------------------------------------------- #
# Tasks                                                                       #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class HtmlTask:
    url: str


@dataclass(frozen=True, slots=True)
class PdfTask:
    url: str


CrawlTask = Union[HtmlTask, PdfTask]


def classify_task(url: str, pdf_extensions: Sequence[str]) -> CrawlTask:
    """Decide once per URL whether it goes down the PDF or the HTML path."""
    if is_pdf_url(url, pdf_extensions):
        return PdfTask(url)
    return HtmlTask(url)


# --------------------------------------------------------------------------- #
# Output                                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class ContentRecord:
    """One chunk of one source document, as written to the dataset."""

    source_url: str
    content_type: ContentType
    language: str
    content: str
    chunk_index: Optional[int] = None
    total_chunks: Optional[int] = None
    pdf_pages: Optional[int] = None
    pdf_filename: Optional[str] = None
    scraped_at: str = field(default_factory=utc_timestamp)

    def __post_init__(self) -> None:
        if (self.chunk_index is None) != (self.total_chunks is None):
            raise ValueError("chunk_index and total_chunks must be set together")
        if self.total_chunks is not None:
            if self.total_chunks < 2:
                raise ValueError(f"total_chunks must be >= 2, got {self.total_chunks}")
            if not 1 <= self.chunk_index <= self.total_chunks:  # type: ignore[operator]
                raise ValueError(
                    f"chunk_index {self.chunk_index} out of range 1..{self.total_chunks}"
                )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "source_url": self.source_url,
            "type": self.content_type.value,
            "language": self.language,
            "content": self.content,
            "chunk_index": self.chunk_index,
            "total_chunks": self.total_chunks,
        }
        if self.content_type is ContentType.PDF:
            data["pdf_pages"] = self.pdf_pages
            data["filename"] = self.pdf_filename
        data["scraped_at"] = self.scraped_at
        return data


def build_records(
    source_url: str,
    content_type: ContentType,
    language: str,
    chunks: Sequence[str],
    *,
    pdf_pages: Optional[int] = None,
    pdf_filename: Optional[str] = None,
) -> List[ContentRecord]:
    """One record per chunk, 1-based indices only when there is more than one chunk."""
    total = len(chunks)
    multi = total > 1
    return [
        ContentRecord(
            source_url=source_url,
            content_type=content_type,
            language=language,
            content=chunk,
            chunk_index=index if multi else None,
            total_chunks=total if multi else None,
            pdf_pages=pdf_pages,
            pdf_filename=pdf_filename,
        )
        for index, chunk in enumerate(chunks, start=1)
    ]


# --------------------------------------------------------------------------- #
# Run state                                                                   #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class TaskOutcome:
    """What one dispatched URL produced; applied to the state by the orchestrator."""

    url: str
    records: List[ContentRecord] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    failure: Optional[FetchFailure] = None


@dataclass(slots=True)
class CrawlState:
    """Everything a crawl run accumulates. Records are append-only."""

    frontier: "Frontier"
    records: List[ContentRecord] = field(default_factory=list)
    failures: List[FetchFailure] = field(default_factory=list)
    status: CrawlStatus = CrawlStatus.IDLE

    def extend(self, records: Sequence[ContentRecord]) -> None:
        self.records.extend(records)
