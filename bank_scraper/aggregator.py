# File: bank_scraper/aggregator.py
"""bank_scraper.aggregator: summary of a crawl's dataset records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from bank_scraper.crawler.models import ContentRecord, ContentType, utc_timestamp


class CrawlSummary(TypedDict):
    """Aggregate counts written at the top of the dataset file."""

    total_items: int
    html_pages: int
    pdf_documents: int
    languages: List[str]
    scraped_at: str
    domain: str


@dataclass(slots=True)
class CrawlReport:
    """Summary plus records, ready to be serialized."""

    summary: CrawlSummary
    records: List[ContentRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"summary": dict(self.summary), "data": [r.to_dict() for r in self.records]}


def summarize(
    records: Sequence[ContentRecord], domain: str, scraped_at: Optional[str] = None
) -> CrawlSummary:
    """Counts by type and distinct languages in first-seen order."""
    languages = list(dict.fromkeys(r.language for r in records))
    return {
        "total_items": len(records),
        "html_pages": sum(1 for r in records if r.content_type is ContentType.HTML),
        "pdf_documents": sum(1 for r in records if r.content_type is ContentType.PDF),
        "languages": languages,
        "scraped_at": scraped_at or utc_timestamp(),
        "domain": domain,
    }


def aggregate_results(records: Sequence[ContentRecord], domain: str) -> CrawlReport:
    """Build the CrawlReport for a finished crawl."""
    return CrawlReport(summary=summarize(records, domain), records=list(records))
