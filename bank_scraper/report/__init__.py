"""bank_scraper.report: writers for the crawl dataset."""

from __future__ import annotations

from bank_scraper.report.json_report import render_json

__all__ = ["render_json"]
