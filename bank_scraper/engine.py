# File: bank_scraper/engine.py
"""bank_scraper.engine: orchestration layer that runs a crawl and saves the dataset."""

from __future__ import annotations

import asyncio
import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from bank_scraper.aggregator import CrawlReport, aggregate_results
from bank_scraper.config import ScraperConfig
from bank_scraper.crawler.crawler import CrawlOrchestrator
from bank_scraper.crawler.fetcher import DocumentFetcher
from bank_scraper.logger import logger
from bank_scraper.report.json_report import render_json

__all__ = ["start_crawl", "run_crawl", "save_results"]


def save_results(report: CrawlReport, output_path: Union[str, Path]) -> Optional[Path]:
    """Write the dataset; a failure is logged and reported as None."""
    logger.info("Saving results...")
    try:
        saved = render_json(report, output_path)
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Error saving results to %s: %s", output_path, exc)
        return None
    logger.info("Results saved to %s", saved)
    logger.info("Summary: %s", report.summary)
    return saved


@contextmanager
def _cancel_on_sigterm(task: Optional[asyncio.Task]) -> Iterator[None]:
    """Cancel *task* on SIGTERM while the block runs (where the loop supports it)."""
    loop = asyncio.get_running_loop()
    installed = False
    if task is not None:
        try:
            loop.add_signal_handler(signal.SIGTERM, task.cancel)
            installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("SIGTERM handler not available on this loop")
    try:
        yield
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGTERM)


async def start_crawl(config: ScraperConfig, *, browser: Any = None) -> CrawlReport:
    """Crawl, aggregate and save. The browser is released on every exit path.

    On cancellation (interrupt) nothing is written.
    """
    logger.info("Initializing BankScraper for %s", config.seed_url)
    async with DocumentFetcher(config, browser=browser) as fetcher:
        orchestrator = CrawlOrchestrator(config, fetcher)
        with _cancel_on_sigterm(asyncio.current_task()):
            state = await orchestrator.run()
        report = aggregate_results(state.records, config.target_domain)
        if state.failures:
            logger.info("%d URLs failed during the crawl", len(state.failures))
        save_results(report, config.output_file)
    return report


def run_crawl(config: ScraperConfig) -> CrawlReport:
    """Synchronous entry point used by the CLI."""
    return asyncio.run(start_crawl(config))
