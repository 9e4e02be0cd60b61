# === FILE: bank_scraper/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from bank_scraper.config import ScraperConfig
from bank_scraper.crawler.fetcher import DocumentFetcher
from bank_scraper.crawler.frontier import EnqueueStatus, Frontier
from bank_scraper.crawler.models import (
    ContentType,
    CrawlState,
    CrawlStatus,
    CrawlTask,
    FetchFailure,
    HtmlTask,
    PdfTask,
    TaskOutcome,
    build_records,
    classify_task,
)
from bank_scraper.exceptions import ErrorKind
from bank_scraper.logger import logger
from bank_scraper.parser.chunker import Chunker
from bank_scraper.parser.html_parser import TextNormalizer
from bank_scraper.parser.language import LanguageClassifier
from bank_scraper.parser.pdf_parser import PdfExtractor
from bank_scraper.utils import is_pdf_url

__all__ = ("CrawlOrchestrator",)

Sleeper = Callable[[float], Awaitable[None]]


class CrawlOrchestrator:
    """Batch-wise crawl of one site: at most ``max_concurrent_pages`` fetches in
    flight, each batch fully resolved before the next one starts.

    Per-URL failures are logged and recorded; they never stop the run and a
    failed URL is not retried.
    """

    def __init__(
        self,
        config: ScraperConfig,
        fetcher: DocumentFetcher,
        *,
        pdf_extractor: Optional[PdfExtractor] = None,
        normalizer: Optional[TextNormalizer] = None,
        classifier: Optional[LanguageClassifier] = None,
        chunker: Optional[Chunker] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.pdf_extractor = pdf_extractor or PdfExtractor(fetcher, config.pdfs_dir)
        self.normalizer = normalizer or TextNormalizer(config.remove_selectors, config.content_selectors)
        self.classifier = classifier or LanguageClassifier(config.english_path_markers)
        self.chunker = chunker or Chunker(config.chunk_size, config.min_content_length)
        self._sleep = sleep
        self.state = CrawlState(frontier=Frontier(config.target_domain))

    @property
    def status(self) -> CrawlStatus:
        return self.state.status

    async def run(self) -> CrawlState:
        if self.state.status is not CrawlStatus.IDLE:
            raise RuntimeError(f"Crawl already started (status={self.state.status.value})")
        state = self.state
        frontier = state.frontier
        frontier.seed(self.config.seed_url)
        state.status = CrawlStatus.RUNNING
        logger.info("Starting crawl of %s", self.config.target_domain)
        logger.info("Max concurrent pages: %d", self.config.max_concurrent_pages)
        logger.info("Max pages limit: %d", self.config.max_pages)
        start = time.monotonic()

        try:
            while not frontier.is_exhausted() and len(state.records) < self.config.max_pages:
                batch = frontier.dequeue_batch(self.config.max_concurrent_pages)
                if not batch:
                    continue
                tasks: List[CrawlTask] = []
                for url in batch:
                    frontier.mark_visited(url)
                    tasks.append(classify_task(url, self.config.pdf_extensions))

                outcomes = await asyncio.gather(
                    *(self._dispatch(task) for task in tasks), return_exceptions=True
                )
                for task, outcome in zip(tasks, outcomes):
                    self._apply(task, outcome)

                if not frontier.is_exhausted() and len(state.records) < self.config.max_pages:
                    await self._sleep(self.config.request_delay_ms / 1000)
        except asyncio.CancelledError:
            state.status = CrawlStatus.DRAINING
            logger.warning("Crawl interrupted, %d records collected", len(state.records))
            state.status = CrawlStatus.TERMINATED
            raise
        except Exception:
            logger.exception("Crawl aborted after %d records", len(state.records))
            state.status = CrawlStatus.TERMINATED
            raise

        state.status = CrawlStatus.COMPLETED
        duration = time.monotonic() - start
        logger.info(
            "Scraping completed! Processed %d items from %d URLs in %.2f s",
            len(state.records),
            frontier.visited_count,
            duration,
        )
        return state

    # ------------------------------------------------------------------ #
    # Per-URL work                                                       #
    # ------------------------------------------------------------------ #

    async def _dispatch(self, task: CrawlTask) -> TaskOutcome:
        logger.info("Processing: %s", task.url)
        if isinstance(task, PdfTask):
            return await self._process_pdf(task)
        return await self._process_html(task)

    async def _process_html(self, task: HtmlTask) -> TaskOutcome:
        result = await self.fetcher.fetch_html(task.url)
        if isinstance(result, FetchFailure):
            return TaskOutcome(task.url, failure=result)

        text = self.normalizer.normalize_html(result.markup)
        records = []
        if len(text) >= self.config.min_content_length:
            language = self.classifier.classify(text, task.url)
            chunks = self.chunker.chunk(text)
            records = build_records(task.url, ContentType.HTML, language, chunks)
            logger.info("Scraped: %s (%d chunks, %d chars)", task.url, len(chunks), len(text))
        else:
            logger.debug("Skipping %s: %d chars below minimum", task.url, len(text))
        return TaskOutcome(task.url, records=records, links=list(result.links))

    async def _process_pdf(self, task: PdfTask) -> TaskOutcome:
        result = await self.pdf_extractor.fetch_and_extract(task.url, self.config.seed_url)
        if isinstance(result, FetchFailure):
            return TaskOutcome(task.url, failure=result)

        records = []
        if len(result.text) >= self.config.min_content_length:
            language = self.classifier.classify(result.text, task.url)
            chunks = self.chunker.chunk(result.text)
            records = build_records(
                task.url,
                ContentType.PDF,
                language,
                chunks,
                pdf_pages=result.page_count,
                pdf_filename=result.filename,
            )
            logger.info("PDF processed: %s (%d chunks)", task.url, len(chunks))
        return TaskOutcome(task.url, records=records)

    def _apply(self, task: CrawlTask, outcome: Union[TaskOutcome, BaseException]) -> None:
        state = self.state
        if not isinstance(outcome, TaskOutcome):
            logger.error("Error processing %s: %s", task.url, outcome)
            kind = getattr(outcome, "kind", None)
            if not isinstance(kind, ErrorKind):
                kind = ErrorKind.EXTRACTION_ERROR if isinstance(task, PdfTask) else ErrorKind.NAVIGATION_ERROR
            state.failures.append(FetchFailure(task.url, f"{type(outcome).__name__}: {outcome}", kind))
            return
        if outcome.failure is not None:
            logger.warning("Failed %s: %s", outcome.url, outcome.failure.reason)
            state.failures.append(outcome.failure)
            return
        state.extend(outcome.records)
        self._feed_links(outcome.links, outcome.url)

    def _feed_links(self, links: Sequence[str], origin: str) -> None:
        frontier = self.state.frontier
        added = frontier.enqueue_links(links, origin)
        if self.config.follow_external_pdfs:
            for link in links:
                if is_pdf_url(link, self.config.pdf_extensions):
                    status = frontier.enqueue_if_in_scope(link, origin, allow_any_host=True)
                    if status is EnqueueStatus.ENQUEUED:
                        added += 1
        if added:
            logger.debug("Queued %d new URLs from %s", added, origin)
