# bank_scraper/crawler/frontier.py
"""
URL frontier: pending queue, visited set and the hostname scope rule.

The frontier is not thread- or task-safe on purpose; it is only touched
from the orchestrator's own control flow.
"""
from __future__ import annotations

from collections import deque
from enum import Enum
from typing import Deque, Iterable, List, Optional, Set

from bank_scraper.logger import logger
from bank_scraper.utils import extract_hostname, resolve_url


class EnqueueStatus(str, Enum):
    ENQUEUED = "enqueued"
    SKIPPED_INVALID = "skipped_invalid"
    SKIPPED_OUT_OF_SCOPE = "skipped_out_of_scope"
    SKIPPED_SEEN = "skipped_seen"


class Frontier:
    """Known-but-unvisited URLs plus the set of visited ones.

    A URL moves unseen -> queued -> visited once. Dedup is on the resolved
    absolute URL string as-is: trailing slashes, query order and case are
    not normalized.
    """

    def __init__(self, target_domain: str) -> None:
        self.target_domain = target_domain.lower()
        self._queue: Deque[str] = deque()
        self._queued: Set[str] = set()
        self._visited: Set[str] = set()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def is_queued(self, url: str) -> bool:
        return url in self._queued

    def in_scope(self, url: str) -> bool:
        """Hostname contains the target domain (substring, so subdomains pass)."""
        return self.target_domain in extract_hostname(url)

    def seed(self, url: str) -> EnqueueStatus:
        return self.enqueue_if_in_scope(url)

    def enqueue_if_in_scope(
        self,
        url: str,
        origin_url: Optional[str] = None,
        *,
        allow_any_host: bool = False,
    ) -> EnqueueStatus:
        """Resolve *url* against *origin_url* and queue it if new and in scope."""
        absolute = resolve_url(url, origin_url or "")
        if absolute is None:
            return EnqueueStatus.SKIPPED_INVALID
        if not allow_any_host and not self.in_scope(absolute):
            return EnqueueStatus.SKIPPED_OUT_OF_SCOPE
        if absolute in self._visited or absolute in self._queued:
            return EnqueueStatus.SKIPPED_SEEN
        self._queue.append(absolute)
        self._queued.add(absolute)
        logger.debug("Queued %s", absolute)
        return EnqueueStatus.ENQUEUED

    def enqueue_links(self, links: Iterable[str], origin_url: str) -> int:
        """Feed discovered links back in; returns how many were queued."""
        added = 0
        for link in links:
            if self.enqueue_if_in_scope(link, origin_url) is EnqueueStatus.ENQUEUED:
                added += 1
        return added

    def dequeue_batch(self, max_count: int) -> List[str]:
        """Pop up to *max_count* unvisited URLs in FIFO order."""
        batch: List[str] = []
        while self._queue and len(batch) < max_count:
            url = self._queue.popleft()
            self._queued.discard(url)
            if url in self._visited:
                continue
            batch.append(url)
        return batch

    def mark_visited(self, url: str) -> None:
        self._visited.add(url)
        self._queued.discard(url)

    def is_exhausted(self) -> bool:
        return not self._queue
