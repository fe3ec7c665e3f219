"""
Application state — optimistic inserts and polling ownership.

Records created from a form show up immediately, before the next refetch
returns them. They sit in an OptimisticCache keyed by a correlation id and
are shown ahead of the fetched list until the fetched list contains them
(matched on `_id`) or they reach `max_age` seconds.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from inventory_engine.connectors.poller import PollingTask

logger = logging.getLogger(__name__)


def _record_id(record: dict) -> Optional[str]:
    return record.get("_id") or record.get("id")


@dataclass
class PendingRecord:
    correlation_id: str
    record: dict
    created_at: float


class OptimisticCache:
    """In-memory cache of records created locally but not yet refetched."""

    def __init__(self, max_age: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.max_age = max_age
        self.clock = clock
        self._entries: Dict[str, PendingRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, record: dict, correlation_id: Optional[str] = None) -> str:
        """Cache a just-created record. Returns its correlation id."""
        correlation_id = correlation_id or uuid.uuid4().hex
        with self._lock:
            self._entries[correlation_id] = PendingRecord(correlation_id, dict(record), self.clock())
        return correlation_id

    def confirm(self, correlation_id: str, server_record: dict) -> None:
        """Replace a placeholder with the record the backend answered with."""
        with self._lock:
            entry = self._entries.get(correlation_id)
            if entry is not None:
                entry.record = dict(server_record)

    def discard(self, correlation_id: str) -> None:
        with self._lock:
            self._entries.pop(correlation_id, None)

    def pending(self) -> List[dict]:
        """Cached records, newest first."""
        with self._lock:
            entries = sorted(self._entries.values(), key=lambda e: e.created_at, reverse=True)
        return [e.record for e in entries]

    def reconcile(self, fetched: List[dict]) -> int:
        """
        Drop entries the fetched list now contains, and expired entries.

        Returns the number of entries dropped.
        """
        fetched_ids = {_record_id(r) for r in fetched or []} - {None}
        now = self.clock()
        with self._lock:
            stale = [
                cid for cid, entry in self._entries.items()
                if _record_id(entry.record) in fetched_ids or now - entry.created_at >= self.max_age
            ]
            for cid in stale:
                del self._entries[cid]
        if stale:
            logger.debug("Reconciled %d optimistic record(s)", len(stale))
        return len(stale)

    def merge(self, fetched: List[dict]) -> List[dict]:
        """Reconcile, then return pending records followed by the fetched list."""
        fetched = list(fetched or [])
        self.reconcile(fetched)
        seen = set()
        merged = []
        for record in self.pending() + fetched:
            rid = _record_id(record)
            if rid is not None:
                if rid in seen:
                    continue
                seen.add(rid)
            merged.append(record)
        return merged


@dataclass
class AppState:
    """
    Everything the dashboard keeps between reruns of one session.

    Pollers are owned by a page; switching page cancels the pollers of every
    other page so no background refresh outlives the view that needs it.
    `owner_alive` is handed to every poller, so they also stop once the
    session that owns this state has ended.
    """

    optimistic: Dict[str, OptimisticCache] = field(default_factory=dict)
    pollers: Dict[str, Dict[str, PollingTask]] = field(default_factory=dict)
    current_page: Optional[str] = None
    owner_alive: Optional[Callable[[], bool]] = None

    def cache(self, collection: str) -> OptimisticCache:
        if collection not in self.optimistic:
            self.optimistic[collection] = OptimisticCache()
        return self.optimistic[collection]

    def poller(self, page: str, name: str, fetch: Callable, interval: float) -> PollingTask:
        """Return the running poller for (page, name), starting one if needed."""
        tasks = self.pollers.setdefault(page, {})
        task = tasks.get(name)
        if task is None or task.cancelled:
            task = PollingTask(
                f"{page}:{name}", fetch=fetch, interval=interval, alive=self.owner_alive,
            ).start()
            tasks[name] = task
        return task

    def enter_page(self, page: str) -> None:
        """Make *page* current and cancel every other page's pollers."""
        if page == self.current_page:
            return
        for owner in list(self.pollers):
            if owner != page:
                self.cancel_page(owner)
        self.current_page = page

    def cancel_page(self, page: str) -> None:
        for task in self.pollers.pop(page, {}).values():
            task.cancel()

    def shutdown(self) -> None:
        for page in list(self.pollers):
            self.cancel_page(page)
