"""
Polling task — periodic background refresh with cancellation.

A PollingTask calls `fetch()` on a daemon thread every `interval` seconds
and keeps the newest result. Each run takes a sequence number when it
starts; a result is applied only if no later run has been applied already
and the task has not been cancelled, so a slow response can never overwrite
a fresher one or land after the page that started it is gone.

An optional `alive()` check ties the task to its owner: once it returns
False (the browser session that started the task has ended) the loop
cancels itself before the next fetch.
"""

import itertools
import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class PollingTask:
    """
    Usage:
        task = PollingTask("reports", fetch=load_reports, interval=3.0)
        task.start()
        ...
        snapshot = task.latest
        task.cancel()

        # Stops by itself once the owner goes away
        PollingTask("sales", fetch=load_sales, interval=30.0, alive=session_is_open)
    """

    def __init__(
        self,
        name: str,
        fetch: Callable[[], Any],
        interval: float,
        on_result: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        alive: Optional[Callable[[], bool]] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self.fetch = fetch
        self.interval = interval
        self.on_result = on_result
        self.on_error = on_error
        self.alive = alive

        self.latest: Any = None
        self.last_error: Optional[Exception] = None

        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._applied_seq = 0
        self._cancelled = threading.Event()
        self._wake = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def applied_sequence(self) -> int:
        return self._applied_seq

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "PollingTask":
        if self.cancelled:
            raise RuntimeError(f"Polling task '{self.name}' was cancelled")
        if not self.running:
            self._thread = threading.Thread(
                target=self._loop, name=f"poll-{self.name}", daemon=True,
            )
            self._thread.start()
            logger.info("Started polling '%s' every %ss", self.name, self.interval)
        return self

    def cancel(self, join_timeout: Optional[float] = None) -> None:
        """Stop the loop. Results of runs still in flight are discarded."""
        self._cancelled.set()
        self._wake.set()
        thread = self._thread
        if join_timeout is not None and thread is not None and thread is not threading.current_thread():
            thread.join(join_timeout)
        logger.info("Cancelled polling '%s'", self.name)

    def refresh_now(self) -> None:
        """Wake the loop for an immediate run instead of waiting out the interval."""
        self._wake.set()

    def owner_alive(self) -> bool:
        if self.alive is None:
            return True
        try:
            return bool(self.alive())
        except Exception as e:
            logger.warning("Owner check for polling '%s' failed: %s", self.name, e)
            return False

    def _loop(self) -> None:
        while not self.cancelled:
            if not self.owner_alive():
                logger.info("Owner of polling '%s' is gone", self.name)
                self.cancel()
                break
            self.run_once()
            self._wake.wait(self.interval)
            self._wake.clear()

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def next_sequence(self) -> int:
        with self._lock:
            return next(self._counter)

    def apply(self, seq: int, result: Any) -> bool:
        """Store *result* unless the task is cancelled or a newer run already landed."""
        with self._lock:
            if self.cancelled or seq <= self._applied_seq:
                logger.debug("Dropping stale result #%d for '%s'", seq, self.name)
                return False
            self._applied_seq = seq
            self.latest = result
            self.last_error = None
        if self.on_result is not None:
            self.on_result(result)
        return True

    def run_once(self) -> bool:
        """Fetch once and apply the result. Returns True when it was applied."""
        seq = self.next_sequence()
        try:
            result = self.fetch()
        except Exception as e:
            if self.cancelled:
                return False
            logger.warning("Polling '%s' run #%d failed: %s", self.name, seq, e)
            self.last_error = e
            if self.on_error is not None:
                self.on_error(e)
            return False
        return self.apply(seq, result)
