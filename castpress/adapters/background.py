"""
Background publication scheduler.

Runs a daemon thread that fires a publication tick at a fixed delay: the
next tick starts interval_seconds after the previous one finished, so a
slow store stretches the cadence instead of stacking ticks.
"""

from __future__ import annotations

import logging
import threading

from castpress.components.scheduler import PublicationTransitioner, TickResult, run_tick

logger = logging.getLogger(__name__)


class PublicationScheduler:
    def __init__(
        self,
        transitioner: PublicationTransitioner,
        interval_seconds: float = 60.0,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            transitioner: Transitioner whose tick is run on every interval
            interval_seconds: Delay between the end of one tick and the next
        """
        self._transitioner = transitioner
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> None:
        """Start the background scheduler."""
        if self._running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop, name="publication-scheduler", daemon=True
        )
        self._thread.start()
        self._running = True
        logger.info("Publication scheduler started (interval: %.1fs)", self._interval)

    def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if not self._running:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        self._running = False
        logger.info("Publication scheduler stopped")

    def trigger_now(self) -> TickResult:
        """Run a tick immediately on the calling thread."""
        return run_tick(self._transitioner)

    @property
    def is_running(self) -> bool:
        return self._running

    def _poll_loop(self) -> None:
        while not self._stop_event.wait(timeout=self._interval):
            try:
                run_tick(self._transitioner)
            except Exception:
                logger.exception("Error in publication scheduler loop")
