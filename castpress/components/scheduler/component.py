"""
Scheduler component - promotes scheduled drafts to published.

Each tick captures one `now` and issues a single bulk conditional update per
content store: status='published', publish_date=now where status='draft'
and scheduled_date <= now. Published and archived items never match.

Invariants:
- Every item promoted in a tick shares the same publish_date
- A tick with nothing due is a no-op; an immediate re-run promotes nothing
- A failing store is logged and skipped; other stores still run and the
  next tick retries it, because the predicate is evaluated from scratch
- Ticks are single-flight: a tick requested while one is running is skipped
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from castpress.adapters.clock import SystemClock

from .models import TickResult
from .ports import PublishableRepoPort, TimePort

logger = logging.getLogger(__name__)


class PublicationTransitioner:
    """Runs publication ticks over a set of content stores keyed by kind."""

    def __init__(
        self,
        repos: Mapping[str, PublishableRepoPort],
        time_port: TimePort | None = None,
    ) -> None:
        self._repos = dict(repos)
        self._time = time_port or SystemClock()
        self._lock = threading.Lock()

    @property
    def kinds(self) -> list[str]:
        return list(self._repos)

    @property
    def is_ticking(self) -> bool:
        return self._lock.locked()

    def tick(self) -> TickResult:
        """Run one tick, or report skipped=True if another tick holds the guard."""
        now = self._time.now_utc()

        if not self._lock.acquire(blocking=False):
            logger.warning("Publication tick skipped: previous tick still running")
            return TickResult(started_at=now, skipped=True)

        try:
            published: dict[str, int] = {}
            errors: dict[str, str] = {}
            for kind, repo in self._repos.items():
                try:
                    published[kind] = repo.publish_due(now)
                except Exception as e:
                    logger.exception("Scheduled publication failed for %s", kind)
                    errors[kind] = str(e) or type(e).__name__

            result = TickResult(started_at=now, published=published, errors=errors)
            if result.total_published:
                logger.info(
                    "Published %d scheduled items (%s)",
                    result.total_published,
                    ", ".join(f"{k}={v}" for k, v in published.items()),
                )
            return result
        finally:
            self._lock.release()


# --- Component Entry Points ---


def create_transitioner(
    repos: Mapping[str, PublishableRepoPort],
    time_port: TimePort | None = None,
) -> PublicationTransitioner:
    """
    Create a transitioner.

    Args:
        repos: Content stores keyed by content kind ("article", "podcast").
        time_port: Optional time port; defaults to the system clock.

    Returns:
        Configured PublicationTransitioner
    """
    return PublicationTransitioner(repos, time_port)


def run_tick(transitioner: PublicationTransitioner) -> TickResult:
    """
    Run one publication tick.

    Never raises for store failures; they are reported in TickResult.errors.
    """
    return transitioner.tick()
