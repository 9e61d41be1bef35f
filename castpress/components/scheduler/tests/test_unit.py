"""
Scheduler component unit tests.

Uses in-memory stores so tick semantics can be checked without SQLite.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from castpress.components.scheduler import create_transitioner, run_tick

# --- Mock Implementations ---


@dataclass
class Item:
    status: str
    scheduled_date: datetime
    publish_date: datetime | None = None
    title: str = ""


@dataclass
class MockContentStore:
    """In-memory store applying the same predicate as the SQL update."""

    items: list[Item] = field(default_factory=list)
    calls: list[datetime] = field(default_factory=list)

    def publish_due(self, now: datetime) -> int:
        self.calls.append(now)
        count = 0
        for item in self.items:
            if item.status == "draft" and item.scheduled_date <= now:
                item.status = "published"
                item.publish_date = now
                count += 1
        return count


class FailingStore:
    def __init__(self) -> None:
        self.calls = 0

    def publish_due(self, now: datetime) -> int:
        self.calls += 1
        raise RuntimeError("database is locked")


class BlockingStore:
    """Holds the tick open until released, to exercise the single-flight guard."""

    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()

    def publish_due(self, now: datetime) -> int:
        self.entered.set()
        self.release.wait(timeout=5)
        return 0


@dataclass
class MockTimePort:
    current_time: datetime = field(
        default_factory=lambda: datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
    )

    def now_utc(self) -> datetime:
        return self.current_time

    def advance(self, seconds: int) -> None:
        self.current_time += timedelta(seconds=seconds)


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


# --- Tests ---


class TestTick:
    def test_due_draft_published(self, time_port: MockTimePort) -> None:
        now = time_port.now_utc()
        due = Item(status="draft", scheduled_date=now - timedelta(days=1))
        future = Item(status="draft", scheduled_date=now + timedelta(days=1))
        store = MockContentStore(items=[due, future])
        transitioner = create_transitioner({"article": store}, time_port)

        result = run_tick(transitioner)

        assert result.success
        assert result.published == {"article": 1}
        assert due.status == "published"
        assert due.publish_date == now
        assert future.status == "draft"
        assert future.publish_date is None

    def test_scheduled_exactly_now_is_due(self, time_port: MockTimePort) -> None:
        item = Item(status="draft", scheduled_date=time_port.now_utc())
        transitioner = create_transitioner({"article": MockContentStore(items=[item])}, time_port)

        run_tick(transitioner)

        assert item.status == "published"

    def test_published_and_archived_untouched(self, time_port: MockTimePort) -> None:
        past = time_port.now_utc() - timedelta(days=3)
        earlier = past - timedelta(days=1)
        archived = Item(status="archived", scheduled_date=past)
        published = Item(status="published", scheduled_date=past, publish_date=earlier)
        transitioner = create_transitioner(
            {"podcast": MockContentStore(items=[archived, published])}, time_port
        )

        result = run_tick(transitioner)

        assert result.total_published == 0
        assert archived.status == "archived"
        assert published.publish_date == earlier

    def test_second_tick_is_noop(self, time_port: MockTimePort) -> None:
        items = [
            Item(status="draft", scheduled_date=time_port.now_utc() - timedelta(hours=h))
            for h in range(1, 4)
        ]
        transitioner = create_transitioner({"article": MockContentStore(items=items)}, time_port)

        first = run_tick(transitioner)
        stamps = [i.publish_date for i in items]
        time_port.advance(1)
        second = run_tick(transitioner)

        assert first.total_published == 3
        assert second.total_published == 0
        assert [i.publish_date for i in items] == stamps

    def test_batch_shares_one_timestamp(self, time_port: MockTimePort) -> None:
        articles = MockContentStore(
            items=[Item(status="draft", scheduled_date=time_port.now_utc() - timedelta(minutes=5))]
        )
        podcasts = MockContentStore(
            items=[Item(status="draft", scheduled_date=time_port.now_utc() - timedelta(minutes=1))]
        )
        transitioner = create_transitioner({"article": articles, "podcast": podcasts}, time_port)

        result = run_tick(transitioner)

        assert articles.calls == podcasts.calls == [result.started_at]
        assert articles.items[0].publish_date == podcasts.items[0].publish_date

    def test_item_becomes_due_on_later_tick(self, time_port: MockTimePort) -> None:
        item = Item(status="draft", scheduled_date=time_port.now_utc() + timedelta(seconds=90))
        transitioner = create_transitioner({"article": MockContentStore(items=[item])}, time_port)

        run_tick(transitioner)
        assert item.status == "draft"

        time_port.advance(120)
        run_tick(transitioner)
        assert item.status == "published"
        assert item.publish_date == time_port.now_utc()


class TestFailures:
    def test_store_failure_is_swallowed(self, time_port: MockTimePort) -> None:
        transitioner = create_transitioner({"article": FailingStore()}, time_port)

        result = run_tick(transitioner)

        assert not result.success
        assert "database is locked" in result.errors["article"]

    def test_failure_does_not_block_other_kinds(self, time_port: MockTimePort) -> None:
        item = Item(status="draft", scheduled_date=time_port.now_utc() - timedelta(days=1))
        podcasts = MockContentStore(items=[item])
        transitioner = create_transitioner(
            {"article": FailingStore(), "podcast": podcasts}, time_port
        )

        result = run_tick(transitioner)

        assert result.published == {"podcast": 1}
        assert set(result.errors) == {"article"}
        assert item.status == "published"

    def test_failed_store_retried_next_tick(self, time_port: MockTimePort) -> None:
        failing = FailingStore()
        transitioner = create_transitioner({"article": failing}, time_port)

        run_tick(transitioner)
        run_tick(transitioner)

        assert failing.calls == 2


class TestSingleFlight:
    def test_overlapping_tick_skipped(self, time_port: MockTimePort) -> None:
        store = BlockingStore()
        transitioner = create_transitioner({"article": store}, time_port)

        worker = threading.Thread(target=transitioner.tick)
        worker.start()
        try:
            assert store.entered.wait(timeout=5)
            assert transitioner.is_ticking

            overlapping = run_tick(transitioner)

            assert overlapping.skipped
            assert not overlapping.success
            assert overlapping.published == {}
        finally:
            store.release.set()
            worker.join(timeout=5)

        assert not transitioner.is_ticking
        assert not run_tick(transitioner).skipped
