"""Business logic use cases."""

import asyncio
import sys
from datetime import datetime, timezone
from typing import Callable, Optional

from topic_feeds.adapters.sources.filters import matches_keywords
from topic_feeds.adapters.storage import fallback_snapshot
from topic_feeds.core import (
    FailureRecord,
    FeedConfig,
    FeedError,
    FeedFetcher,
    Item,
    RawEntry,
    Snapshot,
    SnapshotWriter,
    TopicConfig,
    TopicResult,
    apply_window,
    make_id,
    merge_items,
    pick_date,
    sort_by_recency,
)
from topic_feeds.core.aggregation import DEFAULT_KEEP_HOURS


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TopicProcessor:
    """Fetch the feeds of one topic and turn matching entries into items."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        fetch_timeout: float = 20.0,
        untitled_placeholder: str = "(sem título)",
        semaphore: Optional[asyncio.Semaphore] = None,
    ) -> None:
        self.fetcher = fetcher
        self.fetch_timeout = fetch_timeout
        self.untitled_placeholder = untitled_placeholder
        self.semaphore = semaphore

    async def process(self, topic: TopicConfig) -> TopicResult:
        """Process all feeds of a topic; feed failures are recorded, never raised."""
        result = TopicResult(topic=topic.key)

        outcomes = await asyncio.gather(
            *(self._fetch(feed) for feed in topic.feeds), return_exceptions=True
        )

        # Consume in feed order so output does not depend on completion order
        for feed, outcome in zip(topic.feeds, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                error = self._to_feed_error(outcome)
                result.failures.append(FailureRecord(name=feed.name, url=feed.url, error=error))
                print(f"  └─ ❌ {feed.name}: {error.message}")
                continue

            items, skipped = self.build_items(topic, feed, outcome)
            result.items.extend(items)
            print(f"  └─ {feed.name}: {len(items)} items ({skipped} skipped)")

        return result

    def build_items(
        self, topic: TopicConfig, feed: FeedConfig, entries: list[RawEntry]
    ) -> tuple[list[Item], int]:
        """Normalize raw entries of one feed.

        Returns:
            Tuple of (items, skipped_count)
        """
        items: list[Item] = []
        skipped = 0

        for entry in entries:
            if not entry.link:
                skipped += 1
                continue

            published_at = pick_date(entry)
            if published_at is None:
                skipped += 1
                continue

            if not matches_keywords(entry.searchable_text, topic.keywords):
                skipped += 1
                continue

            items.append(Item(
                id=make_id(feed.name, entry.link, entry.title),
                title=entry.title or self.untitled_placeholder,
                link=entry.link,
                source=feed.name,
                published_at=published_at,
                topics=[topic.key],
            ))

        return items, skipped

    async def _fetch(self, feed: FeedConfig) -> list[RawEntry]:
        if self.semaphore is None:
            return await asyncio.wait_for(self.fetcher.fetch(feed.url), timeout=self.fetch_timeout)

        async with self.semaphore:
            return await asyncio.wait_for(self.fetcher.fetch(feed.url), timeout=self.fetch_timeout)

    def _to_feed_error(self, exc: Exception) -> FeedError:
        if isinstance(exc, asyncio.TimeoutError):
            return FeedError(kind="timeout", message=f"Timed out after {self.fetch_timeout:g}s")
        return FeedError.from_exception(exc)


class CollectionService:
    """Run topic processors for every configured topic."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        fetch_timeout: float = 20.0,
        max_concurrency: int = 8,
        untitled_placeholder: str = "(sem título)",
    ) -> None:
        self.fetcher = fetcher
        self.fetch_timeout = fetch_timeout
        self.max_concurrency = max_concurrency
        self.untitled_placeholder = untitled_placeholder

    async def collect(self, topics: list[TopicConfig]) -> list[TopicResult]:
        """Collect items from all topics; results follow topic order."""
        # One semaphore for the whole run bounds concurrent fetches across topics
        processor = TopicProcessor(
            fetcher=self.fetcher,
            fetch_timeout=self.fetch_timeout,
            untitled_placeholder=self.untitled_placeholder,
            semaphore=asyncio.Semaphore(self.max_concurrency),
        )

        feed_count = sum(len(topic.feeds) for topic in topics)
        print(f"📥 Fetching {feed_count} feeds across {len(topics)} topics")

        results = await asyncio.gather(*(processor.process(topic) for topic in topics))

        for result in results:
            print(f"  • {result.topic}: {len(result.items)} items, {len(result.failures)} failures")

        return list(results)


class AggregationService:
    """Merge topic results into the final snapshot."""

    def __init__(
        self,
        keep_hours: float = DEFAULT_KEEP_HOURS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.keep_hours = keep_hours
        self.clock = clock

    def build(self, results: list[TopicResult], now: datetime) -> Snapshot:
        """Deduplicate, order and window items; pass failures through.

        Args:
            results: Topic results in topic order
            now: Run start time, used for the retention cutoff
        """
        all_items: list[Item] = []
        failures: list[FailureRecord] = []

        for result in results:
            all_items.extend(result.items)
            failures.extend(result.failures)

        items = sort_by_recency(merge_items(all_items))
        items = apply_window(items, now, self.keep_hours)

        return Snapshot(generated_at=self.clock(), failures=failures, items=items)


class RunService:
    """End-to-end run: load topics, collect, aggregate and write the snapshot."""

    def __init__(
        self,
        load_topics: Callable[[], list[TopicConfig]],
        collection: CollectionService,
        aggregation: AggregationService,
        writer: SnapshotWriter,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.load_topics = load_topics
        self.collection = collection
        self.aggregation = aggregation
        self.writer = writer
        self.clock = clock
        self.fallback_written = False

    async def run(self) -> Snapshot:
        """Run the pipeline.

        Any error before a successful write leaves a fallback snapshot in
        place of the regular one and is re-raised; `fallback_written` tells
        whether that write succeeded.
        """
        started_at = self.clock()
        self.fallback_written = False

        try:
            topics = self.load_topics()
            results = await self.collection.collect(topics)
            snapshot = self.aggregation.build(results, now=started_at)
            self.writer.write(snapshot)
        except Exception as e:
            self.fallback_written = self._write_fallback(e)
            raise

        return snapshot

    def _write_fallback(self, error: Exception) -> bool:
        try:
            self.writer.write(fallback_snapshot(error, self.clock()))
        except Exception as write_error:
            print(f"⚠️  Could not write fallback snapshot: {write_error}", file=sys.stderr)
            return False
        return True
