"""Core domain layer."""

from topic_feeds.core.aggregation import apply_window, merge_items, sort_by_recency
from topic_feeds.core.entities import (
    FailureRecord,
    FeedConfig,
    FeedError,
    Item,
    RawEntry,
    Snapshot,
    TopicConfig,
    TopicResult,
)
from topic_feeds.core.identity import make_id, pick_date, to_iso
from topic_feeds.core.interfaces import FeedFetchError, FeedFetcher, SnapshotWriter

__all__ = [
    "FeedConfig",
    "TopicConfig",
    "RawEntry",
    "Item",
    "FeedError",
    "FailureRecord",
    "TopicResult",
    "Snapshot",
    "FeedFetcher",
    "FeedFetchError",
    "SnapshotWriter",
    "make_id",
    "pick_date",
    "to_iso",
    "merge_items",
    "sort_by_recency",
    "apply_window",
]
