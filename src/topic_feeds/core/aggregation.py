"""Deduplication, ordering and retention of items."""

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Iterable

from topic_feeds.core.entities import Item

DEFAULT_KEEP_HOURS = 48


def merge_items(items: Iterable[Item]) -> list[Item]:
    """
    Deduplicate items by link.
    
    Topics of every occurrence are unioned into the first one. When a later
    occurrence is strictly more recent, its date, title and source win.
    Input items are not mutated; output keeps first-seen order.
    """
    merged: dict[str, Item] = {}
    
    for item in items:
        existing = merged.get(item.link)
        if existing is None:
            merged[item.link] = replace(item, topics=list(dict.fromkeys(item.topics)))
            continue
        
        for topic in item.topics:
            if topic not in existing.topics:
                existing.topics.append(topic)
        
        if item.published_at > existing.published_at:
            existing.published_at = item.published_at
            existing.title = item.title or existing.title
            existing.source = item.source or existing.source
    
    return list(merged.values())


def sort_by_recency(items: Iterable[Item]) -> list[Item]:
    """Newest first; equal timestamps keep their input order."""
    return sorted(items, key=lambda item: item.published_at, reverse=True)


def apply_window(items: Iterable[Item], now: datetime, keep_hours: float = DEFAULT_KEEP_HOURS) -> list[Item]:
    """Drop items published before now - keep_hours."""
    cutoff = now - timedelta(hours=keep_hours)
    return [item for item in items if item.published_at >= cutoff]
