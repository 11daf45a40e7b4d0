"""Source adapters for fetching feeds."""

from topic_feeds.adapters.sources.filters import matches_keywords, normalize
from topic_feeds.adapters.sources.rss_fetcher import RSSFeedFetcher

__all__ = ["RSSFeedFetcher", "matches_keywords", "normalize"]
