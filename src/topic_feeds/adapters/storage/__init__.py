"""Snapshot storage adapters."""

from topic_feeds.adapters.storage.json_snapshot_writer import JsonSnapshotWriter, fallback_snapshot

__all__ = ["JsonSnapshotWriter", "fallback_snapshot"]
