"""Core interfaces for adapters."""

from abc import ABC, abstractmethod

from topic_feeds.core.entities import RawEntry, Snapshot


class FeedFetchError(Exception):
    """Raised by a feed fetcher when a feed cannot be retrieved or parsed."""
    
    def __init__(self, kind: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class FeedFetcher(ABC):
    """Interface for retrieving and parsing a feed."""
    
    @abstractmethod
    async def fetch(self, url: str) -> list[RawEntry]:
        """Fetch the feed at url and return its raw entries."""
        pass


class SnapshotWriter(ABC):
    """Interface for persisting snapshots."""
    
    @abstractmethod
    def write(self, snapshot: Snapshot) -> None:
        """Persist the snapshot, fully replacing any previous one."""
        pass
