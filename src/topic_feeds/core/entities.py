"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from topic_feeds.core.identity import to_iso


@dataclass(frozen=True)
class FeedConfig:
    """A single feed source inside a topic."""
    
    name: str
    url: str
    
    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Feed name cannot be empty")
        if not self.url:
            raise ValueError("Feed URL cannot be empty")


@dataclass(frozen=True)
class TopicConfig:
    """Topic definition: feeds to read and an optional keyword filter."""
    
    key: str
    feeds: tuple[FeedConfig, ...] = ()
    keywords: tuple[str, ...] = ()
    
    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Topic key cannot be empty")


@dataclass
class RawEntry:
    """Entry as returned by a feed fetcher, before normalization."""
    
    link: Optional[str] = None
    title: Optional[str] = None
    content_snippet: Optional[str] = None
    content: Optional[str] = None
    iso_date: Optional[str] = None
    pub_date: Optional[str] = None
    date: Optional[str] = None
    
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawEntry":
        """Build an entry from transport-style keys (contentSnippet, isoDate, pubDate)."""
        return cls(
            link=data.get("link"),
            title=data.get("title"),
            content_snippet=data.get("contentSnippet", data.get("content_snippet")),
            content=data.get("content"),
            iso_date=data.get("isoDate", data.get("iso_date")),
            pub_date=data.get("pubDate", data.get("pub_date")),
            date=data.get("date"),
        )
    
    @property
    def searchable_text(self) -> str:
        return f"{self.title or ''} {self.content_snippet or ''} {self.content or ''}"


@dataclass
class Item:
    """Normalized feed item; `link` is the deduplication key."""
    
    id: str
    title: str
    link: str
    source: str
    published_at: datetime
    topics: list[str] = field(default_factory=list)
    
    def __post_init__(self) -> None:
        if not self.link:
            raise ValueError("Link cannot be empty")
        if self.published_at.tzinfo is None:
            raise ValueError("published_at must be timezone-aware")
    
    @property
    def date_iso(self) -> str:
        return to_iso(self.published_at)
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "source": self.source,
            "dateISO": self.date_iso,
            "topics": list(self.topics),
        }


@dataclass(frozen=True)
class FeedError:
    """Structured error captured for a feed or for the whole run."""
    
    kind: str
    message: str
    
    def __str__(self) -> str:
        return self.message
    
    @classmethod
    def from_exception(cls, exc: BaseException, default_kind: str = "unknown") -> "FeedError":
        kind = getattr(exc, "kind", default_kind)
        message = str(exc) or exc.__class__.__name__
        return cls(kind=kind, message=message)


@dataclass(frozen=True)
class FailureRecord:
    """A feed whose fetch failed during the run."""
    
    name: str
    url: str
    error: FeedError
    
    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "url": self.url, "error": str(self.error)}


@dataclass
class TopicResult:
    """Items and failures produced by processing one topic."""
    
    topic: str
    items: list[Item] = field(default_factory=list)
    failures: list[FailureRecord] = field(default_factory=list)


@dataclass
class Snapshot:
    """The persisted aggregation result."""
    
    generated_at: datetime
    failures: list[FailureRecord] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    
    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAtISO": to_iso(self.generated_at),
            "failures": [failure.to_dict() for failure in self.failures],
            "items": [item.to_dict() for item in self.items],
        }
