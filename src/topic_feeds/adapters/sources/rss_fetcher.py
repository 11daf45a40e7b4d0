"""RSS/Atom feed fetcher."""

import calendar
from datetime import datetime, timezone
from typing import Any, Optional

import feedparser
import httpx
from bs4 import BeautifulSoup

from topic_feeds.core import FeedFetcher, FeedFetchError, RawEntry, to_iso

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; NoticiasConectadas/1.0)"
DEFAULT_ACCEPT = "application/rss+xml, application/xml;q=0.9,*/*;q=0.8"


class RSSFeedFetcher(FeedFetcher):
    """Fetch a feed over HTTP and parse it with feedparser."""
    
    def __init__(
        self,
        timeout: float = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.headers = {
            "User-Agent": user_agent,
            "Accept": DEFAULT_ACCEPT,
        }
        if headers:
            self.headers.update(headers)
    
    async def fetch(self, url: str) -> list[RawEntry]:
        """Download and parse the feed at url."""
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, headers=self.headers
        ) as client:
            try:
                response = await client.get(url)
            except httpx.TimeoutException as e:
                raise FeedFetchError("timeout", f"Request timed out after {self.timeout:g}s") from e
            except httpx.HTTPError as e:
                raise FeedFetchError("network", str(e) or e.__class__.__name__) from e
        
        if response.status_code < 200 or response.status_code >= 300:
            raise FeedFetchError("http", f"Status code {response.status_code}")
        
        return self._parse_feed(response.content)
    
    def _parse_feed(self, content: bytes) -> list[RawEntry]:
        """Parse RSS/Atom content into raw entries."""
        parsed = feedparser.parse(content)
        
        if parsed.bozo and not parsed.entries:
            error = parsed.get("bozo_exception")
            raise FeedFetchError("parse", f"Invalid feed: {error}" if error else "Invalid feed")
        
        return [self._to_raw_entry(entry) for entry in parsed.entries]
    
    def _to_raw_entry(self, entry: Any) -> RawEntry:
        summary = entry.get("summary") or ""
        
        content = ""
        for block in entry.get("content") or []:
            if block.get("value"):
                content = block["value"]
                break
        
        return RawEntry(
            link=entry.get("link"),
            title=entry.get("title"),
            content_snippet=self._html_to_text(summary) if summary else None,
            content=content or summary or None,
            iso_date=self._struct_to_iso(entry.get("published_parsed") or entry.get("updated_parsed")),
            pub_date=entry.get("published"),
            date=entry.get("updated"),
        )
    
    @staticmethod
    def _html_to_text(html: str) -> str:
        return BeautifulSoup(html, "html.parser").get_text(" ", strip=True)
    
    @staticmethod
    def _struct_to_iso(value: Any) -> Optional[str]:
        """feedparser exposes parsed dates as UTC struct_time."""
        if not value:
            return None
        try:
            dt = datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None
        return to_iso(dt)
