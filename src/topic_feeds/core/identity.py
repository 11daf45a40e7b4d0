"""Item identity and timestamp resolution."""

import hashlib
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from dateutil import parser as date_parser

if TYPE_CHECKING:
    from topic_feeds.core.entities import RawEntry

ID_LENGTH = 16

# RFC 822 zone names, offsets in seconds
RFC822_TZINFOS = {
    "UT": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}


def to_iso(dt: datetime) -> str:
    """Format an aware datetime as a UTC ISO-8601 string with milliseconds."""
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_date(raw: str) -> Optional[datetime]:
    """Parse an ISO-8601 or RFC 822 date string into an aware UTC datetime.

    Returns None when the value does not parse or falls outside the
    datetime range once converted to UTC.
    """
    try:
        dt = date_parser.parse(raw, tzinfos=RFC822_TZINFOS)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, OverflowError, TypeError):
        return None


def pick_date(entry: "RawEntry") -> Optional[datetime]:
    """
    Resolve the publication timestamp of an entry.
    
    The first present field among iso_date, pub_date and date is used;
    when that value does not parse, the entry has no date.
    """
    raw = entry.iso_date or entry.pub_date or entry.date
    if not raw:
        return None
    return parse_date(raw)


def make_id(source: str, link: str, title: Optional[str]) -> str:
    """Opaque item identifier: truncated sha1 of source||link||title."""
    key = f"{source}||{link}||{title or ''}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:ID_LENGTH]
