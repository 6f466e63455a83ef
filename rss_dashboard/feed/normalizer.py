"""
Map one item/entry fragment onto a canonical Article.

Field fallbacks follow RSS first, then Atom:
- title   <- <title>
- link    <- <link> text, else <link href="..."> (Atom)
- date    <- <pubDate>, else <updated>, else now
- snippet <- <description>, else <summary>, else a placeholder
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from ..config import FeedConfig
from ..types import Article, Source
from .tags import extract_attribute, extract_tag


def normalize_item(
    fragment: str,
    source: Source,
    cfg: FeedConfig,
    now: datetime | None = None,
) -> Article | None:
    """Build an Article from an item fragment.

    Args:
        fragment: Body of one <item> or <entry>
        source: The Source the fragment was fetched from
        cfg: Snippet settings
        now: Fallback timestamp for missing or unparseable dates

    Returns:
        The Article, or None when the fragment has no title or no link
    """
    title = extract_tag(fragment, "title")
    link = extract_tag(fragment, "link") or extract_attribute(fragment, "link", "href")
    if not title or not link:
        return None

    raw_date = extract_tag(fragment, "pubDate") or extract_tag(fragment, "updated")
    published = parse_feed_date(raw_date) if raw_date else None
    if published is None:
        published = now or datetime.now(timezone.utc)

    return Article(
        source_name=source.name,
        source_id=source.id,
        title=title,
        link=link,
        date=published.astimezone(timezone.utc).isoformat(),
        snippet=build_snippet(fragment, cfg),
    )


def build_snippet(fragment: str, cfg: FeedConfig) -> str:
    # extract_tag already strips inline tags; the cut is a hard character cut.
    text = extract_tag(fragment, "description") or extract_tag(fragment, "summary")
    if not text:
        return cfg.snippet_placeholder
    return text[: cfg.snippet_max_chars]


def parse_feed_date(value: str) -> datetime | None:
    """Parse an RFC-822 (RSS) or ISO-8601 (Atom) timestamp.

    Naive values are assumed to be UTC. Returns None when neither format
    matches.

    Examples:
        >>> parse_feed_date("Mon, 01 Jan 2024 10:00:00 GMT")
        datetime.datetime(2024, 1, 1, 10, 0, tzinfo=datetime.timezone.utc)
        >>> parse_feed_date("2024-06-01T08:30:00Z")
        datetime.datetime(2024, 6, 1, 8, 30, tzinfo=datetime.timezone.utc)
    """
    value = value.strip()
    if not value:
        return None

    parsed: datetime | None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
