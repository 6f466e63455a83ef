"""
Core data types for the RSS dashboard.

This module defines the records passed between the registry, the feed
pipeline and the HTTP layer:
- Source: A registered feed descriptor stored in the source list file
- Article: One normalized feed item, ready for display
- SourceResult: Outcome of fetching and parsing one source
- AggregationResult: Combined outcome of one aggregation pass
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


UNCLASSIFIED = "unclassified"
MANUAL_SOURCE_ID = "MANUAL"


@dataclass
class Source:
    """A registered feed the aggregator polls.

    Attributes:
        id: Unique positive integer, stable across edits
        name: Display name
        url: Feed endpoint
        sector: Classification string
        category: Classification string
    """
    id: int
    name: str
    url: str
    sector: str = UNCLASSIFIED
    category: str = UNCLASSIFIED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "sector": self.sector,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Source:
        """Build a Source from a stored record, filling classification defaults."""
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            url=str(data.get("url") or ""),
            sector=data.get("sector") or UNCLASSIFIED,
            category=data.get("category") or UNCLASSIFIED,
        )


@dataclass
class Article:
    """Normalized representation of one feed item.

    Attributes:
        source_name: Name of the owning Source
        source_id: Id of the owning Source, or MANUAL_SOURCE_ID for user-entered articles
        title: Article headline, never empty
        link: Article URL, never empty
        date: ISO-8601 timestamp in UTC
        snippet: Tag-stripped, truncated summary
    """
    source_name: str
    source_id: int | str
    title: str
    link: str
    date: str
    snippet: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceName": self.source_name,
            "sourceId": self.source_id,
            "title": self.title,
            "link": self.link,
            "date": self.date,
            "snippet": self.snippet,
        }


@dataclass
class SourceResult:
    """Outcome of one per-source pipeline.

    Either articles is non-empty (success) or error explains why the
    source contributed nothing.
    """
    source: Source
    articles: list[Article] = field(default_factory=list)
    error: str | None = None


@dataclass
class AggregationResult:
    """Combined, time-sorted outcome of one aggregation pass.

    Attributes:
        articles: All articles, most recent first
        results: Per-source outcomes in source order
        warning: Set when every source yielded zero articles
    """
    articles: list[Article] = field(default_factory=list)
    results: list[SourceResult] = field(default_factory=list)
    warning: str | None = None

    @property
    def degraded(self) -> bool:
        return self.warning is not None

    @property
    def failed_sources(self) -> list[SourceResult]:
        return [r for r in self.results if r.error is not None]
