"""
Ad-hoc RSS/Atom extraction engine.

This package turns raw feed documents into normalized Article records:
tag extraction, item segmentation, normalization, fetching and the
concurrent aggregation pipeline.
"""

from .fetcher import (
    BadStatusError,
    FeedFetchError,
    FeedTransportError,
    MalformedSourceError,
    fetch_feed,
)
from .normalizer import normalize_item, parse_feed_date
from .pipeline import aggregate, aggregate_sources, run_aggregation, sort_articles
from .segmenter import iter_items
from .tags import extract_attribute, extract_tag, strip_tags

__all__ = [
    "BadStatusError",
    "FeedFetchError",
    "FeedTransportError",
    "MalformedSourceError",
    "fetch_feed",
    "normalize_item",
    "parse_feed_date",
    "aggregate",
    "aggregate_sources",
    "run_aggregation",
    "sort_articles",
    "iter_items",
    "extract_attribute",
    "extract_tag",
    "strip_tags",
]
