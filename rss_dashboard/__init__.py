"""
RSS Dashboard - feed aggregation backend with a language-model assistant.

This package serves a small REST API over a JSON file of feed sources,
aggregates those feeds on demand with a tolerant pattern-matching
extractor, and proxies prompts to a hosted language model that can
add, delete or search sources.

Main entry point is the CLI via `rss-dashboard serve`.

Example:
    $ rss-dashboard serve -c config.yaml
"""

__all__ = ["__version__", "Article", "Source", "SourceRegistry", "aggregate_sources"]
__version__ = "0.1.0"

from .feed.pipeline import aggregate_sources
from .registry import SourceRegistry
from .types import Article, Source
