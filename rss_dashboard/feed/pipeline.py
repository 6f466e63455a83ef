"""
Feed aggregation pipeline.

One aggregation pass runs fetch -> segment -> normalize for every source
concurrently, waits for all of them, then merges and sorts the articles:
1. Snapshot the source list
2. Fan out one task per source (bounded by FetchConfig.concurrency)
3. Each task captures its own failure as a SourceResult
4. Concatenate and sort once, most recent first
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging

import httpx

from ..config import AppConfig
from ..logging_utils import log_event
from ..registry import SourceRegistry
from ..types import AggregationResult, Article, Source, SourceResult
from .fetcher import FeedFetchError, build_client, fetch_feed
from .normalizer import normalize_item
from .segmenter import iter_items


NO_ARTICLES_WARNING = (
    "No articles could be extracted from any source; "
    "check the feed URLs and their XML format."
)

_MIN_DATE = datetime.min.replace(tzinfo=timezone.utc)

logger = logging.getLogger("rss_dashboard.pipeline")


def parse_document(document: str, source: Source, cfg: AppConfig, now: datetime | None = None) -> list[Article]:
    """Segment a raw feed document and normalize every complete item."""
    articles: list[Article] = []
    for fragment in iter_items(document):
        article = normalize_item(fragment, source, cfg.feed, now=now)
        if article is not None:
            articles.append(article)
    return articles


def sort_articles(articles: list[Article]) -> list[Article]:
    """Return articles ordered by date, most recent first."""
    return sorted(articles, key=_date_key, reverse=True)


def _date_key(article: Article) -> datetime:
    try:
        parsed = datetime.fromisoformat(article.date.replace("Z", "+00:00"))
    except ValueError:
        return _MIN_DATE
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


async def aggregate_sources(
    sources: list[Source],
    cfg: AppConfig,
    client: httpx.AsyncClient | None = None,
    log: logging.Logger | None = None,
) -> AggregationResult:
    """Fetch and parse every source concurrently into one sorted list.

    Per-source failures never abort the pass: they are logged as warnings
    and recorded on the matching SourceResult.

    Args:
        sources: Snapshot of the registered sources
        cfg: Application configuration
        client: Optional shared httpx client (tests inject a mock transport)
        log: Logger for pipeline events

    Returns:
        AggregationResult with sorted articles, per-source outcomes and a
        warning when a non-empty source list produced no articles
    """
    log = log or logger
    if not sources:
        return AggregationResult()

    semaphore = asyncio.Semaphore(max(1, cfg.fetch.concurrency))

    async def _run_single(source: Source, http: httpx.AsyncClient) -> SourceResult:
        async with semaphore:
            try:
                document = await fetch_feed(source.url, cfg.fetch, http)
            except FeedFetchError as exc:
                log_event(
                    log,
                    f"Fetch failed for {source.name}: {exc}",
                    level=logging.WARNING,
                    event="fetch_failed",
                    source_id=source.id,
                    url=source.url,
                    error_type=type(exc).__name__,
                )
                return SourceResult(source=source, error=str(exc))

        try:
            articles = parse_document(document, source, cfg)
        except Exception as exc:  # noqa: BLE001
            log_event(
                log,
                f"Parsing failed for {source.name}: {exc}",
                level=logging.WARNING,
                event="parse_failed",
                source_id=source.id,
                url=source.url,
            )
            return SourceResult(source=source, error=f"{type(exc).__name__}: {exc}")

        if not articles:
            log_event(
                log,
                f"No valid items found for {source.name}",
                level=logging.WARNING,
                event="no_items",
                source_id=source.id,
                url=source.url,
            )
            return SourceResult(source=source, error="no valid items")

        log_event(
            log,
            f"Fetched {len(articles)} articles from {source.name}",
            level=logging.DEBUG,
            event="fetch_ok",
            source_id=source.id,
            count=len(articles),
        )
        return SourceResult(source=source, articles=articles)

    if client is None:
        async with build_client(cfg.fetch) as own_client:
            results = await asyncio.gather(*(_run_single(s, own_client) for s in sources))
    else:
        results = await asyncio.gather(*(_run_single(s, client) for s in sources))

    merged = [article for result in results for article in result.articles]
    aggregation = AggregationResult(articles=sort_articles(merged), results=list(results))

    if not aggregation.articles:
        aggregation.warning = NO_ARTICLES_WARNING
        log_event(
            log,
            NO_ARTICLES_WARNING,
            level=logging.WARNING,
            event="aggregation_degraded",
            sources=len(sources),
        )
    else:
        log_event(
            log,
            "Aggregation complete",
            event="aggregation_complete",
            sources=len(sources),
            failed=len(aggregation.failed_sources),
            total=len(aggregation.articles),
        )
    return aggregation


async def aggregate(
    registry: SourceRegistry,
    cfg: AppConfig,
    client: httpx.AsyncClient | None = None,
    log: logging.Logger | None = None,
) -> AggregationResult:
    """Snapshot the registry and run one aggregation pass.

    Raises:
        StorageError: the source list cannot be read
    """
    sources = registry.read_all()
    return await aggregate_sources(sources, cfg, client=client, log=log)


def run_aggregation(
    registry: SourceRegistry,
    cfg: AppConfig,
    log: logging.Logger | None = None,
) -> AggregationResult:
    """Synchronous entry point used by the CLI."""
    return asyncio.run(aggregate(registry, cfg, log=log))
