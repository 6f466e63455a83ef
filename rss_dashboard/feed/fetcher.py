"""
Feed fetching over httpx.

A fetch either returns the raw document text or raises one of the
FeedFetchError subclasses:
- MalformedSourceError: the URL is not a usable http(s) URL
- BadStatusError: the final response was not 2xx
- FeedTransportError: network, timeout, redirect-limit or body-decoding failure

Redirects are followed transparently up to FetchConfig.max_redirects hops.
"""

from __future__ import annotations

import asyncio
from urllib.parse import urlparse

import httpx

from ..config import FetchConfig


class FeedFetchError(Exception):
    """Base class for every failure to retrieve a feed document."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class MalformedSourceError(FeedFetchError):
    def __init__(self, url: str):
        super().__init__(url, f"Malformed source URL: {url!r}")


class BadStatusError(FeedFetchError):
    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP status {status_code} for {url}")
        self.status_code = status_code


class FeedTransportError(FeedFetchError):
    def __init__(self, url: str, cause: Exception):
        super().__init__(url, f"{type(cause).__name__}: {cause}")
        self.cause = cause


def validate_feed_url(url: str) -> str:
    """Return the stripped URL, or raise MalformedSourceError."""
    candidate = (url or "").strip()
    try:
        parsed = urlparse(candidate)
    except ValueError as exc:
        raise MalformedSourceError(url) from exc
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise MalformedSourceError(url)
    return candidate


def build_client(cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Create the shared async client for one aggregation pass."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(cfg.timeout_seconds),
        headers={"User-Agent": cfg.user_agent},
        follow_redirects=True,
        max_redirects=cfg.max_redirects,
        trust_env=cfg.trust_env,
        transport=transport,
    )


async def fetch_feed(
    url: str,
    cfg: FetchConfig,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Fetch a feed document and return its text.

    Transport failures are retried with linear backoff (0.5s, 1.0s, ...);
    a bad status is returned by the server and is not retried.

    Args:
        url: Feed URL; the scheme selects http or https
        cfg: Fetch settings (timeout, retries, redirect limit)
        client: Optional shared client; a private one is created otherwise

    Returns:
        The response body text of the final, non-redirect response

    Raises:
        MalformedSourceError: url is not an http(s) URL with a host
        BadStatusError: the final status is not 2xx
        FeedTransportError: the request failed below the HTTP layer
    """
    target = validate_feed_url(url)
    if client is None:
        async with build_client(cfg) as own_client:
            return await _fetch_with_retries(target, cfg, own_client)
    return await _fetch_with_retries(target, cfg, client)


async def _fetch_with_retries(url: str, cfg: FetchConfig, client: httpx.AsyncClient) -> str:
    retries = max(0, cfg.retries)
    last_error: FeedTransportError | None = None

    for attempt in range(retries + 1):
        try:
            resp = await client.get(url)
        except httpx.TooManyRedirects as exc:
            raise FeedTransportError(url, exc) from exc
        except httpx.InvalidURL as exc:
            raise MalformedSourceError(url) from exc
        except httpx.TransportError as exc:
            last_error = FeedTransportError(url, exc)
            if attempt < retries:
                await asyncio.sleep(0.5 * (attempt + 1))
            continue
        except httpx.RequestError as exc:
            # Body decoding and other non-transport request failures are not retried.
            raise FeedTransportError(url, exc) from exc

        if not resp.is_success:
            raise BadStatusError(url, resp.status_code)
        return resp.text

    if last_error is None:
        raise FeedTransportError(url, RuntimeError("no fetch attempt was made"))
    raise last_error
