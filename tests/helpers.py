"""Shared builders for feed documents and mocked HTTP transports."""

from __future__ import annotations

import httpx


RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>{channel}</title>
{items}
</channel></rss>
"""

ITEM_TEMPLATE = """<item>
  <title>{title}</title>
  <link>{link}</link>
  <pubDate>{date}</pubDate>
  <description>{description}</description>
</item>"""

ATOM_TEMPLATE = """<feed xmlns="http://www.w3.org/2005/Atom"><title>{channel}</title>
{entries}
</feed>
"""

ENTRY_TEMPLATE = """<entry>
  <title>{title}</title>
  <link rel="alternate" href="{link}"/>
  <updated>{date}</updated>
  <summary>{description}</summary>
</entry>"""


def make_rss(channel: str, items: list[tuple[str, str, str]]) -> str:
    """Build an RSS document from (title, link, pubDate) triples."""
    body = "\n".join(
        ITEM_TEMPLATE.format(title=t, link=l, date=d, description=f"About {t}")
        for t, l, d in items
    )
    return RSS_TEMPLATE.format(channel=channel, items=body)


def make_atom(channel: str, entries: list[tuple[str, str, str]]) -> str:
    """Build an Atom document from (title, link, updated) triples."""
    body = "\n".join(
        ENTRY_TEMPLATE.format(title=t, link=l, date=d, description=f"About {t}")
        for t, l, d in entries
    )
    return ATOM_TEMPLATE.format(channel=channel, entries=body)


def mock_transport(routes: dict[str, httpx.Response | Exception]) -> httpx.MockTransport:
    """Transport answering by full URL; unknown URLs get a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        outcome = routes.get(str(request.url))
        if outcome is None:
            return httpx.Response(404)
        if isinstance(outcome, Exception):
            raise outcome
        # Fresh response per request so a route can be hit more than once.
        return httpx.Response(outcome.status_code, headers=outcome.headers, content=outcome.content)

    return httpx.MockTransport(handler)
