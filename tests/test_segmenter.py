"""Tests for item/entry segmentation."""

from rss_dashboard.feed.segmenter import iter_items


RSS_DOC = """<?xml version="1.0"?>
<rss><channel>
  <title>Channel title</title>
  <item>
    <title>First</title>
    <link>https://example.com/1</link>
  </item>
  <item>
    <title>Second</title>
    <link>https://example.com/2</link>
  </item>
</channel></rss>
"""

ATOM_DOC = """<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Feed title</title>
  <entry>
    <title>First</title>
    <link>https://example.com/1</link>
  </entry>
  <entry xml:lang="en">
    <title>Second</title>
    <link>https://example.com/2</link>
  </entry>
</feed>
"""


def test_iter_items_splits_rss_items_in_order():
    items = list(iter_items(RSS_DOC))
    assert len(items) == 2
    assert "First" in items[0]
    assert "Second" in items[1]
    assert "Channel title" not in items[0]


def test_iter_items_handles_atom_entries_like_rss_items():
    rss_items = list(iter_items(RSS_DOC))
    atom_items = list(iter_items(ATOM_DOC))
    assert len(atom_items) == len(rss_items)
    assert [i.strip() for i in atom_items] == [i.strip() for i in rss_items]


def test_iter_items_is_lazy():
    items = iter_items(RSS_DOC)
    assert "First" in next(items)
    assert "Second" in next(items)
    assert next(items, None) is None


def test_iter_items_empty_document():
    assert list(iter_items("")) == []
    assert list(iter_items("<html><body>not a feed</body></html>")) == []


def test_iter_items_tolerates_broken_document():
    doc = "garbage <item><title>Ok</title></item> <channel><item>unterminated"
    items = list(iter_items(doc))
    assert items == ["<title>Ok</title>"]
