"""Tests for tag-content extraction."""

from rss_dashboard.feed.tags import extract_attribute, extract_tag, strip_tags


def test_extract_tag_returns_first_match():
    assert extract_tag("<title>A</title><title>B</title>", "title") == "A"


def test_extract_tag_tolerates_attributes():
    assert extract_tag('<link href="x">http://e.org</link>', "link") == "http://e.org"


def test_extract_tag_strips_inline_markup():
    fragment = "<description>Hello <b>world</b></description>"
    assert extract_tag(fragment, "description") == "Hello world"


def test_extract_tag_is_case_insensitive_and_spans_lines():
    fragment = "<PubDate>\n  Mon, 01 Jan 2024 10:00:00 GMT\n</PUBDATE>"
    assert extract_tag(fragment, "pubDate") == "Mon, 01 Jan 2024 10:00:00 GMT"


def test_extract_tag_missing_returns_none():
    assert extract_tag("<title>A</title>", "link") is None
    assert extract_tag("", "title") is None


def test_extract_tag_does_not_match_longer_tag_names():
    fragment = "<linkedin>nope</linkedin><link>https://example.com</link>"
    assert extract_tag(fragment, "link") == "https://example.com"


def test_extract_tag_skips_self_closing_tag():
    fragment = '<link href="https://example.com/a"/><title>T</title>'
    assert extract_tag(fragment, "link") is None


def test_extract_attribute_reads_atom_href():
    fragment = '<title>T</title><link rel="alternate" href="https://example.com/a"/>'
    assert extract_attribute(fragment, "link", "href") == "https://example.com/a"


def test_extract_attribute_missing():
    assert extract_attribute("<link>https://example.com</link>", "link", "href") is None
    assert extract_attribute("<title>T</title>", "link", "href") is None


def test_strip_tags_trims_whitespace():
    assert strip_tags("  <p>Some <i>text</i></p>  ") == "Some text"


def test_extract_tag_unwraps_cdata():
    fragment = "<title><![CDATA[Markets & rates]]></title><description><![CDATA[<p>Hi</p>]]></description>"
    assert extract_tag(fragment, "title") == "Markets & rates"
    assert extract_tag(fragment, "description") == "Hi"


def test_extract_attribute_ignores_longer_attribute_names():
    fragment = '<link data-href="https://tracker.example.com" href="https://example.com/a"/>'
    assert extract_attribute(fragment, "link", "href") == "https://example.com/a"
    assert extract_attribute('<link data-href="https://tracker.example.com"/>', "link", "href") is None
