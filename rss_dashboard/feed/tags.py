"""
Tag-content extraction for loosely structured feed markup.

Feeds are matched with regular expressions rather than an XML parser so that
malformed documents still yield whatever fields can be located. The contract
is deliberately narrow:
- the first matching tag pair wins (non-greedy, nearest close tag)
- tag names match case-insensitively and tolerate attributes
- residual inline markup is stripped from the captured text
"""

from __future__ import annotations

from functools import lru_cache
import re


TAG_RE = re.compile(r"<[^>]*>")  # Any markup tag, used for stripping
CDATA_RE = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
ATTR_TEMPLATE = r"""(?:^|\s){name}\s*=\s*(["'])(.*?)\1"""


@lru_cache(maxsize=64)
def _pair_pattern(tag: str) -> re.Pattern[str]:
    name = re.escape(tag)
    # Opening tag: name followed by ">" or whitespace+attributes, never self-closing.
    return re.compile(
        rf"<{name}(?:\s[^>]*)?(?<!/)>(.*?)</{name}\s*>",
        re.IGNORECASE | re.DOTALL,
    )


@lru_cache(maxsize=64)
def _open_tag_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}(\s[^>]*)?/?>", re.IGNORECASE)


def strip_tags(text: str) -> str:
    """Unwrap CDATA sections, remove every markup tag and trim whitespace."""
    return TAG_RE.sub("", CDATA_RE.sub(r"\1", text)).strip()


def extract_tag(fragment: str, tag: str) -> str | None:
    """Return the trimmed inner text of the first <tag>...</tag> pair.

    Args:
        fragment: Markup to search, usually one item or entry body
        tag: Tag name to look for, matched case-insensitively

    Returns:
        The inner text with inline tags stripped, or None if no pair exists

    Examples:
        >>> extract_tag("<title>A</title><title>B</title>", "title")
        'A'
        >>> extract_tag('<link href="x">http://e.org</link>', "link")
        'http://e.org'
    """
    match = _pair_pattern(tag).search(fragment)
    if match is None:
        return None
    return strip_tags(match.group(1))


def extract_attribute(fragment: str, tag: str, attribute: str) -> str | None:
    """Return an attribute value from the first opening <tag ...> in fragment.

    Atom entries usually carry their URL as <link href="..."/> with no text
    content, which extract_tag cannot see.
    """
    match = _open_tag_pattern(tag).search(fragment)
    if match is None or not match.group(1):
        return None
    attr_re = re.compile(ATTR_TEMPLATE.format(name=re.escape(attribute)), re.IGNORECASE | re.DOTALL)
    attr_match = attr_re.search(match.group(1))
    if attr_match is None:
        return None
    value = attr_match.group(2).strip()
    return value or None
