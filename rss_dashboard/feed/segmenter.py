"""Split a raw feed document into RSS <item> and Atom <entry> bodies."""

from __future__ import annotations

import re
from typing import Iterator


# Matches "<item>...</item>" or "<entry ...>...</entry>"; the backreference
# keeps an <item> from closing on </entry> and vice versa.
ITEM_RE = re.compile(
    r"<(item|entry)(?:\s[^>]*)?(?<!/)>(.*?)</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)


def iter_items(document: str) -> Iterator[str]:
    """Yield every item/entry body in document order.

    The document does not have to be well-formed; only the item/entry
    boundaries need to be locatable. A document without any yields nothing.
    """
    for match in ITEM_RE.finditer(document):
        yield match.group(2)
