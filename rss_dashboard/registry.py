"""
File-backed source registry.

The source list is a single JSON array of Source records. Reads return a
snapshot; mutations are read-modify-write cycles serialised by a lock and
written atomically so a concurrent reader never sees a half-written file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import tempfile
import threading
from typing import Any

from .types import UNCLASSIFIED, Source

logger = logging.getLogger("rss_dashboard.registry")

EDITABLE_FIELDS = ("name", "url", "sector", "category")


class StorageError(Exception):
    """Raised when the source list cannot be read or written."""


class SourceRegistry:
    """CRUD access to the source list file.

    Attributes:
        path: Location of the JSON source list
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def read_all(self) -> list[Source]:
        """Return every registered source.

        A missing file is an empty registry.

        Raises:
            StorageError: the file is unreadable or not a JSON array of sources
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.error("Cannot read source list %s: %s", self.path, exc)
            raise StorageError(f"Unable to read sources from {self.path}") from exc

        try:
            data = json.loads(raw) if raw.strip() else []
        except json.JSONDecodeError as exc:
            logger.error("Source list %s is not valid JSON: %s", self.path, exc)
            raise StorageError(f"Source list {self.path} is corrupt") from exc

        if not isinstance(data, list):
            raise StorageError(f"Source list {self.path} is not a JSON array")
        try:
            return [Source.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise StorageError(f"Source list {self.path} holds an invalid record") from exc

    def append(
        self,
        name: str,
        url: str,
        sector: str | None = None,
        category: str | None = None,
    ) -> Source:
        """Register a new source with id = max existing + 1 (1 when empty)."""
        with self._lock:
            sources = self.read_all()
            new_id = max((s.id for s in sources), default=0) + 1
            source = Source(
                id=new_id,
                name=name,
                url=url,
                sector=sector or UNCLASSIFIED,
                category=category or UNCLASSIFIED,
            )
            sources.append(source)
            self._write(sources)
        logger.info("Added source %s (%s)", source.id, source.name)
        return source

    def replace(self, source_id: int, fields: dict[str, Any]) -> Source | None:
        """Apply a partial update; absent or empty fields keep their value.

        Returns:
            The updated Source, or None when no source has that id
        """
        with self._lock:
            sources = self.read_all()
            for source in sources:
                if source.id != source_id:
                    continue
                for key in EDITABLE_FIELDS:
                    value = fields.get(key)
                    if value:
                        setattr(source, key, value)
                self._write(sources)
                return source
        return None

    def remove(self, source_id: int) -> bool:
        """Delete a source by id. Returns False when nothing was removed."""
        with self._lock:
            sources = self.read_all()
            kept = [s for s in sources if s.id != source_id]
            if len(kept) == len(sources):
                return False
            self._write(kept)
        logger.info("Removed source %s", source_id)
        return True

    def remove_matching(self, name: str | None = None, url: str | None = None) -> list[Source]:
        """Delete every source whose name or url equals the given value."""
        if not name and not url:
            return []
        with self._lock:
            sources = self.read_all()
            removed = [s for s in sources if _matches(s, name, url)]
            if removed:
                self._write([s for s in sources if not _matches(s, name, url)])
        return removed

    def search(self, keywords: str) -> list[Source]:
        """Return sources whose name, url, sector or category contain any keyword."""
        terms = [t for t in keywords.lower().split() if t]
        if not terms:
            return []
        results = []
        for source in self.read_all():
            haystack = " ".join(
                (source.name, source.url, source.sector, source.category)
            ).lower()
            if any(term in haystack for term in terms):
                results.append(source)
        return results

    def _write(self, sources: list[Source]) -> None:
        payload = json.dumps([s.to_dict() for s in sources], indent=4, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Cannot write source list %s: %s", self.path, exc)
            raise StorageError(f"Unable to save sources to {self.path}") from exc


def _matches(source: Source, name: str | None, url: str | None) -> bool:
    return bool((name and source.name == name) or (url and source.url == url))
