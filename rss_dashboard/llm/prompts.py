"""Prompt loading and digest helpers for the command channel."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Iterable

from ..types import Article


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"

DIGEST_LIMIT = 5
EMPTY_DIGEST = "No articles available for analysis."


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def manage_system_prompt() -> str:
    return _render_template("manage")


def analyze_system_prompt() -> str:
    return _render_template("analyze")


def build_article_digest(articles: Iterable[Article], limit: int = DIGEST_LIMIT) -> str:
    """Summarise the first few articles as a plain-text block for a prompt.

    Example:
        --- Articles to analyse ---
        [1] Title: "Some headline" (Source: Example Feed)
    """
    lines = []
    for idx, article in enumerate(articles):
        if idx >= limit:
            break
        lines.append(f'[{idx + 1}] Title: "{article.title}" (Source: {article.source_name})')
    if not lines:
        return EMPTY_DIGEST
    return "\n--- Articles to analyse ---\n" + "\n".join(lines) + "\n"
