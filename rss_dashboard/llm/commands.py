"""
Classify model replies as commands or analysis, and execute commands.

A reply is a Command only when an embedded JSON object can be located
(raw, inside a ```json fence, or between the first "{" and last "}"),
parsed, and validated:
- add:    name and url required
- delete: name or url required
- search: keywords required
Everything else, including malformed or partial JSON, is Analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Union

from ..registry import SourceRegistry

logger = logging.getLogger("rss_dashboard.commands")

ACTIONS = ("add", "delete", "search")


@dataclass
class Command:
    action: str
    name: str | None = None
    url: str | None = None
    keywords: str | None = None
    sector: str | None = None
    category: str | None = None


@dataclass
class Analysis:
    text: str


Reply = Union[Command, Analysis]


@dataclass
class CommandOutcome:
    """Result of executing a Command against the registry.

    Attributes:
        status: "ok" or "not_found"
        message: Human-readable summary
        payload: Extra data for the caller (created source, search matches)
    """
    status: str
    message: str
    payload: dict[str, Any] = field(default_factory=dict)


def parse_reply(text: str) -> Reply:
    """Turn a raw model reply into a validated Command or an Analysis."""
    try:
        obj = _parse_json_response(text)
    except json.JSONDecodeError:
        return Analysis(text=text)
    command = _validate_command(obj)
    if command is None:
        return Analysis(text=text)
    return command


def execute_command(command: Command, registry: SourceRegistry) -> CommandOutcome:
    """Apply a validated Command to the source registry.

    Raises:
        StorageError: the registry cannot be read or written
    """
    if command.action == "add":
        source = registry.append(
            command.name or "",
            command.url or "",
            sector=command.sector,
            category=command.category,
        )
        return CommandOutcome(
            status="ok",
            message=f"Source '{source.name}' added.",
            payload={"source": source.to_dict()},
        )

    if command.action == "delete":
        removed = registry.remove_matching(name=command.name, url=command.url)
        if not removed:
            return CommandOutcome(status="not_found", message="No source matched for deletion.")
        logger.info("Removed %d source(s) by command", len(removed))
        return CommandOutcome(
            status="ok",
            message=f"Removed {len(removed)} source(s).",
            payload={"removed": [s.to_dict() for s in removed]},
        )

    matches = registry.search(command.keywords or "")
    return CommandOutcome(
        status="ok",
        message=f"{len(matches)} source(s) match '{command.keywords}'.",
        payload={"keywords": command.keywords, "sources": [s.to_dict() for s in matches]},
    )


def _validate_command(obj: Any) -> Command | None:
    if not isinstance(obj, dict):
        return None
    action = obj.get("action")
    if not isinstance(action, str) or action.strip().lower() not in ACTIONS:
        return None

    command = Command(
        action=action.strip().lower(),
        name=_clean(obj.get("name")),
        url=_clean(obj.get("url")),
        keywords=_clean(obj.get("keywords")),
        sector=_clean(obj.get("sector")),
        category=_clean(obj.get("category")),
    )
    if command.action == "add" and not (command.name and command.url):
        return None
    if command.action == "delete" and not (command.name or command.url):
        return None
    if command.action == "search" and not command.keywords:
        return None
    return command


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _parse_json_response(content: str) -> Any:
    if not content or not content.strip():
        raise json.JSONDecodeError("Empty content", content or "", 0)
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        extracted = _extract_json_snippet(content)
        return json.loads(extracted)


def _extract_json_snippet(content: str) -> str:
    fence = _extract_fenced_json(content)
    if fence:
        return fence
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise json.JSONDecodeError("No JSON object found", content, 0)
    return content[start : end + 1]


def _extract_fenced_json(content: str) -> str | None:
    lines = content.splitlines()
    start_idx = None
    for idx, line in enumerate(lines):
        if line.strip().startswith("```") and "json" in line.lower():
            start_idx = idx + 1
            break
    if start_idx is None:
        return None
    for idx in range(start_idx, len(lines)):
        if lines[idx].strip().startswith("```"):
            snippet = "\n".join(lines[start_idx:idx]).strip()
            return snippet or None
    return None
