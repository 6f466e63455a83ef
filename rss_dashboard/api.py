"""FastAPI application: source CRUD, feed aggregation and the LLM command channel."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
from fastapi import FastAPI, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import AppConfig
from .feed.fetcher import build_client
from .feed.pipeline import aggregate_sources
from .llm.commands import Analysis, execute_command, parse_reply
from .llm.prompts import analyze_system_prompt, build_article_digest, manage_system_prompt
from .llm.providers import CommandProvider, ProviderError, create_provider
from .logging_utils import setup_llm_logger
from .registry import SourceRegistry, StorageError

logger = logging.getLogger("rss_dashboard.api")

WARNING_HEADER = "X-Feed-Warning"


class SourcePayload(BaseModel):
    name: str | None = None
    url: str | None = None
    sector: str | None = None
    category: str | None = None


class PromptPayload(BaseModel):
    prompt: str | None = None
    include_articles: bool = False


def _error(status_code: int, message: str, **extra: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _storage_error(exc: StorageError) -> JSONResponse:
    return _error(500, str(exc), kind="storage")


def create_app(
    cfg: AppConfig | None = None,
    registry: SourceRegistry | None = None,
    provider: CommandProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        cfg: Application configuration (defaults when None)
        registry: Source registry; built from cfg.registry.path when None
        provider: LLM provider; built lazily from cfg.provider when None
        transport: Optional httpx transport used for feed fetches
    """
    cfg = cfg or AppConfig()
    registry = registry or SourceRegistry(cfg.registry.path)
    state: dict[str, CommandProvider | None] = {"provider": provider}

    app = FastAPI(
        title="RSS Dashboard API",
        description="Feed source CRUD, on-demand aggregation and an LLM assistant",
        version="0.1.0",
    )

    def _get_provider() -> CommandProvider:
        if state["provider"] is None:
            llm_logger = setup_llm_logger(cfg.logging, Path(cfg.logging.directory))
            state["provider"] = create_provider(cfg.provider, cfg.logging, llm_logger)
        return state["provider"]

    async def _aggregate():
        # The registry snapshot is a blocking file read.
        sources = await run_in_threadpool(registry.read_all)
        async with build_client(cfg.fetch, transport) as client:
            return await aggregate_sources(sources, cfg, client=client)

    @app.get("/api/status")
    async def status():
        return {"status": "running", "message": "API operational"}

    @app.get("/api/sources")
    def list_sources():
        try:
            return [s.to_dict() for s in registry.read_all()]
        except StorageError as exc:
            return _storage_error(exc)

    @app.post("/api/sources", status_code=201)
    def create_source(payload: SourcePayload):
        name = (payload.name or "").strip()
        url = (payload.url or "").strip()
        if not name or not url:
            return _error(400, "Both name and url are required.")
        try:
            source = registry.append(name, url, sector=payload.sector, category=payload.category)
        except StorageError as exc:
            return _storage_error(exc)
        return source.to_dict()

    @app.put("/api/sources/{source_id}")
    def update_source(source_id: int, payload: SourcePayload):
        try:
            source = registry.replace(source_id, payload.model_dump(exclude_none=True))
        except StorageError as exc:
            return _storage_error(exc)
        if source is None:
            return _error(404, "Source not found.")
        return source.to_dict()

    @app.delete("/api/sources/{source_id}")
    def delete_source(source_id: int):
        try:
            removed = registry.remove(source_id)
        except StorageError as exc:
            return _storage_error(exc)
        if not removed:
            return _error(404, "Source not found.")
        return Response(status_code=204)

    @app.get("/api/articles")
    async def list_articles():
        try:
            result = await _aggregate()
        except StorageError as exc:
            return _storage_error(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Aggregation failed")
            return _error(500, f"Error while aggregating feeds: {exc}", kind="parsing")

        headers = {WARNING_HEADER: result.warning} if result.warning else None
        return JSONResponse(content=[a.to_dict() for a in result.articles], headers=headers)

    @app.post("/api/ai/manage")
    def ai_manage(payload: PromptPayload):
        if not payload.prompt or not payload.prompt.strip():
            return _error(400, "A 'prompt' is required.")
        try:
            reply = _get_provider().complete(payload.prompt, system=manage_system_prompt())
        except ValueError as exc:
            return _error(503, str(exc))
        except ProviderError as exc:
            logger.warning("Provider call failed: %s", exc)
            return _error(502, "The language model could not be reached.", details=str(exc))

        parsed = parse_reply(reply)
        if isinstance(parsed, Analysis):
            return {"analysis": parsed.text}

        try:
            outcome = execute_command(parsed, registry)
        except StorageError as exc:
            return _storage_error(exc)
        if outcome.status == "not_found":
            return _error(404, outcome.message)
        return {"success": outcome.message, "action": parsed.action, **outcome.payload}

    @app.post("/api/ai/analyze")
    async def ai_analyze(payload: PromptPayload):
        if not payload.prompt or not payload.prompt.strip():
            return _error(400, "A 'prompt' is required.")
        prompt = payload.prompt
        if payload.include_articles:
            try:
                result = await _aggregate()
            except StorageError as exc:
                return _storage_error(exc)
            prompt = f"{prompt}\n{build_article_digest(result.articles)}"
        try:
            provider = _get_provider()
            reply = await run_in_threadpool(provider.complete, prompt, system=analyze_system_prompt())
        except ValueError as exc:
            return _error(503, str(exc))
        except ProviderError as exc:
            logger.warning("Provider call failed: %s", exc)
            return _error(502, "The language model could not be reached.", details=str(exc))
        return {"analysis": reply}

    return app
