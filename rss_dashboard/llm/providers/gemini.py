"""Google Gemini provider for the command channel."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import LoggingConfig, ProviderConfig
from ...logging_utils import log_event, redact_text, truncate_text
from .base import CommandProvider, ProviderError


class GeminiProvider(CommandProvider):
    """Gemini-backed provider using the generateContent endpoint."""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig,
        llm_logger: logging.Logger | None,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("Missing Google API key")
        self.cfg = cfg
        self.api_key = api_key
        self.log_cfg = log_cfg
        self.llm_logger = llm_logger
        self.transport = transport

    def complete(self, prompt: str, system: str | None = None) -> str:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.cfg.temperature,
                "maxOutputTokens": self.cfg.max_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        try:
            data = self._post(payload)
        except httpx.HTTPError as exc:
            self._log_llm_response("provider_error", str(exc), prompt)
            raise ProviderError(f"{type(exc).__name__}: {exc}") from exc

        content = _extract_text(data)
        self._log_llm_response("ok", content, prompt)
        return content

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.cfg.base_url.rstrip('/')}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        with httpx.Client(
            timeout=self.cfg.timeout_seconds,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        ) as client:
            resp = client.post(url, params=params, json=payload)
            resp.raise_for_status()
            return resp.json()

    def _log_llm_response(self, status: str, content: str, prompt: str) -> None:
        if self.llm_logger is None:
            return
        redaction = self.log_cfg.llm_log_redaction
        payload = {
            "event": "llm_response",
            "status": status,
            "provider": "gemini",
            "model": self.cfg.model,
            "raw_response": truncate_text(redact_text(content, redaction)),
        }
        if self.log_cfg.llm_log_detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        log_event(self.llm_logger, "LLM response", **payload)


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate, skipping thought parts.

    Falls back to every text part when the reply only carries thoughts.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    answer = [p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought")]
    if any(answer):
        return "".join(answer)
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict))
