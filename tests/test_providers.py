"""Tests for provider wire formats against a mocked transport."""

from __future__ import annotations

import json

import httpx
import pytest

from rss_dashboard.config import LoggingConfig, ProviderConfig
from rss_dashboard.llm.providers.base import ProviderError
from rss_dashboard.llm.providers.gemini import GeminiProvider, _extract_text
from rss_dashboard.llm.providers.openai_compatible import OpenAICompatibleProvider


def test_openai_compatible_sends_system_and_user_messages():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "hello"}}]})

    provider = OpenAICompatibleProvider(
        ProviderConfig(api_key="k"), "k", LoggingConfig(), None, transport=httpx.MockTransport(handler)
    )

    assert provider.complete("question", system="be brief") == "hello"
    assert seen["url"] == "https://api.groq.com/openai/v1/chat/completions"
    assert seen["auth"] == "Bearer k"
    assert seen["body"]["model"] == "llama-3.1-8b-instant"
    assert seen["body"]["messages"] == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "question"},
    ]


def test_openai_compatible_http_error_raises_provider_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": "bad key"}))
    provider = OpenAICompatibleProvider(ProviderConfig(), "k", LoggingConfig(), None, transport=transport)

    with pytest.raises(ProviderError):
        provider.complete("question")


def test_gemini_posts_generate_content():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

    cfg = ProviderConfig(name="gemini", model="gemini-2.0-flash", base_url="https://gemini.example.com")
    provider = GeminiProvider(cfg, "k", LoggingConfig(), None, transport=httpx.MockTransport(handler))

    assert provider.complete("question", system="sys") == "ok"
    assert seen["url"].path == "/v1beta/models/gemini-2.0-flash:generateContent"
    assert seen["url"].params["key"] == "k"
    assert seen["body"]["systemInstruction"] == {"parts": [{"text": "sys"}]}


def test_extract_text_joins_non_thought_parts():
    data = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"thought": True, "text": "internal reasoning"},
                        {"text": '{"action": "add"'},
                        {"text": ', "name": "A"}'},
                    ]
                }
            }
        ]
    }

    assert _extract_text(data) == '{"action": "add", "name": "A"}'


def test_extract_text_falls_back_to_all_text_when_only_thought():
    data = {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"thought": True, "text": "first"},
                        {"thought": True, "text": " second"},
                    ]
                }
            }
        ]
    }

    assert _extract_text(data) == "first second"


def test_extract_text_handles_empty_payload():
    assert _extract_text({}) == ""
