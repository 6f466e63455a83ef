"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: Feed fetching settings
- FeedConfig: Article normalization settings
- RegistryConfig: Source list storage settings
- ProviderConfig: LLM provider settings
- ServerConfig: HTTP server settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml


@dataclass
class FetchConfig:
    """Configuration for feed fetching.

    Attributes:
        timeout_seconds: Per-fetch timeout, covering connect and read
        retries: Number of retry attempts after a transport failure
        max_redirects: Maximum redirect hops followed for one fetch
        concurrency: Maximum number of feeds fetched at the same time
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 15.0
    retries: int = 1
    max_redirects: int = 5
    concurrency: int = 16
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (compatible; rss-dashboard/0.1; +https://github.com/rss-dashboard)"
    )


@dataclass
class FeedConfig:
    """Configuration for article normalization.

    Attributes:
        snippet_max_chars: Hard character cut applied to snippets
        snippet_placeholder: Snippet used when an item carries no description
    """

    snippet_max_chars: int = 150
    snippet_placeholder: str = "No summary available."


@dataclass
class RegistryConfig:
    """Configuration for the source list file.

    Attributes:
        path: Path to the JSON file holding the source list
    """

    path: str = "source_list.json"


@dataclass
class ProviderConfig:
    """Configuration for LLM provider.

    Attributes:
        name: Provider name ("openai_compatible" or "gemini")
        model: Model identifier (e.g., "llama-3.1-8b-instant")
        base_url: Base URL for the provider API
        api_key_env: Environment variable name containing the API key
        api_key: Optional inline API key (overrides env var)
        trust_env: Whether to respect system proxy settings for API requests
        temperature: Sampling temperature
        max_tokens: Maximum output tokens per reply
        timeout_seconds: Request timeout for provider calls
    """

    name: str = "openai_compatible"
    model: str = "llama-3.1-8b-instant"
    base_url: str = "https://api.groq.com/openai/v1"
    api_key_env: str = "GROQ_API_KEY"
    api_key: str | None = None
    trust_env: bool = True
    temperature: float = 0.5
    max_tokens: int = 1024
    timeout_seconds: float = 30.0


@dataclass
class ServerConfig:
    """Configuration for the HTTP server.

    Attributes:
        host: Interface to bind
        port: Port to listen on
    """

    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
        directory: Directory for log files
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: LLM log detail level ("response_only", "prompt_response")
        llm_log_redaction: Redaction mode for LLM logs ("none", "redact_content", "redact_urls")
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"
    directory: str = "logs"
    llm_log_enabled: bool = False
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "fetch": {
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "retries": cfg.fetch.retries,
            "max_redirects": cfg.fetch.max_redirects,
            "concurrency": cfg.fetch.concurrency,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
        },
        "feed": {
            "snippet_max_chars": cfg.feed.snippet_max_chars,
            "snippet_placeholder": cfg.feed.snippet_placeholder,
        },
        "registry": {
            "path": cfg.registry.path,
        },
        "provider": {
            "name": cfg.provider.name,
            "model": cfg.provider.model,
            "base_url": cfg.provider.base_url,
            "api_key_env": cfg.provider.api_key_env,
            "api_key": cfg.provider.api_key,
            "trust_env": cfg.provider.trust_env,
            "temperature": cfg.provider.temperature,
            "max_tokens": cfg.provider.max_tokens,
            "timeout_seconds": cfg.provider.timeout_seconds,
        },
        "server": {
            "host": cfg.server.host,
            "port": cfg.server.port,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "directory": cfg.logging.directory,
            "llm_log_enabled": cfg.logging.llm_log_enabled,
            "llm_log_detail": cfg.logging.llm_log_detail,
            "llm_log_redaction": cfg.logging.llm_log_redaction,
            "llm_log_file": cfg.logging.llm_log_file,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        feed=FeedConfig(**data["feed"]),
        registry=RegistryConfig(**data["registry"]),
        provider=ProviderConfig(**data["provider"]),
        server=ServerConfig(**data["server"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.api_key_env)
