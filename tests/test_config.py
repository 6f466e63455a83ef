"""Tests for YAML configuration loading."""

from rss_dashboard.config import AppConfig, ProviderConfig, get_api_key, load_config


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)
    assert cfg == AppConfig()
    assert cfg.feed.snippet_max_chars == 150
    assert cfg.fetch.max_redirects == 5


def test_load_config_merges_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "fetch:\n  timeout_seconds: 3\n"
        "registry:\n  path: /data/sources.json\n"
        "provider:\n  name: gemini\n"
        "unknown_section:\n  ignored: true\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.fetch.timeout_seconds == 3
    assert cfg.fetch.retries == AppConfig().fetch.retries
    assert cfg.registry.path == "/data/sources.json"
    assert cfg.provider.name == "gemini"
    assert cfg.provider.model == "llama-3.1-8b-instant"


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == AppConfig()


def test_get_api_key_prefers_inline(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "from-env")
    assert get_api_key(ProviderConfig(api_key="inline")) == "inline"
    assert get_api_key(ProviderConfig()) == "from-env"
