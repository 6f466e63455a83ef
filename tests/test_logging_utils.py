"""Tests for structured logging helpers."""

import json
import logging

from rss_dashboard.config import LoggingConfig
from rss_dashboard.logging_utils import (
    JsonlFormatter,
    log_event,
    redact_text,
    setup_llm_logger,
    setup_logging,
    truncate_text,
)


def test_jsonl_formatter_includes_extra_fields():
    record = logging.LogRecord("rss_dashboard.pipeline", logging.WARNING, __file__, 1, "Source failed", None, None)
    record.source_id = 3
    record.error = "bad status 500"

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["message"] == "Source failed"
    assert payload["source_id"] == 3
    assert payload["error"] == "bad status 500"


def test_setup_logging_writes_jsonl_file(tmp_path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    log_event(logger, "Aggregation finished", articles=4)
    for handler in logger.handlers:
        handler.flush()

    line = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip().splitlines()[-1]
    assert json.loads(line)["articles"] == 4


def test_llm_logger_disabled_by_default(tmp_path):
    assert setup_llm_logger(LoggingConfig(), tmp_path) is None
    log_event(None, "ignored")


def test_redact_and_truncate():
    assert redact_text("see https://example.com/feed now", "redact_urls") == "see [REDACTED_URL] now"
    assert redact_text("secret", "redact_content") == ""
    assert redact_text("plain", "none") == "plain"
    assert truncate_text("abcdef", max_chars=3) == "abc...(truncated)"
