from __future__ import annotations

import pytest

from rss_dashboard.config import AppConfig


@pytest.fixture
def cfg() -> AppConfig:
    config = AppConfig()
    config.fetch.retries = 0
    config.logging.console = False
    return config
