"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from vizdata.config import reset_config

_ENV_VARS = (
    "VIZDATA_CONFIG_FILE",
    "VIZDATA_RESPONSE_HANDLER",
    "VIZDATA_CSV_SEPARATOR",
    "VIZDATA_JS_TABLE_NAME",
    "VIZDATA_MAX_DESCRIPTION_DEPTH",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test against default configuration."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
