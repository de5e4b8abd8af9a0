"""
Configuration system for vizdata.

Environment variables are the primary config source, with an optional
JSON config file for local development. Every renderer argument that has
a configurable default reads it from here when the caller passes None.

Usage:
    from vizdata.config import get_config

    config = get_config()
    separator = config.csv_separator

Environment variables:
    VIZDATA_CONFIG_FILE            Path to a JSON config file
    VIZDATA_RESPONSE_HANDLER       Default callback for JSON responses
    VIZDATA_CSV_SEPARATOR          Default separator for CSV output
    VIZDATA_JS_TABLE_NAME          Default variable name for JS code output
    VIZDATA_MAX_DESCRIPTION_DEPTH  Nesting limit for table descriptions
"""

from __future__ import annotations

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE_HANDLER = "google.visualization.Query.setResponse"


class Config(BaseModel):
    """
    vizdata configuration.

    Attributes:
        response_handler: JS callback wrapped around JSON responses.
        csv_separator: Separator placed between CSV values.
        js_table_name: Variable name used by the JS code renderer.
        max_description_depth: Maximum nesting of a table description.
            Prevents runaway recursion on pathological descriptions.
    """

    model_config = ConfigDict(frozen=True)

    response_handler: str = Field(
        default=DEFAULT_RESPONSE_HANDLER,
        min_length=1,
        description="Callback name wrapped around JSON responses",
    )
    csv_separator: str = Field(
        default=", ",
        min_length=1,
        description="Separator between values in CSV output",
    )
    js_table_name: str = Field(
        default="data",
        min_length=1,
        description="Variable name of the table in JS code output",
    )
    max_description_depth: int = Field(
        default=100,
        gt=0,
        description="Maximum nesting level of a table description",
    )


def _parse_env_int(value: str | None, default: int) -> int:
    """Parse integer from environment variable."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Could not parse integer setting %r, using %d", value, default)
        return default


def load_config_from_env() -> Config:
    """
    Load configuration from environment variables.

    Unset variables keep the model defaults.
    """
    config_kwargs: dict[str, Any] = {
        "max_description_depth": _parse_env_int(
            os.environ.get("VIZDATA_MAX_DESCRIPTION_DEPTH"), 100
        ),
    }

    for key, env_name in (
        ("response_handler", "VIZDATA_RESPONSE_HANDLER"),
        ("csv_separator", "VIZDATA_CSV_SEPARATOR"),
        ("js_table_name", "VIZDATA_JS_TABLE_NAME"),
    ):
        value = os.environ.get(env_name)
        if value:
            config_kwargs[key] = value

    try:
        return Config(**config_kwargs)
    except ValidationError as e:
        logger.warning("Invalid vizdata environment settings, using defaults: %s", e)
        return Config()


def load_config_from_file(path: Path) -> Config:
    """
    Load configuration from a JSON file.

    Falls back to environment variables if the file is missing or invalid.
    """
    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return Config(**data)
    except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return load_config_from_env()


@lru_cache(maxsize=1)
def get_config() -> Config:
    """
    Get the global configuration instance.

    Loads from:
    1. VIZDATA_CONFIG_FILE environment variable (if set)
    2. Environment variables (default)

    Result is cached for the lifetime of the process.
    """
    config_file = os.environ.get("VIZDATA_CONFIG_FILE")

    if config_file:
        return load_config_from_file(Path(config_file))

    return load_config_from_env()


def reset_config() -> None:
    """Reset the cached configuration (mainly for testing)."""
    get_config.cache_clear()
