"""Environment variable mapping for fasthog configuration.

This module defines the environment variables that can be used to
configure fasthog and provides utilities for reading them.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

# Environment variable names
ENV_CONFIG_PATH = "FASTHOG_CONFIG_PATH"
ENV_DIRECTORY = "FASTHOG_DIRECTORY"
ENV_EXTENSIONS = "FASTHOG_EXTENSIONS"
ENV_EXCLUDE_DIRS = "FASTHOG_EXCLUDE_DIRS"
ENV_OUTPUT_FORMAT = "FASTHOG_OUTPUT_FORMAT"
ENV_OUTPUT_PATH = "FASTHOG_OUTPUT_PATH"
ENV_CONCURRENCY = "FASTHOG_CONCURRENCY"
ENV_LOG_LEVEL = "FASTHOG_LOG_LEVEL"


def _parse_int(value: str) -> int | None:
    """Parse an integer, returning None if the value is not one."""
    try:
        return int(value)
    except ValueError:
        return None


def _parse_list(value: str) -> list[str]:
    """Parse a list from a comma-separated string.

    Args:
        value: Comma-separated string.

    Returns:
        List of non-empty, stripped strings.
    """
    return [item.strip() for item in value.split(",") if item.strip()]


def get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables.

    Unset or blank variables contribute nothing, so a config file value
    is only overridden by a variable that actually carries a value.

    Returns:
        Dictionary of configuration values from environment variables.
    """
    overrides: dict[str, Any] = {"output": {}}

    # FASTHOG_CONFIG_PATH is handled separately (specifies config file location)

    if os.environ.get(ENV_DIRECTORY, "").strip():
        overrides["directory"] = Path(os.environ[ENV_DIRECTORY].strip())

    if ENV_EXTENSIONS in os.environ:
        extensions = _parse_list(os.environ[ENV_EXTENSIONS])
        if extensions:
            overrides["extensions"] = extensions

    if ENV_EXCLUDE_DIRS in os.environ:
        exclude_dirs = _parse_list(os.environ[ENV_EXCLUDE_DIRS])
        if exclude_dirs:
            overrides["exclude_dirs"] = exclude_dirs

    if ENV_CONCURRENCY in os.environ:
        value = _parse_int(os.environ[ENV_CONCURRENCY])
        if value is not None:
            overrides["concurrency"] = value

    if os.environ.get(ENV_OUTPUT_FORMAT, "").strip():
        overrides["output"]["format"] = os.environ[ENV_OUTPUT_FORMAT].strip().lower()

    if os.environ.get(ENV_OUTPUT_PATH, "").strip():
        overrides["output"]["path"] = Path(os.environ[ENV_OUTPUT_PATH].strip())

    if os.environ.get(ENV_LOG_LEVEL, "").strip():
        overrides["log_level"] = os.environ[ENV_LOG_LEVEL].strip().lower()

    # Clean up empty sections
    return {k: v for k, v in overrides.items() if v or not isinstance(v, dict)}


def get_config_path_from_env() -> Path | None:
    """Get the config file path from the environment.

    Returns:
        Path to config file if set, None otherwise.
    """
    value = os.environ.get(ENV_CONFIG_PATH, "").strip()
    return Path(value) if value else None
