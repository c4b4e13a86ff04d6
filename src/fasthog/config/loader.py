"""Configuration file loading and discovery.

fasthog reads YAML configuration files of this shape::

    directory: ./src
    extensions:
      - .go
      - py
    exclude_dirs:
      - build
    output:
      path: results.txt
      format: json
    patterns:
      direct: direct_matches.regex
      fast: fast_patterns.regex
      strict: strict_patterns.regex
      exclude: exclude_patterns.regex

Unknown keys are ignored so newer files keep working with older releases.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fasthog.config.schema import FasthogConfig
from fasthog.core.exceptions import ConfigError

# Config file names looked up in the working directory (in order of preference)
CONFIG_FILE_NAMES = [
    "fasthog.yaml",
    "fasthog.yml",
    ".fasthog.yaml",
    ".fasthog.yml",
]


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"])
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


class ConfigLoader:
    """Finds and parses fasthog configuration files."""

    def __init__(self, search_dir: Path | None = None) -> None:
        """Initialize the config loader.

        Args:
            search_dir: Directory searched by :meth:`find_config_file`.
                        Defaults to the current working directory.
        """
        self.search_dir = search_dir

    def find_config_file(self) -> Path | None:
        """Return the first known config file in the search directory, if any."""
        directory = self.search_dir or Path.cwd()
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def load_data(self, path: Path | str) -> dict[str, Any]:
        """Read and parse a YAML config file into a dictionary.

        Raises:
            ConfigError: If the file is missing, unreadable, not valid YAML,
                         or does not contain a mapping.
        """
        path = Path(path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}", config_key="config")
        if not path.is_file():
            raise ConfigError(f"Configuration path is not a file: {path}", config_key="config")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"unable to read config file {path}: {e}", config_key="config") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", config_key="config") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping, got: {type(data).__name__}",
                config_key="config",
            )
        return data

    def load(self, path: Path | str) -> FasthogConfig:
        """Load and validate a configuration file.

        Raises:
            ConfigError: If the file cannot be loaded or fails validation.
        """
        data = self.load_data(path)
        try:
            return FasthogConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration in {path}: {_format_validation_error(e)}",
                config_key="config",
            ) from e
