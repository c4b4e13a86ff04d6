"""Configuration management for fasthog.

Settings are resolved with the following priority:

1. CLI arguments (highest priority)
2. Environment variables
3. Configuration file
4. Default values (lowest priority)

:func:`load_config` merges layers 2-4; the ``determine_*`` helpers then
apply command-line values on top of the loaded configuration.

Example usage::

    from fasthog.config import load_config, determine_extensions

    config = load_config()
    extensions = determine_extensions("py,go", config)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from fasthog.config.env import (
    ENV_CONCURRENCY,
    ENV_CONFIG_PATH,
    ENV_DIRECTORY,
    ENV_EXCLUDE_DIRS,
    ENV_EXTENSIONS,
    ENV_LOG_LEVEL,
    ENV_OUTPUT_FORMAT,
    ENV_OUTPUT_PATH,
    get_config_path_from_env,
    get_env_overrides,
)
from fasthog.config.loader import CONFIG_FILE_NAMES, ConfigLoader
from fasthog.config.schema import (
    FasthogConfig,
    LogLevel,
    OutputFormat,
    OutputSettings,
    PatternFileSettings,
    normalize_extensions,
    parse_output_format,
)
from fasthog.core.exceptions import ConfigError
from fasthog.core.walker import DEFAULT_EXTENSIONS

__all__ = [
    # Schema classes
    "FasthogConfig",
    "LogLevel",
    "OutputFormat",
    "OutputSettings",
    "PatternFileSettings",
    "normalize_extensions",
    "parse_output_format",
    # Loader
    "CONFIG_FILE_NAMES",
    "ConfigLoader",
    # Environment variables
    "ENV_CONCURRENCY",
    "ENV_CONFIG_PATH",
    "ENV_DIRECTORY",
    "ENV_EXCLUDE_DIRS",
    "ENV_EXTENSIONS",
    "ENV_LOG_LEVEL",
    "ENV_OUTPUT_FORMAT",
    "ENV_OUTPUT_PATH",
    "get_env_overrides",
    # Priority handling
    "load_config",
    "determine_directory",
    "determine_extensions",
    "determine_output_format",
    "determine_output_path",
]


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    None values in ``override`` never replace anything.
    """
    result = base.copy()
    for key, value in override.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config(
    config_path: Path | str | None = None,
    use_env: bool = True,
    use_file: bool = True,
    search_dir: Path | None = None,
) -> FasthogConfig:
    """Load configuration from defaults, a config file and the environment.

    The config file is, in order: ``config_path``, the file named by
    ``FASTHOG_CONFIG_PATH``, or the first of :data:`CONFIG_FILE_NAMES`
    found in ``search_dir`` (default: the working directory). A missing
    file is only an error when it was named explicitly.

    Args:
        config_path: Optional explicit path to a config file.
        use_env: Whether to apply environment variable overrides.
        use_file: Whether to look for and load config files.
        search_dir: Directory searched for a default config file.

    Returns:
        A fully merged FasthogConfig instance.

    Raises:
        ConfigError: If a config file cannot be loaded or the merged
                     configuration is invalid.
    """
    # Layer 1: Defaults (implicit in FasthogConfig)
    config_dict: dict[str, Any] = {}

    # Layer 2: Configuration file
    if use_file:
        loader = ConfigLoader(search_dir=search_dir)
        file_path = config_path or (get_config_path_from_env() if use_env else None)
        if file_path is None:
            file_path = loader.find_config_file()
        if file_path is not None:
            file_config = loader.load(file_path)
            config_dict = _merge_configs(config_dict, file_config.model_dump(exclude_unset=True))

    # Layer 3: Environment variables
    if use_env:
        config_dict = _merge_configs(config_dict, get_env_overrides())

    try:
        return FasthogConfig.model_validate(config_dict)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {details}", config_key="config") from e


def determine_directory(flag_value: Optional[Path | str], config: FasthogConfig) -> Path:
    """Pick the directory to scan: the CLI argument, then the config file.

    Raises:
        ConfigError: If neither source names a directory.
    """
    if flag_value is not None and str(flag_value).strip():
        return Path(flag_value)
    if config.directory is not None:
        return config.directory
    raise ConfigError("no directory to scan was given", config_key="directory")


def determine_extensions(flag_value: Optional[str], config: FasthogConfig) -> list[str]:
    """Pick the extensions to scan for.

    A ``--types`` value wins when it contains at least one non-blank entry;
    otherwise the config file's list is used if non-empty, and the
    built-in defaults apply last.

    Example:
        >>> determine_extensions("py, ,go", FasthogConfig())
        ['.py', '.go']
    """
    if flag_value:
        extensions = normalize_extensions(flag_value)
        if extensions:
            return extensions
    if config.extensions:
        return list(config.extensions)
    return list(DEFAULT_EXTENSIONS)


def determine_output_format(
    format_flag: Optional[str],
    json_flag: bool,
    config: FasthogConfig,
) -> OutputFormat:
    """Pick the output format: ``--json``, then ``--format``, then config, then text.

    Raises:
        ConfigError: If ``--format`` names an unsupported format.
    """
    if json_flag:
        return OutputFormat.JSON
    if format_flag is not None:
        try:
            return parse_output_format(format_flag)
        except ValueError as e:
            raise ConfigError(str(e), config_key="output.format") from e
    return config.output.format


def determine_output_path(flag_value: Optional[Path | str], config: FasthogConfig) -> Optional[Path]:
    """Pick the output file: the CLI value, then the config file, else None."""
    if flag_value is not None and str(flag_value).strip():
        return Path(flag_value)
    return config.output.path
