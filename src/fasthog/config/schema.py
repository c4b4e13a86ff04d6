"""Configuration schema definitions using Pydantic Settings.

Instantiating FasthogConfig directly also reads ``FASTHOG_*`` environment
variables; :func:`fasthog.config.load_config` layers the sources explicitly.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from fasthog.core.patterns import PatternFiles


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"


def parse_output_format(value: Any) -> OutputFormat:
    """Convert user input into an OutputFormat.

    Blank input means text.

    Raises:
        ValueError: If the value is not a supported format.
    """
    if isinstance(value, OutputFormat):
        return value
    text = str(value or "").strip().lower()
    if not text:
        return OutputFormat.TEXT
    try:
        return OutputFormat(text)
    except ValueError:
        valid = ", ".join(f.value for f in OutputFormat)
        raise ValueError(f"invalid output format {value!r} (supported: {valid})") from None


def normalize_extensions(values: Any) -> list[str]:
    """Normalize extensions from a list or comma-separated string.

    Blank entries are dropped and a leading dot is added where missing.

    Example:
        >>> normalize_extensions("py, .js,,yml")
        ['.py', '.js', '.yml']
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")

    extensions: list[str] = []
    for value in values:
        ext = str(value).strip()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        extensions.append(ext)
    return extensions


def _split_names(values: Any) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = values.split(",")
    return [str(v).strip() for v in values if str(v).strip()]


class PatternFileSettings(BaseModel):
    """Paths of pattern files that replace the built-in ones."""

    direct: Optional[str] = Field(default=None, description="Direct-match patterns (fast and strict)")
    fast: Optional[str] = Field(default=None, description="Fast screening patterns")
    strict: Optional[str] = Field(default=None, description="Strict extraction patterns")
    exclude: Optional[str] = Field(default=None, description="Exclusion patterns")

    def to_pattern_files(self) -> PatternFiles:
        """Convert to the PatternFiles value used by the pattern loader."""
        return PatternFiles(
            direct=self.direct or None,
            fast=self.fast or None,
            strict=self.strict or None,
            exclude=self.exclude or None,
        )


class OutputSettings(BaseModel):
    """Settings for output formatting."""

    path: Optional[Path] = Field(default=None, description="File to write results to")
    format: OutputFormat = Field(default=OutputFormat.TEXT, description="Output format")

    @field_validator("format", mode="before")
    @classmethod
    def validate_format(cls, v: Any) -> OutputFormat:
        """Validate and normalize output format."""
        return parse_output_format(v)

    @field_validator("path", mode="before")
    @classmethod
    def blank_path_is_none(cls, v: Any) -> Any:
        """Treat an empty path as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class FasthogConfig(BaseSettings):
    """Main configuration for fasthog.

    Empty ``extensions`` means "use the defaults"; ``exclude_dirs`` lists
    directory names skipped in addition to the defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="FASTHOG_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    directory: Optional[Path] = Field(default=None, description="Directory to scan")
    extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="File extensions to scan (empty = defaults)",
    )
    exclude_dirs: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Extra directory names to skip",
    )
    patterns: PatternFileSettings = Field(
        default_factory=PatternFileSettings,
        description="Pattern file overrides",
    )
    output: OutputSettings = Field(default_factory=OutputSettings, description="Output settings")
    concurrency: Optional[int] = Field(
        default=None,
        ge=1,
        le=1024,
        description="Maximum number of files scanned at once (default: CPU count)",
    )
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")

    @field_validator("extensions", mode="before")
    @classmethod
    def parse_extensions(cls, v: Any) -> list[str]:
        """Parse extensions from a string or list."""
        return normalize_extensions(v)

    @field_validator("exclude_dirs", mode="before")
    @classmethod
    def parse_exclude_dirs(cls, v: Any) -> list[str]:
        """Parse excluded directory names from a string or list."""
        return _split_names(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> LogLevel:
        """Validate and normalize log level."""
        if v is None:
            return LogLevel.WARNING
        if isinstance(v, LogLevel):
            return v
        v = str(v).lower()
        try:
            return LogLevel(v)
        except ValueError:
            valid = ", ".join(level.value for level in LogLevel)
            raise ValueError(f"log_level must be one of: {valid}")
