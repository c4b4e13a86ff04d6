"""Core data models for fasthog.

This module defines the Pydantic models used throughout fasthog for
describing a scan request, the matches it produces, and the aggregated
result handed to the output layer.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from fasthog.core.patterns import PatternSet
from fasthog.core.walker import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS

# on_progress(path, index, total)
ProgressCallback = Callable[[str, int, int], None]
# on_match(path, line_no, line, matched_text)
MatchCallback = Callable[[str, int, str, str], None]


class Match(BaseModel):
    """A single secret detected on one line of one file.

    Captured at the moment of detection and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    file: str = Field(..., description="Path of the file, relative to the scan root")
    line: int = Field(..., ge=1, description="1-based line number")
    line_snippet: str = Field(..., description="The matching line with surrounding whitespace trimmed")
    match_text: str = Field(..., description="Substring extracted by the strict patterns")


class FileMatchCount(BaseModel):
    """Number of matches found in a single file."""

    file: str
    match_count: int = Field(..., ge=0)


class ScanResult(BaseModel):
    """The finalized outcome of a scan.

    ``matches`` is in detection order, which is not deterministic across
    files; use :meth:`sorted_matches` when presentation order matters.
    """

    directory: str = Field(default="", description="The scan root as given by the caller")
    extensions: list[str] = Field(default_factory=list, description="Extensions that were scanned for")
    start_time: Optional[datetime] = Field(default=None, description="When the scan started (UTC)")
    duration_ms: int = Field(default=0, ge=0, description="Wall-clock duration of the scan")
    matches: list[Match] = Field(default_factory=list, description="All matches, unordered across files")
    file_counts: dict[str, int] = Field(default_factory=dict, description="Match count per file")
    candidate_files: list[str] = Field(default_factory=list, description="Every file that was scanned")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_matches(self) -> int:
        """Total number of matches across all files."""
        return len(self.matches)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def files_with_matches(self) -> int:
        """Number of files with at least one match."""
        return sum(1 for count in self.file_counts.values() if count > 0)

    def sorted_matches(self) -> list[Match]:
        """Return matches ordered by file, then line number."""
        return sorted(self.matches, key=lambda m: (m.file, m.line, m.match_text))

    def top_files(self, limit: int | None = None) -> list[FileMatchCount]:
        """Return per-file counts, highest first, ties broken by path.

        Args:
            limit: Maximum number of entries to return. None returns all.
        """
        ordered = sorted(self.file_counts.items(), key=lambda item: (-item[1], item[0]))
        if limit is not None:
            ordered = ordered[:limit]
        return [FileMatchCount(file=file, match_count=count) for file, count in ordered]


class ScanRequest(BaseModel):
    """Everything the scanner needs for one scan.

    All values arrive already resolved; the scanner itself never reads
    configuration files or the environment.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    root_directory: Path = Field(..., description="Directory to scan")
    patterns: PatternSet = Field(..., description="Compiled exclude, fast and strict matchers")
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="Accepted file suffixes, e.g. '.py'",
    )
    exclude_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE_DIRS),
        description="Directory names skipped at any depth",
    )
    concurrency: Optional[int] = Field(
        default=None,
        ge=1,
        description="Maximum number of files scanned at once (defaults to CPU count)",
    )
    on_progress: Optional[ProgressCallback] = Field(
        default=None,
        description="Called on the dispatching thread before each file is scanned",
    )
    on_match: Optional[MatchCallback] = Field(
        default=None,
        description="Called from worker threads for every recorded match",
    )


class ScanSummary(BaseModel):
    """Aggregate counts reported in JSON output."""

    total_matches: int
    total_files_with_matches: int
    total_files_scanned: int


class JsonReport(BaseModel):
    """Top-level document written in JSON output mode."""

    directory: str
    extensions: list[str]
    start_time: datetime
    duration_ms: int
    matches: list[Match]
    summary: ScanSummary
    top_files: list[FileMatchCount]

    @classmethod
    def from_result(cls, result: ScanResult) -> "JsonReport":
        """Build the JSON document from a finalized scan result."""
        return cls(
            directory=result.directory,
            extensions=result.extensions,
            start_time=result.start_time or datetime.now(timezone.utc),
            duration_ms=result.duration_ms,
            matches=result.sorted_matches(),
            summary=ScanSummary(
                total_matches=result.total_matches,
                total_files_with_matches=result.files_with_matches,
                total_files_scanned=len(result.candidate_files),
            ),
            top_files=result.top_files(),
        )
