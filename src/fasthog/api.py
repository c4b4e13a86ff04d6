"""High-level API functions for fasthog.

This module provides a single call that validates the target, loads the
pattern files and runs the threaded scan, making it easy to use fasthog
as a library.

Example usage::

    from fasthog.api import scan

    result = scan("/path/to/code", extensions=[".py", ".env"])
    for match in result.sorted_matches():
        print(f"{match.file}:{match.line} {match.match_text}")
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from fasthog.core.models import MatchCallback, ProgressCallback, ScanRequest, ScanResult
from fasthog.core.patterns import PatternFiles, load_pattern_set
from fasthog.core.scanner import Scanner, validate_directory
from fasthog.core.walker import DEFAULT_EXTENSIONS, merge_exclude_dirs


def scan(
    path: str | Path,
    *,
    extensions: Iterable[str] | None = None,
    exclude_dirs: Iterable[str] | None = None,
    pattern_files: PatternFiles | None = None,
    pattern_base_dir: Path | None = None,
    concurrency: int | None = None,
    on_progress: ProgressCallback | None = None,
    on_match: MatchCallback | None = None,
) -> ScanResult:
    """Scan a directory tree for secrets.

    The directory is validated before any pattern file is read, so a bad
    path is reported even when the pattern files are broken too.

    Args:
        path: Directory to scan.
        extensions: Accepted file suffixes. Defaults to the built-in list.
        exclude_dirs: Directory names to skip in addition to the defaults.
        pattern_files: Optional overrides for the built-in pattern files.
        pattern_base_dir: Directory relative override paths are resolved
            against. Defaults to the current directory.
        concurrency: Maximum number of files scanned at once. Defaults to
            the number of CPUs.
        on_progress: Called as ``on_progress(path, index, total)`` before
            each file is scanned, in order, from the calling thread.
        on_match: Called as ``on_match(path, line_no, line, matched)`` for
            every match, from worker threads.

    Returns:
        ScanResult with every match and the per-file counts.

    Raises:
        ConfigError: If ``path`` is missing or is not a directory.
        PatternSourceError: If a pattern file cannot be read.
        PatternSyntaxError: If the patterns do not compile.
        FileAccessError: If a candidate file cannot be read.
    """
    root = validate_directory(path)
    patterns = load_pattern_set(pattern_files, base_dir=pattern_base_dir)

    request = ScanRequest(
        root_directory=root,
        patterns=patterns,
        extensions=list(extensions) if extensions is not None else list(DEFAULT_EXTENSIONS),
        exclude_dirs=merge_exclude_dirs(exclude_dirs),
        concurrency=concurrency,
        on_progress=on_progress,
        on_match=on_match,
    )
    return Scanner(request).scan()
