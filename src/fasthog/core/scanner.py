"""Core scanner module for fasthog.

The Scanner enumerates candidate files, then scans them on a bounded pool
of worker threads. Each line goes through three stages:

1. a cheap, broad *fast* screen,
2. the expensive *strict* extraction, only for lines that passed (1),
3. an *exclude* veto on the full line, only for lines that passed (2).

Lines of eight bytes or fewer (UTF-8 encoded) never reach any stage.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from fasthog.core.aggregator import ResultAggregator
from fasthog.core.exceptions import ConfigError, FileAccessError
from fasthog.core.models import Match, ScanRequest, ScanResult
from fasthog.core.patterns import PatternSet
from fasthog.core.walker import DirectoryWalker

logger = logging.getLogger(__name__)

# Lines this short (in UTF-8 bytes) cannot hold any secret worth reporting
SHORT_LINE_LIMIT = 8


class ScanState(str, Enum):
    """Lifecycle of a single scan."""

    IDLE = "idle"
    WALKING = "walking"
    SCANNING = "scanning"
    AGGREGATED = "aggregated"
    DONE = "done"
    FAILED = "failed"


def default_concurrency() -> int:
    """Number of files scanned at once when no limit is given."""
    return os.cpu_count() or 1


def validate_directory(directory: Path | str) -> Path:
    """Ensure ``directory`` exists and is a directory.

    Raises:
        ConfigError: If the path is missing, inaccessible or not a directory.
    """
    path = Path(directory)
    try:
        is_dir = path.is_dir()
        exists = is_dir or path.exists()
    except OSError as e:
        raise ConfigError(f"cannot access directory: {e}", config_key="directory") from e

    if not exists:
        raise ConfigError(f"directory does not exist: {directory}", config_key="directory")
    if not is_dir:
        raise ConfigError(f"path is not a directory: {directory}", config_key="directory")
    return path


class LineScanner:
    """Applies the three-stage pattern pipeline to lines and files.

    Holds only read-only compiled patterns, so one instance can be shared
    by every worker thread.
    """

    def __init__(self, patterns: PatternSet):
        self._fast = patterns.fast
        self._strict = patterns.strict
        self._exclude = patterns.exclude

    def match_line(self, line: str) -> Optional[str]:
        """Return the secret found on ``line``, or None.

        Lines of at most ``SHORT_LINE_LIMIT`` bytes once UTF-8 encoded are
        skipped. The strict and exclude matchers only run when every
        earlier stage has passed.
        """
        if len(line.encode("utf-8", errors="surrogatepass")) <= SHORT_LINE_LIMIT:
            return None
        return self._run_stages(line)

    def _run_stages(self, line: str) -> Optional[str]:
        if self._fast.search(line) is None:
            return None

        strict = self._strict.search(line)
        if strict is None or not strict.group(0):
            return None

        if self._exclude.search(line) is not None:
            return None
        return strict.group(0)

    def scan_file(self, root: Path, path: str, emit: Callable[[Match], None]) -> int:
        """Scan one candidate file, calling ``emit`` for every match.

        Args:
            root: The scan root.
            path: Candidate path relative to ``root``.
            emit: Receives each Match as soon as it is found.

        Returns:
            Number of matches found in the file.

        Raises:
            FileAccessError: If the file cannot be opened, read or closed.
        """
        found = 0
        try:
            # Binary mode so that only \n splits lines
            with open(root / path, "rb") as handle:
                for line_no, raw in enumerate(handle, start=1):
                    line = raw.rstrip(b"\n")
                    if line.endswith(b"\r"):
                        line = line[:-1]
                    if len(line) <= SHORT_LINE_LIMIT:
                        continue
                    text = line.decode("utf-8", errors="replace")

                    secret = self._run_stages(text)
                    if secret is None:
                        continue

                    found += 1
                    emit(
                        Match(
                            file=path,
                            line=line_no,
                            line_snippet=text.strip(),
                            match_text=secret,
                        )
                    )
        except OSError as e:
            raise FileAccessError(f"unable to read file {path}: {e}", path=path) from e
        return found


class Scanner:
    """Scans a directory tree for secrets using a bounded thread pool.

    Files are dispatched in candidate order. Before each file is handed to
    a worker, ``on_progress(path, index, total)`` runs on the dispatching
    thread, so progress indices arrive in order exactly once per file no
    matter which worker finishes first. At most ``concurrency`` files are
    scanned at the same time; dispatch blocks until a slot frees up.

    A failure in any worker stops dispatch of further files and, once every
    in-flight worker has finished, is re-raised from :meth:`scan`. No
    partial result is returned in that case.

    Example:
        >>> request = ScanRequest(root_directory=Path("repo"), patterns=load_pattern_set())
        >>> result = Scanner(request).scan()
        >>> result.total_matches
        3
    """

    def __init__(self, request: ScanRequest):
        self.request = request
        self.concurrency = request.concurrency or default_concurrency()
        self.state = ScanState.IDLE
        self._line_scanner = LineScanner(request.patterns)

    def scan(self) -> ScanResult:
        """Run the scan and return the aggregated result.

        Raises:
            ConfigError: If the root directory is invalid.
            FileAccessError: If a candidate file cannot be read.
        """
        started_at = datetime.now(timezone.utc)
        start_time = time.monotonic()
        root = self.request.root_directory

        try:
            validate_directory(root)

            self.state = ScanState.WALKING
            walker = DirectoryWalker(root, self.request.extensions, self.request.exclude_dirs)
            candidates = walker.walk()

            self.state = ScanState.SCANNING
            aggregator = ResultAggregator()
            self._dispatch(root, candidates, aggregator)
        except Exception:
            self.state = ScanState.FAILED
            raise

        elapsed = time.monotonic() - start_time
        result = aggregator.finalize(candidates).model_copy(
            update={
                "directory": str(root),
                "extensions": list(self.request.extensions),
                "start_time": started_at,
                "duration_ms": int(elapsed * 1000),
            }
        )
        self.state = ScanState.AGGREGATED

        logger.info(
            f"Scan complete in {elapsed:.3f}s: {result.total_matches} matches "
            f"across {result.files_with_matches} of {len(candidates)} files"
        )
        self.state = ScanState.DONE
        return result

    def _dispatch(self, root: Path, candidates: list[str], aggregator: ResultAggregator) -> None:
        """Scan all candidates with at most ``self.concurrency`` in flight."""
        total = len(candidates)
        on_progress = self.request.on_progress
        on_match = self.request.on_match

        slots = threading.BoundedSemaphore(self.concurrency)
        failed = threading.Event()
        futures: list[Future[int]] = []

        def _emit(match: Match) -> None:
            aggregator.record(match)
            if on_match is not None:
                on_match(match.file, match.line, match.line_snippet, match.match_text)

        def _worker(path: str) -> int:
            try:
                return self._line_scanner.scan_file(root, path, _emit)
            except BaseException:
                failed.set()
                raise
            finally:
                slots.release()

        with ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="fasthog") as executor:
            for index, path in enumerate(candidates):
                slots.acquire()
                if failed.is_set():
                    slots.release()
                    logger.debug(f"Stopping dispatch after a failure; {total - index} file(s) not scanned")
                    break
                if on_progress is not None:
                    on_progress(path, index, total)
                futures.append(executor.submit(_worker, path))

        # Leaving the executor waits for every worker; surface the first failure
        for future in futures:
            future.result()


def scan_directory(request: ScanRequest) -> ScanResult:
    """Scan ``request.root_directory``; shorthand for ``Scanner(request).scan()``."""
    return Scanner(request).scan()
