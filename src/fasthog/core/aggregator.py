"""Thread-safe collection of scan matches."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from fasthog.core.models import Match, ScanResult


class ResultAggregator:
    """Collects matches from concurrent workers.

    A single lock guards both the match list and the per-file counts, so the
    two always agree: for every file, its count equals the number of
    recorded matches bearing that file. Matches are rare compared with the
    number of lines scanned, so one lock is not a bottleneck.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._matches: list[Match] = []
        self._file_counts: dict[str, int] = {}
        self._finalized = False

    def record(self, match: Match) -> None:
        """Add a match and bump the count for its file."""
        with self._lock:
            if self._finalized:
                raise RuntimeError("Cannot record matches after the result was finalized")
            self._matches.append(match)
            self._file_counts[match.file] = self._file_counts.get(match.file, 0) + 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._matches)

    def finalize(self, candidates: Iterable[str]) -> ScanResult:
        """Freeze the aggregator and return the scan result.

        Must only be called once every worker has finished.
        """
        with self._lock:
            self._finalized = True
            return ScanResult(
                matches=list(self._matches),
                file_counts=dict(self._file_counts),
                candidate_files=list(candidates),
            )
