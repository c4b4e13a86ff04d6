"""Tests for the threaded directory scanner.

This module tests fasthog.core.scanner.Scanner end to end: root validation,
the scan scenarios for excluded directories and single secrets, progress
ordering, the concurrency bound, fatal read failures and the consistency
of the aggregated result.
"""

from __future__ import annotations

import os
import threading
import time
from collections import Counter
from pathlib import Path
from typing import Callable

import pytest

from fasthog.core.exceptions import ConfigError, FileAccessError
from fasthog.core.models import ScanRequest
from fasthog.core.scanner import (
    Scanner,
    ScanState,
    default_concurrency,
    scan_directory,
    validate_directory,
)

MakeRequest = Callable[..., ScanRequest]
WriteTree = Callable[[dict[str, str]], Path]


class TestValidateDirectory:
    """Tests for scan root validation."""

    def test_accepts_directory(self, tmp_path: Path) -> None:
        """Test that an existing directory is returned as a Path."""
        assert validate_directory(str(tmp_path)) == tmp_path

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that a missing root raises ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            validate_directory(tmp_path / "nope")
        assert exc_info.value.message.startswith("directory does not exist")
        assert exc_info.value.config_key == "directory"

    def test_file_is_not_a_directory(self, tmp_path: Path) -> None:
        """Test that a regular file is rejected."""
        path = tmp_path / "file.txt"
        path.write_text("x")
        with pytest.raises(ConfigError) as exc_info:
            validate_directory(path)
        assert exc_info.value.message.startswith("path is not a directory")


class TestScanScenarios:
    """End-to-end scans over small trees."""

    def test_sample_tree(self, temp_directory: Path, make_request: MakeRequest) -> None:
        """Test scanning the shared sample tree."""
        result = Scanner(make_request(temp_directory)).scan()

        assert result.candidate_files == [
            "app.env",
            "clean.txt",
            "config.py",
            "docs/readme.md",
            "subdir/nested.yml",
        ]
        assert result.total_matches == 3
        assert result.files_with_matches == 3
        assert result.file_counts == {"app.env": 1, "config.py": 1, "subdir/nested.yml": 1}

        by_file = {m.file: m for m in result.matches}
        assert by_file["config.py"].line == 2
        assert by_file["config.py"].match_text == 'PASSWORD = "hunter2hunter2"'
        assert by_file["subdir/nested.yml"].line_snippet == "api_key: sk_test_abcdef"

    def test_secret_under_excluded_directory(
        self, write_tree: WriteTree, make_request: MakeRequest
    ) -> None:
        """Test that a secret inside a nested .git directory is never reported."""
        root = write_tree({"a/.git/secret.py": 'PASSWORD="x"\n'})
        result = Scanner(make_request(root, extensions=[".py"], exclude_dirs=[".git"])).scan()
        assert result.total_matches == 0
        assert result.candidate_files == []

    def test_single_yaml_secret(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test a YAML file with one password on its first line."""
        root = write_tree({"cfg.yml": 'password: "mySecretPassword123"\n'})
        result = Scanner(make_request(root)).scan()

        assert result.total_matches == 1
        match = result.matches[0]
        assert match.file == "cfg.yml"
        assert match.line == 1
        assert "password" in match.match_text

    def test_secret_deep_in_large_file(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that the only secret in a 1000-line file is found on line 501."""
        lines = ["# c"] * 1000
        lines[500] = 'PASSWORD="secretvalue123"'
        root = write_tree({"big.py": "\n".join(lines) + "\n"})

        result = Scanner(make_request(root)).scan()
        assert [(m.file, m.line) for m in result.matches] == [("big.py", 501)]

    def test_empty_tree(self, tmp_path: Path, make_request: MakeRequest) -> None:
        """Test that a tree without candidates completes with an empty result."""
        result = Scanner(make_request(tmp_path)).scan()
        assert result.total_matches == 0
        assert result.candidate_files == []
        assert result.top_files() == []

    def test_scan_directory_shorthand(self, temp_directory: Path, make_request: MakeRequest) -> None:
        """Test the module-level convenience function."""
        assert scan_directory(make_request(temp_directory)).total_matches == 3

    def test_result_metadata(self, temp_directory: Path, make_request: MakeRequest) -> None:
        """Test that the result records what was scanned and when."""
        result = Scanner(make_request(temp_directory, extensions=[".py"])).scan()
        assert result.directory == str(temp_directory)
        assert result.extensions == [".py"]
        assert result.start_time is not None
        assert result.duration_ms >= 0


class TestScanInvariants:
    """Properties that hold for every scan."""

    def _many_files(self, write_tree: WriteTree, count: int = 30) -> Path:
        files = {}
        for i in range(count):
            body = [f'secret_{j} = "value{i:03d}{j:03d}"' for j in range(i % 4)]
            body.append("nothing to see here")
            files[f"dir{i % 3}/file{i:02d}.py"] = "\n".join(body) + "\n"
        return write_tree(files)

    def test_counts_match_records(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that per-file counts agree with the recorded matches."""
        root = self._many_files(write_tree)
        result = Scanner(make_request(root, concurrency=4)).scan()

        assert sum(result.file_counts.values()) == result.total_matches
        assert Counter(m.file for m in result.matches) == Counter(result.file_counts)
        assert result.total_matches == sum(i % 4 for i in range(30))

    def test_rerun_yields_same_match_set(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that scanning unchanged input twice finds the same matches."""
        root = self._many_files(write_tree)
        first = Scanner(make_request(root, concurrency=8)).scan()
        second = Scanner(make_request(root, concurrency=3)).scan()
        assert set(first.matches) == set(second.matches)
        assert len(first.matches) == len(second.matches)

    def test_state_transitions_to_done(self, temp_directory: Path, make_request: MakeRequest) -> None:
        """Test that a successful scan ends in the DONE state."""
        scanner = Scanner(make_request(temp_directory))
        assert scanner.state == ScanState.IDLE
        scanner.scan()
        assert scanner.state == ScanState.DONE

    def test_invalid_root_fails_before_walking(self, tmp_path: Path, make_request: MakeRequest) -> None:
        """Test that a missing root fails the scan with ConfigError."""
        scanner = Scanner(make_request(tmp_path / "missing"))
        with pytest.raises(ConfigError):
            scanner.scan()
        assert scanner.state == ScanState.FAILED

    def test_default_concurrency_is_cpu_count(self, tmp_path: Path, make_request: MakeRequest) -> None:
        """Test that the worker limit defaults to the number of CPUs."""
        assert default_concurrency() == (os.cpu_count() or 1)
        assert Scanner(make_request(tmp_path)).concurrency == default_concurrency()


class TestCallbacks:
    """Tests for progress and match callbacks."""

    def test_progress_indices_in_order(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that progress fires once per candidate with indices 0..N-1 in order."""
        root = write_tree({f"f{i:02d}.py": f'token = "abcdef{i:02d}"\n' for i in range(40)})
        calls: list[tuple[str, int, int]] = []

        def on_progress(path: str, index: int, total: int) -> None:
            calls.append((path, index, total))

        result = Scanner(make_request(root, concurrency=4, on_progress=on_progress)).scan()

        assert [index for _, index, _ in calls] == list(range(40))
        assert {total for _, _, total in calls} == {40}
        assert [path for path, _, _ in calls] == result.candidate_files

    def test_progress_runs_on_calling_thread(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that progress callbacks are delivered from the dispatching thread."""
        root = write_tree({f"f{i}.py": "x = 1\n" for i in range(5)})
        threads: set[int] = set()

        def on_progress(path: str, index: int, total: int) -> None:
            threads.add(threading.get_ident())

        Scanner(make_request(root, concurrency=3, on_progress=on_progress)).scan()
        assert threads == {threading.get_ident()}

    def test_match_callback_receives_every_match(
        self, temp_directory: Path, make_request: MakeRequest
    ) -> None:
        """Test that on_match is called once per recorded match with its fields."""
        seen: list[tuple[str, int, str, str]] = []
        lock = threading.Lock()

        def on_match(path: str, line_no: int, line: str, matched: str) -> None:
            with lock:
                seen.append((path, line_no, line, matched))

        result = Scanner(make_request(temp_directory, on_match=on_match)).scan()
        expected = {(m.file, m.line, m.line_snippet, m.match_text) for m in result.matches}
        assert set(seen) == expected
        assert len(seen) == result.total_matches

    @pytest.mark.parametrize("limit", [1, 2, 4])
    def test_concurrency_bound(self, write_tree: WriteTree, make_request: MakeRequest, limit: int) -> None:
        """Test that no more than the configured number of files are scanned at once."""
        root = write_tree({f"f{i:02d}.py": f'token = "abcdef{i:02d}"\n' for i in range(16)})
        lock = threading.Lock()
        active = 0
        peak = 0

        def on_match(path: str, line_no: int, line: str, matched: str) -> None:
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.01)
            with lock:
                active -= 1

        result = Scanner(make_request(root, concurrency=limit, on_match=on_match)).scan()
        assert result.total_matches == 16
        assert 1 <= peak <= limit


class TestFileAccessFailures:
    """Tests for fatal read failures during scanning."""

    def test_unreadable_candidate_fails_scan(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that a candidate vanishing before its scan aborts with FileAccessError."""
        root = write_tree({f"f{i}.py": 'token = "abcdef12"\n' for i in range(5)})

        def on_progress(path: str, index: int, total: int) -> None:
            if index == 2:
                (root / path).unlink()

        scanner = Scanner(make_request(root, concurrency=2, on_progress=on_progress))
        with pytest.raises(FileAccessError) as exc_info:
            scanner.scan()
        assert exc_info.value.path == "f2.py"
        assert scanner.state == ScanState.FAILED

    def test_dispatch_stops_after_failure(self, write_tree: WriteTree, make_request: MakeRequest) -> None:
        """Test that no further files are dispatched once a worker has failed."""
        root = write_tree({f"f{i}.py": "x = 1\n" for i in range(10)})
        indices: list[int] = []

        def on_progress(path: str, index: int, total: int) -> None:
            indices.append(index)
            if index == 0:
                (root / path).unlink()

        with pytest.raises(FileAccessError):
            Scanner(make_request(root, concurrency=1, on_progress=on_progress)).scan()
        assert indices == [0]
