"""Pytest fixtures for fasthog tests.

This module provides reusable fixtures for testing fasthog components,
including temporary directory trees with planted secrets, the built-in
pattern set, and helpers for building scan requests.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Generator

import pytest


# Configure path before any fasthog imports so the tests run against src/
# without requiring an installed copy.
def _configure_path() -> None:
    """Configure sys.path to prioritize the src directory."""
    src_path = str(Path(__file__).parent.parent / "src")
    if src_path in sys.path:
        sys.path.remove(src_path)
    sys.path.insert(0, src_path)


_configure_path()

# Now import from the package
from fasthog.core.models import ScanRequest
from fasthog.core.patterns import PatternSet, load_pattern_set
from fasthog.core.walker import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS


@pytest.fixture(scope="session")
def pattern_set() -> PatternSet:
    """Return the compiled built-in pattern set.

    Compiled once per session; PatternSet is immutable.
    """
    return load_pattern_set()


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a helper that writes ``{relative_path: content}`` under tmp_path.

    Parent directories are created as needed and the root is returned.
    """

    def _write(files: dict[str, str]) -> Path:
        for rel_path, content in files.items():
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return tmp_path

    return _write


@pytest.fixture
def make_request(pattern_set: PatternSet) -> Callable[..., ScanRequest]:
    """Return a factory for ScanRequest objects using the built-in patterns."""

    def _make(root: Path, **kwargs: object) -> ScanRequest:
        kwargs.setdefault("extensions", list(DEFAULT_EXTENSIONS))
        kwargs.setdefault("exclude_dirs", list(DEFAULT_EXCLUDE_DIRS))
        return ScanRequest(root_directory=root, patterns=pattern_set, **kwargs)

    return _make


@pytest.fixture
def temp_directory(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary directory with sample files containing fake secrets.

    Creates a directory structure with:
    - config.py: Python settings with a hardcoded password (line 2)
    - app.env: A token assignment (line 1)
    - clean.txt: File with no secrets
    - docs/readme.md: Documentation mentioning passwords without values
    - node_modules/pkg/index.js: Secret inside a default-excluded directory
    - subdir/nested.yml: Nested YAML with an API key (line 2)

    Yields:
        Path to the temporary directory
    """
    (tmp_path / "config.py").write_text(
        '"""Settings."""\n'
        'PASSWORD = "hunter2hunter2"\n'
        "DEBUG = True\n"
    )
    (tmp_path / "app.env").write_text("token: xyz789abc\n")
    (tmp_path / "clean.txt").write_text("Nothing sensitive here.\nJust words.\n")

    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "readme.md").write_text("Remember to rotate your password regularly.\n")

    vendored = tmp_path / "node_modules" / "pkg"
    vendored.mkdir(parents=True)
    (vendored / "index.js").write_text('const password = "supersecretvalue";\n')

    subdir = tmp_path / "subdir"
    subdir.mkdir()
    (subdir / "nested.yml").write_text("service:\n  api_key: sk_test_abcdef\n")

    yield tmp_path
