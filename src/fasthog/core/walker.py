"""Directory traversal for fasthog.

Collects the candidate files for a scan: regular files under the root
whose path ends in an accepted extension and that do not live under an
excluded directory at any depth.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from fasthog.core.exceptions import WalkEntryError

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = (
    ".git",
    ".github",
    "node_modules",
    "vendor",
    ".idea",
    ".vscode",
)

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    ".js",
    ".json",
    ".py",
    ".cs",
    ".go",
    ".java",
    ".sh",
    ".tf",
    ".yml",
    ".yaml",
    ".env",
    "env",
    ".ENV",
    "ENV",
    ".key",
    ".backup",
    ".tfstate",
    ".ts",
    ".txt",
    ".md",
    ".properties",
)


def has_extension(path: str, extensions: Iterable[str]) -> bool:
    """Check whether the lower-cased path ends with any accepted extension.

    Example:
        >>> has_extension("src/Settings.PY", [".py"])
        True
        >>> has_extension("notes.txt", [".py", ".js"])
        False
    """
    lowered = path.lower()
    return any(lowered.endswith(ext) for ext in extensions)


def merge_exclude_dirs(extra: Iterable[str] | None = None) -> list[str]:
    """Return the default excluded directory names plus ``extra``.

    Order is preserved and duplicates are dropped.
    """
    merged: list[str] = []
    for name in (*DEFAULT_EXCLUDE_DIRS, *(extra or ())):
        if name not in merged:
            merged.append(name)
    return merged


class DirectoryWalker:
    """Enumerates candidate files below a root directory.

    Entries inside each directory are visited in sorted name order, so two
    walks of an unchanged tree produce the same candidate list. Symlinks
    are neither followed nor yielded.

    Example:
        >>> walker = DirectoryWalker(Path("repo"), [".py"], [".git"])
        >>> candidates = walker.walk()
    """

    def __init__(
        self,
        root: Path,
        extensions: Iterable[str],
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
    ):
        self.root = Path(root)
        self.extensions = tuple(extensions)
        self.exclude_dirs = frozenset(exclude_dirs)
        self.errors: list[WalkEntryError] = []

    def _record_error(self, rel_path: str, error: OSError) -> None:
        """Log an inaccessible entry and move on."""
        walk_error = WalkEntryError(f"Cannot access entry: {error}", path=rel_path or ".")
        logger.debug(str(walk_error))
        self.errors.append(walk_error)

    def _iter_dir(self, directory: Path, rel_parts: tuple[str, ...]) -> Iterator[str]:
        rel_dir = "/".join(rel_parts)
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            self._record_error(rel_dir, e)
            return

        for entry in entries:
            parts = (*rel_parts, entry.name)
            rel_path = "/".join(parts)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError as e:
                self._record_error(rel_path, e)
                continue

            if is_dir:
                if entry.name in self.exclude_dirs:
                    continue
                yield from self._iter_dir(Path(entry.path), parts)
            elif is_file and entry.name not in self.exclude_dirs and has_extension(rel_path, self.extensions):
                yield rel_path

    def iter_candidates(self) -> Iterator[str]:
        """Yield relative, ``/``-separated candidate paths lazily."""
        self.errors = []
        yield from self._iter_dir(self.root, ())

    def walk(self) -> list[str]:
        """Return the complete candidate list."""
        candidates = list(self.iter_candidates())
        if self.errors:
            logger.warning(f"Skipped {len(self.errors)} inaccessible entries under {self.root}")
        logger.info(f"Found {len(candidates)} candidate file(s) under {self.root}")
        return candidates


def walk_candidates(
    root: Path | str,
    extensions: Iterable[str],
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> list[str]:
    """Return candidate files under ``root``; see :class:`DirectoryWalker`."""
    return DirectoryWalker(Path(root), extensions, exclude_dirs).walk()
