"""Pattern loading and compilation for fasthog.

Every pipeline stage (exclude, fast, strict) is backed by a single composite
regular expression built from one or more pattern files. Each non-comment
line becomes one alternative of that expression, so a large pattern set is
still evaluated with a single ``search`` call per line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Callable

from fasthog.core.exceptions import PatternSourceError, PatternSyntaxError

logger = logging.getLogger(__name__)

# Package holding the built-in .regex files
BUILTIN_PACKAGE = "fasthog.patterns"

DIRECT_MATCHES = "direct_matches.regex"
FAST_PATTERNS = "fast_patterns.regex"
STRICT_PATTERNS = "strict_patterns.regex"
EXCLUDE_PATTERNS = "exclude_patterns.regex"

# Compiles successfully and can never match
NEVER_MATCH = "(?!)"

# Pattern files were originally authored for a shell script, so they may carry
# shell escaping: \\ stands for \ and \" stands for ".
_SHELL_ESCAPES = re.compile(r'\\(\\|")')

# Leading inline flags such as (?i) or (?i)(?s), rewritten to apply to their line only
_LEADING_FLAGS = re.compile(r"^((?:\(\?[aiLmsux]+\))+)")


@dataclass(frozen=True)
class PatternSource:
    """A named, fully-readable source of raw pattern lines.

    The compiler only ever calls :meth:`read`; where the bytes come from
    (a package resource, a file on disk, an in-memory buffer) is hidden
    behind the loader.

    Example:
        >>> source = PatternSource.from_bytes("inline", b"AKIA[0-9A-Z]{16}\\n")
        >>> source.read()
        b'AKIA[0-9A-Z]{16}\\n'
    """

    name: str
    loader: Callable[[], bytes]

    @classmethod
    def from_path(cls, path: Path | str) -> "PatternSource":
        """Create a source backed by a file on disk."""
        file_path = Path(path)
        return cls(name=str(file_path), loader=file_path.read_bytes)

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "PatternSource":
        """Create a source backed by an in-memory buffer."""
        return cls(name=name, loader=lambda: data)

    @classmethod
    def from_resource(cls, name: str, package: str = BUILTIN_PACKAGE) -> "PatternSource":
        """Create a source backed by a pattern file shipped inside a package."""

        def _load() -> bytes:
            return resources.files(package).joinpath(name).read_bytes()

        return cls(name=name, loader=_load)

    def read(self) -> bytes:
        """Read the full contents of the source.

        Raises:
            PatternSourceError: If the source cannot be read.
        """
        try:
            return self.loader()
        except (OSError, ModuleNotFoundError) as e:
            raise PatternSourceError(
                f"unable to load regexes from {self.name}: {e}",
                source=self.name,
            ) from e


def pattern_lines(data: bytes) -> list[str]:
    """Return the usable pattern lines from raw source bytes.

    Lines that are empty or start with ``#`` are dropped. A trailing carriage
    return is removed so files with Windows line endings behave the same.
    """
    lines: list[str] = []
    for raw in data.split(b"\n"):
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        if not raw or raw.startswith(b"#"):
            continue
        lines.append(raw.decode("utf-8"))
    return lines


def normalize_escapes(expression: str) -> str:
    """Undo shell escaping: ``\\\\`` becomes ``\\`` and ``\\"`` becomes ``"``."""
    return _SHELL_ESCAPES.sub(r"\1", expression)


def wrap_line(line: str) -> str:
    """Wrap one pattern line in its own capturing group.

    Leading inline flags become a scoped group so they keep applying to this
    line only once it is joined with the others.

    Example:
        >>> wrap_line("(?i)password")
        '((?i:password))'
    """
    flags = _LEADING_FLAGS.match(line)
    if flags is None:
        return f"({line})"
    letters = "".join(dict.fromkeys(re.findall(r"[aiLmsux]", flags.group(1))))
    return f"((?{letters}:{line[flags.end():]}))"


def build_expression(*sources: PatternSource) -> str:
    """Combine all lines from ``sources`` into one alternation.

    Each line is wrapped in its own capturing group. When the sources hold
    no usable lines the result is an expression that never matches.
    """
    groups: list[str] = []
    for source in sources:
        try:
            lines = pattern_lines(source.read())
        except UnicodeDecodeError as e:
            raise PatternSourceError(
                f"pattern file {source.name} is not valid UTF-8: {e}",
                source=source.name,
            ) from e
        groups.extend(wrap_line(line) for line in lines)

    if not groups:
        return NEVER_MATCH

    return normalize_escapes("|".join(groups))


def compile_patterns(*sources: PatternSource) -> re.Pattern[str]:
    """Load ``sources`` and compile them into a single composite matcher.

    Either every source contributes to one valid matcher or an exception
    is raised; a partially built matcher is never returned.

    Raises:
        PatternSourceError: If any source cannot be read.
        PatternSyntaxError: If the combined expression does not compile.
    """
    expression = build_expression(*sources)
    names = ", ".join(source.name for source in sources)
    try:
        compiled = re.compile(expression)
    except re.error as e:
        raise PatternSyntaxError(
            f"failed to compile regex patterns: {e}",
            source=names,
        ) from e

    logger.debug(f"Compiled {compiled.groups} pattern group(s) from {names or 'no sources'}")
    return compiled


@dataclass(frozen=True)
class PatternSet:
    """The three compiled matchers used by the line pipeline.

    Attributes:
        exclude: Veto matcher, applied to the full line.
        fast: Cheap, broad admission test.
        strict: Precise matcher whose first match is reported.
    """

    exclude: re.Pattern[str]
    fast: re.Pattern[str]
    strict: re.Pattern[str]


@dataclass(frozen=True)
class PatternFiles:
    """Optional filesystem overrides for the built-in pattern files.

    An empty field means "use the built-in file". Supplying either
    ``direct`` or ``strict`` replaces the built-in strict stage entirely
    with the given files.
    """

    direct: str | None = None
    fast: str | None = None
    strict: str | None = None
    exclude: str | None = None


def _stage(stage: str, *sources: PatternSource) -> re.Pattern[str]:
    """Compile one stage, prefixing any error with the stage name."""
    try:
        return compile_patterns(*sources)
    except PatternSourceError as e:
        raise PatternSourceError(f"failed to load {stage} patterns: {e.message}", source=e.source) from e
    except PatternSyntaxError as e:
        raise PatternSyntaxError(f"failed to load {stage} patterns: {e.message}", source=e.source) from e


def load_pattern_set(
    pattern_files: PatternFiles | None = None,
    base_dir: Path | None = None,
) -> PatternSet:
    """Build the exclude, fast and strict matchers.

    Built-in pattern files are used unless ``pattern_files`` names an
    override for a stage. Relative override paths are resolved against
    ``base_dir`` (the current directory by default).

    Raises:
        PatternSourceError: If a pattern file cannot be read.
        PatternSyntaxError: If a stage does not compile.
    """
    files = pattern_files or PatternFiles()
    base = base_dir or Path.cwd()

    def _override(path: str) -> PatternSource:
        return PatternSource.from_path(base / path)

    if files.exclude:
        exclude = _stage("exclude", _override(files.exclude))
    else:
        exclude = _stage("exclude", PatternSource.from_resource(EXCLUDE_PATTERNS))

    if files.fast:
        fast = _stage("fast", _override(files.fast))
    else:
        fast = _stage(
            "fast",
            PatternSource.from_resource(DIRECT_MATCHES),
            PatternSource.from_resource(FAST_PATTERNS),
        )

    if files.direct or files.strict:
        overrides = [_override(path) for path in (files.direct, files.strict) if path]
        strict = _stage("strict", *overrides)
    else:
        strict = _stage(
            "strict",
            PatternSource.from_resource(DIRECT_MATCHES),
            PatternSource.from_resource(STRICT_PATTERNS),
        )

    return PatternSet(exclude=exclude, fast=fast, strict=strict)
