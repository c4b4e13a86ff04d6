"""Custom exception hierarchy for fasthog.

All exceptions inherit from FasthogError so callers can catch every
fasthog failure with a single except clause. The classes map onto the
phases of a scan: configuration and root validation, pattern loading,
directory walking, and per-file scanning.
"""

from __future__ import annotations


class FasthogError(Exception):
    """Base exception for all fasthog errors.

    Attributes:
        message: Human-readable error message.
        context: Optional dictionary of additional context about the error.
    """

    def __init__(self, message: str, context: dict | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including context if present."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(FasthogError):
    """Exception raised for configuration errors.

    Raised for invalid configuration files or options, and when the scan
    root is missing or is not a directory. Always raised before any
    pattern is compiled or any file is touched.

    Example:
        >>> raise ConfigError("directory does not exist: /nope", config_key="directory")
    """

    def __init__(self, message: str, config_key: str | None = None, context: dict | None = None):
        ctx = context or {}
        if config_key:
            ctx["config_key"] = config_key
        super().__init__(message, ctx)
        self.config_key = config_key


class PatternSourceError(FasthogError):
    """Exception raised when a pattern source cannot be read.

    Example:
        >>> raise PatternSourceError("unable to load regexes", source="fast_patterns.regex")
    """

    def __init__(self, message: str, source: str | None = None, context: dict | None = None):
        ctx = context or {}
        if source:
            ctx["source"] = source
        super().__init__(message, ctx)
        self.source = source


class PatternSyntaxError(FasthogError):
    """Exception raised when a composite pattern fails to compile.

    The ``source`` attribute names the stage or the files that were
    combined, since a composite expression has no single origin.
    """

    def __init__(self, message: str, source: str | None = None, context: dict | None = None):
        ctx = context or {}
        if source:
            ctx["source"] = source
        super().__init__(message, ctx)
        self.source = source


class ScanError(FasthogError):
    """Exception raised when a scan operation fails.

    Example:
        >>> raise ScanError("Scan failed", path="src/app.py")
    """

    def __init__(self, message: str, path: str | None = None, context: dict | None = None):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message, ctx)
        self.path = path


class FileAccessError(ScanError):
    """Exception raised when an enumerated candidate cannot be opened or read.

    This is fatal for the whole scan: no partial result is produced.
    """


class WalkEntryError(ScanError):
    """A single directory entry could not be inspected during the walk.

    The walker logs and skips these; they never escape the walker.
    """


class OutputError(FasthogError):
    """Exception raised when output generation or writing fails.

    Example:
        >>> raise OutputError("Failed to write output file", output_path="/readonly/out.txt")
    """

    def __init__(self, message: str, output_path: str | None = None, context: dict | None = None):
        ctx = context or {}
        if output_path:
            ctx["output_path"] = output_path
        super().__init__(message, ctx)
        self.output_path = output_path
