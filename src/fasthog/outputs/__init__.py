"""Output formatter classes for fasthog.

This module provides the base output interface shared by the text and
JSON formatters, and :func:`write_results` for saving results to disk.
"""

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from fasthog.core.exceptions import OutputError
from fasthog.core.models import ScanResult

# Matches SGR escape sequences such as "\x1b[1;31m"
ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Remove ANSI color codes from ``text``."""
    return ANSI_ESCAPE.sub("", text)


class BaseOutput(ABC):
    """Abstract base class for all output formatters.

    Subclasses must implement the `name` property and `format` method
    to provide specific formatting logic for different output types.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this output formatter.

        Returns:
            A string identifier for this formatter (e.g., 'json', 'text').
        """
        pass

    @abstractmethod
    def format(self, result: ScanResult) -> str:
        """Format a scan result for output.

        Args:
            result: The ScanResult to format.

        Returns:
            A formatted string representation of the scan result.
        """
        pass


def write_results(lines: Iterable[str], output_path: Path | str) -> None:
    """Write ``lines`` to ``output_path``, one per line, without ANSI codes.

    An existing file is replaced.

    Raises:
        OutputError: If the file cannot be created or written.
    """
    path = Path(output_path)
    try:
        with open(path, "w", encoding="utf-8") as handle:
            for line in lines:
                handle.write(strip_ansi(line) + "\n")
    except OSError as e:
        raise OutputError(f"failed to write results: {e}", output_path=str(path)) from e
