"""JSON output formatter for fasthog.

This module provides a JSON output formatter that serializes scan results
to formatted JSON using Pydantic's model serialization.
"""

from fasthog.core.models import JsonReport, ScanResult
from fasthog.outputs import BaseOutput


class JsonOutput(BaseOutput):
    """Output formatter that serializes ScanResult to formatted JSON.

    The document holds the scan metadata, every match ordered by file and
    line, a summary block and the per-file counts (highest first). It never
    contains color codes.

    Example:
        formatter = JsonOutput()
        json_str = formatter.format(scan_result)
        print(json_str)
    """

    @property
    def name(self) -> str:
        """Return the formatter name."""
        return "json"

    def format(self, result: ScanResult) -> str:
        """Format a scan result as JSON.

        Args:
            result: The ScanResult to format.

        Returns:
            A formatted JSON string representation of the scan result.
        """
        return JsonReport.from_result(result).model_dump_json(indent=2)
