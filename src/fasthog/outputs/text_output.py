"""Text output formatter for fasthog.

Renders matches as ``path:NNNN line`` rows with the secret highlighted,
followed by a table of the files with the most secrets (for larger scans)
and a one-line summary. Styling uses Rich; the rendered string contains
ANSI color codes.
"""

from io import StringIO

from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from fasthog.core.models import Match, ScanResult
from fasthog.outputs import BaseOutput

FILE_STYLE = "bold cyan"
LINE_NO_STYLE = "yellow"
MATCH_STYLE = "bold red"

# The top files table is only shown when more files than this were scanned
TOP_FILES_THRESHOLD = 10
TOP_FILES_LIMIT = 10


def format_duration(duration_ms: int) -> str:
    """Format a duration for humans.

    Example:
        >>> format_duration(1234)
        '1.234s'
        >>> format_duration(87)
        '87ms'
    """
    if duration_ms < 1000:
        return f"{duration_ms}ms"
    return f"{duration_ms / 1000:.3f}s"


def render_match(match: Match) -> Text:
    """Build the styled ``path:NNNN line`` row for one match.

    The first occurrence of the matched text in the line is highlighted.
    """
    text = Text()
    text.append(match.file, style=FILE_STYLE)
    text.append(f":{match.line:04d}", style=LINE_NO_STYLE)
    text.append(" ")

    snippet = match.line_snippet
    start = snippet.find(match.match_text) if match.match_text else -1
    if start < 0:
        text.append(snippet)
    else:
        end = start + len(match.match_text)
        text.append(snippet[:start])
        text.append(snippet[start:end], style=MATCH_STYLE)
        text.append(snippet[end:])
    return text


class TextOutput(BaseOutput):
    """Output formatter for the human-readable terminal report.

    Example:
        formatter = TextOutput()
        print(formatter.format(scan_result))
    """

    def __init__(self, width: int = 120) -> None:
        self.width = width

    @property
    def name(self) -> str:
        """Return the formatter name."""
        return "text"

    def _render(self, renderable: RenderableType) -> str:
        string_io = StringIO()
        console = Console(file=string_io, force_terminal=True, width=self.width)
        console.print(renderable, soft_wrap=True)
        return string_io.getvalue().rstrip("\n")

    def match_lines(self, result: ScanResult) -> list[str]:
        """Return one styled row per match, ordered by file and line.

        These are the lines written to an output file (after stripping
        color codes) in text mode.
        """
        return [self._render(render_match(match)) for match in result.sorted_matches()]

    def top_files_table(self, result: ScanResult) -> Table:
        """Build the table of files with the most secrets."""
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Secrets", justify="right", style="magenta")
        table.add_column("File Path", style=FILE_STYLE, no_wrap=False)
        for entry in result.top_files(TOP_FILES_LIMIT):
            table.add_row(str(entry.match_count), entry.file)
        return table

    def summary_line(self, result: ScanResult) -> str:
        """Return the closing "Completed in ..." line."""
        return (
            f"Completed in {format_duration(result.duration_ms)}: "
            f"{result.total_matches} matches across {result.files_with_matches} "
            f"of {len(result.candidate_files)} files"
        )

    def format(self, result: ScanResult) -> str:
        """Format a scan result as a styled text report.

        Args:
            result: The ScanResult to format.

        Returns:
            The report, including ANSI color codes.
        """
        parts = ["Results:"]
        parts.extend(self.match_lines(result))

        if len(result.candidate_files) > TOP_FILES_THRESHOLD:
            parts.append("")
            parts.append(self._render(self.top_files_table(result)))

        parts.append("")
        parts.append(self.summary_line(result))
        return "\n".join(parts)
