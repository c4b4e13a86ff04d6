"""Command-line interface for fasthog.

This module provides the Typer-based CLI for scanning a directory tree
for secrets, with text or JSON output and optional configuration files.
"""

import threading
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.text import Text

from fasthog import __version__
from fasthog.config import (
    OutputFormat,
    determine_directory,
    determine_extensions,
    determine_output_format,
    determine_output_path,
    load_config,
)
from fasthog.core.exceptions import (
    ConfigError,
    FasthogError,
    OutputError,
    PatternSourceError,
    PatternSyntaxError,
    ScanError,
)
from fasthog.core.logging import setup_logging
from fasthog.core.models import ScanRequest, ScanResult
from fasthog.core.patterns import load_pattern_set
from fasthog.core.scanner import Scanner, validate_directory
from fasthog.core.walker import merge_exclude_dirs
from fasthog.outputs import write_results
from fasthog.outputs.json_output import JsonOutput
from fasthog.outputs.text_output import TextOutput

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1

# Initialize Typer app and Rich consoles
app = typer.Typer(
    name="fasthog",
    help="fasthog - A fast, concurrent scanner for secrets in source trees.",
    add_completion=False,
)
console = Console()
error_console = Console(stderr=True)


def _display_error(error: BaseException, title: str = "Error") -> None:
    """Display an error with rich formatting.

    Args:
        error: The exception to display.
        title: The title for the error panel.
    """
    if isinstance(error, ScanError):
        message = f"[bold red]Scan Error[/bold red]\n\n{error.message}"
        if error.path:
            message += f"\n\n[dim]Path:[/dim] {error.path}"
        error_console.print(Panel(message, title="[red]Scan Error[/red]", border_style="red"))
    elif isinstance(error, ConfigError):
        message = f"[bold red]Configuration Error[/bold red]\n\n{error.message}"
        if error.config_key:
            message += f"\n\n[dim]Config key:[/dim] {error.config_key}"
        error_console.print(Panel(message, title="[red]Config Error[/red]", border_style="red"))
    elif isinstance(error, (PatternSourceError, PatternSyntaxError)):
        message = f"[bold red]Pattern Error[/bold red]\n\n{error.message}"
        if error.source:
            message += f"\n\n[dim]Source:[/dim] {error.source}"
        error_console.print(Panel(message, title="[red]Pattern Error[/red]", border_style="red"))
    elif isinstance(error, OutputError):
        message = f"[bold red]Output Error[/bold red]\n\n{error.message}"
        if error.output_path:
            message += f"\n\n[dim]Output path:[/dim] {error.output_path}"
        error_console.print(Panel(message, title="[red]Output Error[/red]", border_style="red"))
    elif isinstance(error, FasthogError):
        message = f"[bold red]Error[/bold red]\n\n{error.message}"
        error_console.print(Panel(message, title=f"[red]{title}[/red]", border_style="red"))
    else:
        error_console.print(
            Panel(
                f"[bold red]{title}[/bold red]\n\n{error}",
                title="[red]Error[/red]",
                border_style="red",
            )
        )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]fasthog[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


def _run_with_progress(request: ScanRequest) -> ScanResult:
    """Run the scan while showing the current file, a bar and a match counter."""
    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("Matches: [bold red]{task.fields[matches]}[/bold red]"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    task_id = progress.add_task("Walking", total=None, matches=0)
    lock = threading.Lock()
    found = 0

    def on_progress(path: str, index: int, total: int) -> None:
        progress.update(task_id, description=path, completed=index, total=total)

    def on_match(path: str, line_no: int, line: str, matched: str) -> None:
        nonlocal found
        with lock:
            found += 1
            progress.update(task_id, matches=found)

    request = request.model_copy(update={"on_progress": on_progress, "on_match": on_match})
    with progress:
        result = Scanner(request).scan()
        progress.update(task_id, completed=len(result.candidate_files), total=len(result.candidate_files))
    return result


@app.command()
def scan(
    directory: Annotated[
        Optional[Path],
        typer.Argument(
            help="Directory to scan (defaults to 'directory' from the config file)",
        ),
    ] = None,
    types: Annotated[
        Optional[str],
        typer.Option(
            "--types",
            "-t",
            help="Comma-separated list of file extensions to include (e.g., yml,yaml,sh)",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Path where results should also be written",
        ),
    ] = None,
    format: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            "-f",
            help="Output format: text or json",
            case_sensitive=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Shortcut for --format=json",
        ),
    ] = False,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (YAML)",
        ),
    ] = None,
    concurrency: Annotated[
        Optional[int],
        typer.Option(
            "--concurrency",
            "-j",
            min=1,
            help="Maximum number of files scanned at once (default: CPU count)",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (only show errors)",
        ),
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """Scan a directory tree for hardcoded secrets.

    Settings are taken from the command line, then FASTHOG_* environment
    variables, then the configuration file, then built-in defaults.

    Exit codes:
        0: Scan completed (with or without matches)
        1: Error occurred
    """
    try:
        cfg = load_config(config_path=config)
        root = determine_directory(directory, cfg)
        extensions = determine_extensions(types, cfg)
        output_format = determine_output_format(format, json_output, cfg)
        output_path = determine_output_path(output, cfg)
    except FasthogError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None

    # Quiet mode suppresses all non-error output
    if quiet:
        setup_logging(level="error")
    else:
        setup_logging(verbose=verbose, level=cfg.log_level.value)

    text_mode = output_format == OutputFormat.TEXT
    show_text = text_mode and not quiet

    if show_text:
        console.print(f"Directory: {root}", markup=False, highlight=False)
        if types or cfg.extensions:
            console.print(f"Extensions: {extensions}", markup=False, highlight=False)
        else:
            console.print("Extensions: Using defaults")
        if output_path:
            console.print(f"Output: {output_path}", markup=False, highlight=False)

    try:
        validate_directory(root)
        patterns = load_pattern_set(cfg.patterns.to_pattern_files())
    except FasthogError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None

    request = ScanRequest(
        root_directory=root,
        patterns=patterns,
        extensions=extensions,
        exclude_dirs=merge_exclude_dirs(cfg.exclude_dirs),
        concurrency=concurrency or cfg.concurrency,
    )

    try:
        if show_text:
            result = _run_with_progress(request)
        else:
            result = Scanner(request).scan()
    except FasthogError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None
    except KeyboardInterrupt:
        if not quiet:
            error_console.print("\n[yellow]Scan interrupted by user[/yellow]")
        raise typer.Exit(code=EXIT_ERROR) from None

    try:
        if text_mode:
            formatter = TextOutput()
            if not quiet:
                console.print()
                console.print(Text.from_ansi(formatter.format(result)), soft_wrap=True)
            if output_path:
                write_results(formatter.match_lines(result), output_path)
                if not quiet:
                    console.print(f"Results written to {output_path}", markup=False, highlight=False)
        else:
            formatted_output = JsonOutput().format(result)
            # JSON must be the only thing on stdout; print() avoids Rich wrapping
            if not quiet:
                print(formatted_output)
            if output_path:
                write_results([formatted_output], output_path)
    except FasthogError as e:
        _display_error(e)
        raise typer.Exit(code=EXIT_ERROR) from None

    raise typer.Exit(code=EXIT_SUCCESS)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
) -> None:
    """fasthog - A fast, concurrent scanner for secrets in source trees.

    Use 'fasthog scan <directory>' to scan a tree for secrets.
    """
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


if __name__ == "__main__":
    app()
