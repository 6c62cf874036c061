"""Main CLI interface for npm-report-parser."""

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import typer
from rich.console import Console
from rich.panel import Panel

from .. import __version__
from ..core.audit import AuditParser
from ..core.errors import DecodeError
from ..core.options import DecodeOptions, SummaryPolicy
from ..core.outdated import OutdatedParser
from ..core.parsers import registry
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="npm-report",
    help="Decode 'npm outdated --json' and 'npm audit --json' output into typed reports",
    add_completion=False
)

console = Console()
logger = get_logger("npm_report.cli")

STDIN_MARKER = "-"


def _read_source(path: str) -> Union[str, bytes]:
    """Read report text from a file, or from stdin when path is '-'.

    Args:
        path: File path or '-'

    Returns:
        Raw report content
    """
    if path == STDIN_MARKER:
        return sys.stdin.read()

    file_path = Path(path)
    if not file_path.is_file():
        console.print(f"[red]Error: File does not exist: {path}[/red]")
        raise typer.Exit(1)
    return file_path.read_bytes()


def _run(
    path: str,
    decode: Callable[[Union[str, bytes]], Any],
    render: str,
    as_json: bool,
    output: Optional[Path],
) -> None:
    """Decode one report and print or save it.

    Args:
        path: File path or '-'
        decode: Parser ``parse`` method
        render: Formatter method name, ``format_outdated`` or ``format_audit``
        as_json: Print JSON instead of rich tables
        output: Optional JSON output file
    """
    source = _read_source(path)
    json_formatter = JSONFormatter(output)

    try:
        report = decode(source)
    except DecodeError as e:
        logger.error(f"Decoding {path} failed: {e}")
        if as_json:
            typer.echo(json.dumps(json_formatter.format_error(e), indent=2))
        else:
            ConsoleFormatter(console).format_error(e)
        raise typer.Exit(1)

    results: Dict[str, Any] = getattr(json_formatter, render)(report)
    if as_json:
        typer.echo(json.dumps(results, indent=2, ensure_ascii=False))
    else:
        getattr(ConsoleFormatter(console), render)(report)

    if output:
        json_formatter.save_results(results)
        if not as_json:
            console.print(f"[green]Results saved to: {output}[/green]")


@app.command()
def outdated(
    path: str = typer.Argument(
        ...,
        help="Path to 'npm outdated --json' output, or '-' for stdin"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the decoded report as JSON"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for JSON results"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Decode an npm outdated report."""
    setup_logging(verbose=verbose)
    parser = OutdatedParser()
    _run(path, parser.parse, "format_outdated", as_json, output)


@app.command()
def audit(
    path: str = typer.Argument(
        ...,
        help="Path to 'npm audit --json' output, or '-' for stdin"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the decoded report as JSON"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file for JSON results"
    ),
    strict_summary: bool = typer.Option(
        False,
        "--strict-summary",
        help="Fail when the summary counts disagree with the advisories"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    )
) -> None:
    """Decode an npm audit report of any supported generation."""
    setup_logging(verbose=verbose)
    policy = SummaryPolicy.FAIL if strict_summary else SummaryPolicy.WARN
    parser = AuditParser(DecodeOptions(summary_mismatch=policy))
    _run(path, parser.parse, "format_audit", as_json, output)


@app.command()
def info() -> None:
    """Show npm-report-parser information."""

    console.print(Panel.fit(
        f"[bold blue]npm-report-parser[/bold blue] {__version__}\n"
        "Typed decoding of 'npm outdated --json' and 'npm audit --json' output",
        title="Information"
    ))

    generations = [
        f"{generation.value} ({generation.npm_versions})"
        for generation in registry.get_supported_generations()
    ]
    console.print(f"\n[bold]Audit Generations:[/bold] {', '.join(generations)}")


def main() -> None:
    """Main entry point for the npm-report CLI."""
    app()


if __name__ == "__main__":
    main()
