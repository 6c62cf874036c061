"""Output formatters for decoded npm reports."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.errors import DecodeError, DecodeWarning, SummaryMismatchWarning
from ..core.models import Advisory, AuditReport, Finding, OutdatedReport, Severity
from ..core.versions import (
    Ordering,
    RangeExpression,
    SemVer,
    Unbounded,
    VersionLike,
    compare,
)
from ..utils.logging import get_logger

SEVERITY_STYLES = {
    Severity.CRITICAL: "red bold",
    Severity.HIGH: "red",
    Severity.MODERATE: "yellow",
    Severity.LOW: "blue",
    Severity.INFO: "white",
}

TITLE_WIDTH = 50


def version_kind(version: Optional[VersionLike]) -> Optional[str]:
    """Short name of the version type, as used in JSON output."""
    if version is None:
        return None
    if isinstance(version, SemVer):
        return "semver"
    if isinstance(version, RangeExpression):
        return "range"
    if isinstance(version, Unbounded):
        return "unbounded"
    return "unparsable"


def _text(version: Optional[VersionLike]) -> str:
    return escape(str(version)) if version is not None else "-"


class ConsoleFormatter:
    """Rich console formatter for decoded reports."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()

    def format_outdated(self, report: OutdatedReport) -> None:
        """Display an outdated report as a table.

        Args:
            report: Decoded outdated report
        """
        if not report.packages:
            self.console.print(Panel("All packages are up to date", style="green"))
            return

        table = Table(title=f"Outdated Packages ({len(report)})")
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Current")
        table.add_column("Wanted", style="green")
        table.add_column("Latest", style="magenta")
        table.add_column("Type", style="blue")
        table.add_column("Location", style="dim")

        for package in report:
            table.add_row(
                escape(package.name),
                self._current_cell(package.current, package.wanted),
                _text(package.wanted),
                _text(package.latest),
                package.dependency_type.value if package.dependency_type else "-",
                escape(package.location or "-"),
            )

        self.console.print(table)
        self._print_warnings(report.warnings)

    def _current_cell(self, current: Optional[VersionLike], wanted: Optional[VersionLike]) -> Text:
        if current is None:
            return Text("missing", style="red")
        if wanted is not None and compare(current, wanted) is Ordering.LESS:
            return Text(str(current), style="yellow")
        return Text(str(current))

    def format_audit(self, report: AuditReport) -> None:
        """Display an audit report: summary panel, then advisories table.

        Args:
            report: Decoded audit report
        """
        self.console.print(self._create_summary_panel(report))

        if not report.advisories:
            self.console.print(Panel("No advisories found!", style="green"))
        else:
            self.console.print(self._create_advisories_table(report))

        self._print_warnings(report.warnings)

    def _create_summary_panel(self, report: AuditReport) -> Panel:
        counts = ", ".join(
            f"{count} {severity.value}"
            for severity, count in report.severity_counts.items() if count
        ) or "none"
        highest = report.highest_severity

        lines = [
            f"Schema generation: {report.generation.value} ({report.generation.npm_versions})",
            f"Advisories: {len(report.advisories)}",
            f"Severity counts: {counts}",
        ]
        if report.package_counts is not None:
            lines.append(f"Vulnerable packages: {len(report.vulnerable_packages)}")
        if report.total_dependencies is not None:
            lines.append(f"Dependencies: {report.total_dependencies}")
        if report.timestamp is not None:
            lines.append(f"Newest advisory update: {report.timestamp.isoformat()}")

        style = SEVERITY_STYLES[highest] if highest else "green"
        return Panel("\n".join(lines), title="Audit Summary", style=style)

    def _create_advisories_table(self, report: AuditReport) -> Table:
        table = Table(title="Advisories")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Module", style="magenta")
        table.add_column("Severity")
        table.add_column("Title", style="white")
        table.add_column("Vulnerable", style="red")
        table.add_column("Paths", justify="right")

        ordered = sorted(report.advisories.values(), key=lambda a: -a.severity.rank)
        for advisory in ordered:
            title = advisory.title
            if len(title) > TITLE_WIDTH:
                title = title[:TITLE_WIDTH] + "..."
            table.add_row(
                str(advisory.id),
                escape(advisory.module_name),
                Text(advisory.severity.value, style=SEVERITY_STYLES[advisory.severity]),
                escape(title),
                escape(advisory.vulnerable_versions or "-"),
                str(len(advisory.paths)),
            )
        return table

    def _print_warnings(self, warnings: List[DecodeWarning]) -> None:
        if not warnings:
            return
        body = "\n".join(f"• {escape(str(warning))}" for warning in warnings)
        self.console.print(Panel(body, title=f"Warnings ({len(warnings)})", style="yellow"))

    def format_error(self, error: DecodeError) -> None:
        """Display a decode error with its location and schema attempts.

        Args:
            error: The decode failure
        """
        content = (
            f"[bold red]{error.kind.value}[/bold red] at [bold]{escape(str(error.path))}[/bold]\n"
            f"Expected: {escape(error.expected)}\n"
            f"Got: {escape(error.snippet)}"
        )
        if error.attempts:
            content += "\n\n[dim]Schema generations tried:[/dim]"
            for attempt in error.attempts:
                content += f"\n[dim]• {escape(str(attempt))}[/dim]"

        self.console.print(Panel(content, title="Decode failed", style="red"))


class JSONFormatter:
    """JSON formatter for decoded reports."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("npm_report.output")

    def _version(self, version: Optional[VersionLike]) -> Optional[Dict[str, str]]:
        if version is None:
            return None
        return {"kind": version_kind(version), "text": str(version)}

    def _datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value is not None else None

    def _warnings(self, warnings: List[DecodeWarning]) -> List[Dict[str, Any]]:
        data = []
        for warning in warnings:
            entry = {"path": str(warning.path), "message": warning.message}
            if isinstance(warning, SummaryMismatchWarning):
                entry.update(
                    severity=warning.severity.value,
                    declared=warning.declared,
                    actual=warning.actual,
                )
            data.append(entry)
        return data

    def format_outdated(self, report: OutdatedReport) -> Dict[str, Any]:
        """Format an outdated report as JSON-ready data.

        Args:
            report: Decoded outdated report

        Returns:
            Formatted JSON data
        """
        return {
            "packages": [
                {
                    "name": package.name,
                    "current": self._version(package.current),
                    "wanted": self._version(package.wanted),
                    "latest": self._version(package.latest),
                    "location": package.location,
                    "dependent": package.dependent,
                    "type": package.dependency_type.value if package.dependency_type else None,
                    "homepage": package.homepage,
                }
                for package in report
            ],
            "warnings": self._warnings(report.warnings),
        }

    def _finding(self, finding: Finding) -> Dict[str, Any]:
        return {
            "version": self._version(finding.version),
            "paths": [list(chain) for chain in finding.paths],
            "dev": finding.dev,
            "optional": finding.optional,
            "bundled": finding.bundled,
        }

    def _advisory(self, advisory: Advisory) -> Dict[str, Any]:
        return {
            "id": advisory.id,
            "title": advisory.title,
            "module_name": advisory.module_name,
            "severity": advisory.severity.value,
            "vulnerable_versions": advisory.vulnerable_versions,
            "patched_versions": self._version(advisory.patched_versions),
            "findings": [self._finding(finding) for finding in advisory.findings],
            "url": advisory.url,
            "cves": list(advisory.cves),
            "cwe": list(advisory.cwe),
            "cvss_score": advisory.cvss_score,
            "github_advisory_id": advisory.github_advisory_id,
            "npm_advisory_id": advisory.npm_advisory_id,
            "found_by": advisory.found_by,
            "reported_by": advisory.reported_by,
            "created": self._datetime(advisory.created),
            "updated": self._datetime(advisory.updated),
        }

    def format_audit(self, report: AuditReport) -> Dict[str, Any]:
        """Format an audit report as JSON-ready data.

        Args:
            report: Decoded audit report

        Returns:
            Formatted JSON data
        """
        declared = None
        if report.declared_counts is not None:
            declared = {severity.value: count for severity, count in report.declared_counts.items()}
        packages = None
        if report.package_counts is not None:
            packages = {severity.value: count for severity, count in report.package_counts.items()}

        return {
            "generation": report.generation.value,
            "advisories": [self._advisory(advisory) for advisory in report.advisories.values()],
            "severity_counts": {severity.value: count for severity, count in report.severity_counts.items()},
            "package_counts": packages,
            "declared_counts": declared,
            "total_dependencies": report.total_dependencies,
            "timestamp": self._datetime(report.timestamp),
            "vulnerable_packages": [
                {
                    "name": package.name,
                    "severity": package.severity.value,
                    "is_direct": package.is_direct,
                    "via": list(package.via),
                    "nodes": list(package.nodes),
                }
                for package in report.vulnerable_packages
            ],
            "actions": [
                {
                    "action": action.action,
                    "module": action.module,
                    "target": self._version(action.target),
                    "resolves": [resolution.id for resolution in action.resolves],
                }
                for action in report.actions
            ],
            "warnings": self._warnings(report.warnings),
        }

    def format_error(self, error: DecodeError) -> Dict[str, Any]:
        """Format a decode error as JSON-ready data.

        Args:
            error: The decode failure

        Returns:
            Formatted JSON error data
        """
        return {
            "error": {
                "kind": error.kind.value,
                "path": str(error.path),
                "expected": error.expected,
                "value": error.snippet,
                "attempts": [str(attempt) for attempt in error.attempts],
            }
        }

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2, ensure_ascii=False)

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
