"""Console rendering, summary file and clipboard for fingerprint results.

Everything the user sees goes through ``ConsoleReporter``; the aggregator
itself never prints.
"""

import logging
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from signin_doctor.data.guide import SetupGuide
from signin_doctor.models.schemas import (
    AggregationResult,
    FingerprintKind,
    SourceOutcome,
    SourceStatus,
)

logger = logging.getLogger(__name__)

# Tried in order; the first one on PATH wins.
CLIPBOARD_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["clip"],
]

STATUS_STYLES: dict[SourceStatus, tuple[str, str]] = {
    SourceStatus.FOUND: ("green", "found"),
    SourceStatus.NOT_FOUND: ("yellow", "not found"),
    SourceStatus.INSPECTION_FAILED: ("red", "failed to read"),
    SourceStatus.NO_FINGERPRINTS: ("red", "no fingerprints"),
    SourceStatus.TRANSFER_FAILED: ("red", "transfer failed"),
    SourceStatus.SKIPPED: ("yellow", "skipped"),
}


def default_summary_path(directory: Path) -> Path:
    return Path(directory) / f"titanium-google-signin-fingerprints-{int(datetime.now().timestamp())}.txt"


def format_megabytes(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def summary_text(result: AggregationResult) -> str:
    """Plain-text summary: one ``=== label ===`` block per source."""
    blocks: dict[str, list[str]] = {}
    for record in result.records:
        prefix = "SHA-1:  " if record.kind is FingerprintKind.SHA1 else "SHA-256:"
        blocks.setdefault(record.source_label, []).append(f"{prefix} {record.colon_value}")

    lines = []
    for label, entries in blocks.items():
        lines.append(f"=== {label} ===")
        lines.extend(entries)
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def copy_to_clipboard(text: str) -> str | None:
    """Copy ``text`` with the first available clipboard tool.

    Returns:
        Name of the tool used, or None if none is installed or it failed.
    """
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]) is None:
            continue
        try:
            subprocess.run(cmd, input=text, text=True, check=True, capture_output=True, timeout=5)
            return cmd[0]
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
            logger.warning(f"Clipboard copy with {cmd[0]} failed: {e}")
            return None
    return None


class ConsoleReporter:
    """Renders fingerprint discovery results on a ``rich`` console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def banner(self) -> None:
        self.console.print(
            Panel.fit(
                "[bold]Google Sign-In Diagnostic Tool for Titanium Android[/bold]\n\n"
                "  - Extract SHA-1 and SHA-256 fingerprints from all keystores\n"
                "  - Verify your device configuration\n"
                "  - Guide you through Firebase console setup",
                border_style="cyan",
            )
        )

    def section(self, title: str) -> None:
        self.console.rule(f"[bold]{title}")

    def prerequisites(self, keytool_path: str, adb_available: bool, devices: list[str], os_kind: str) -> None:
        self.section("Verifying Prerequisites")
        self.console.print(f"[green]✓[/green] keytool found: {escape(keytool_path)}")
        if adb_available:
            self.console.print("[green]✓[/green] adb found")
            self.console.print("  Connected devices:")
            for line in devices or ["(none)"]:
                self.console.print(f"    {escape(line)}")
        else:
            self.console.print("[yellow]⚠[/yellow] adb not found (optional, needed for device inspection)")
        self.console.print(f"[green]✓[/green] OS detected: {os_kind}")

    def tool_missing(self, tool: str) -> None:
        self.console.print(f"[red]✗ {tool} not found![/red]")
        self.console.print("  Please install a JDK and try again.")

    def source_outcome(self, outcome: SourceOutcome) -> None:
        """Print what happened for one source as soon as it completes."""
        self.section(escape(outcome.label))
        style, text = STATUS_STYLES[outcome.status]

        if outcome.size_bytes is not None:
            self.console.print(f"APK size: {format_megabytes(outcome.size_bytes)}")

        if outcome.status is SourceStatus.FOUND:
            self.console.print(f"[green]✓ Found:[/green] {escape(outcome.location or '')}")
            for record in outcome.records:
                self.console.print(f"   {record.kind.value + ':':<9}[blue]{record.colon_value}[/blue]")
            return

        self.console.print(f"[{style}]⚠ {escape(outcome.label)}: {text}[/{style}]")
        if outcome.location:
            self.console.print(f"  Checked: {escape(outcome.location)}")
        if outcome.detail:
            self.console.print(f"  {escape(outcome.detail)}", style="dim")

    def device_information(self, play_services_version: str | None, accounts: list[str]) -> None:
        self.section("Device Information")
        self.console.print("Google Play Services version:")
        if play_services_version:
            self.console.print(f"  {escape(play_services_version)}")
        else:
            self.console.print("  [yellow]Could not retrieve version[/yellow]")
        self.console.print("Google accounts on device:")
        for account in accounts or ["(none)"]:
            self.console.print(f"  {escape(account)}")

    def summary(self, result: AggregationResult, summary_path: Path | None) -> None:
        self.section("Summary")
        if result.is_empty:
            self.console.print("[red]✗ No fingerprints were extracted![/red]")
            return

        self.console.print(f"[green]✓ Successfully extracted {len(result.records)} fingerprint(s)![/green]")
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Source")
        table.add_column("Type")
        table.add_column("Fingerprint", overflow="fold")
        for record in result.records:
            table.add_row(escape(record.source_label), record.kind.value, record.colon_value)
        self.console.print(table)

        if summary_path is not None:
            self.console.print(f"All fingerprints have been saved to: [cyan]{escape(str(summary_path))}[/cyan]")

    def failure_help(self, guide: SetupGuide) -> None:
        self.console.print("Please check:")
        for item in guide.failure_checklist:
            self.console.print(f"  - {item}")

    def clipboard_result(self, tool: str | None) -> None:
        if tool:
            self.console.print(f"[green]✓ First SHA-1 copied to clipboard ({tool})[/green]")

    def guide(self, guide: SetupGuide) -> None:
        self.section(guide.title)
        for number, step in enumerate(guide.steps, start=1):
            self.console.print(f"\n[bold magenta]{number}. {step.title.upper()}[/bold magenta]")
            for line in step.lines:
                self.console.print(f"   - {escape(line)}")
            if step.code:
                self.console.print(Syntax(step.code.rstrip(), step.language, theme="ansi_dark"))
            if step.warning:
                self.console.print(f"   [yellow]⚠ {escape(step.warning)}[/yellow]")

        self.section("Troubleshooting")
        for number, item in enumerate(guide.troubleshooting, start=1):
            self.console.print(f"\n[bold]{number}. {item.title.upper()}[/bold]")
            for line in item.lines:
                self.console.print(f"   - {escape(line)}")
            if item.code:
                self.console.print(Syntax(item.code.rstrip(), item.language, theme="ansi_dark"))

        self.section("Useful Links")
        for link in guide.links:
            self.console.print(f"{escape(link.title)}:\n  → {escape(link.url)}")

    def write_summary_file(self, result: AggregationResult, path: Path) -> Path:
        """Persist the fingerprint blocks to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(summary_text(result), encoding="utf-8")
        logger.info(f"Wrote fingerprint summary to {path}")
        return path
