"""Rich components for the CLI.

Kept apart from the command so the table layout can be reused and tested
without running the whole command.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text

from cap_sync_version.core.domain.models import PatchResult, SyncReport
from cap_sync_version.core.domain.platform import Platform
from cap_sync_version.core.services.sync_pipeline import SyncHooks


def print_header(console: Console, *, version: str, android: bool, ios: bool) -> None:
    console.print(Text.assemble(("Updating capacitor project versions to: ", "bold"), (version, "bold cyan")))
    console.print(f"sync android versions? {android}")
    console.print(f"sync ios versions? {ios}")


def _display_path(path: Path, root: Path | None) -> str:
    if root is not None:
        try:
            return str(path.relative_to(root))
        except ValueError:
            pass
    return str(path)


def _status(result: PatchResult) -> Text:
    if not result.ok:
        return Text("FAIL", style="red")
    if result.changed:
        return Text("UPDATED", style="green")
    return Text("UNCHANGED", style="dim")


def build_progress_hooks(console: Console, *, root: Path | None = None) -> SyncHooks:
    """Hooks that print one line per platform and per patched file."""

    def platform_start(platform: Platform) -> None:
        console.print(f"[bold]Syncing {platform.label()}[/bold]")

    def file_done(result: PatchResult) -> None:
        console.print(Text.assemble("  ", _status(result), " ", _display_path(result.path, root)))

    return SyncHooks(platform_start=platform_start, file_done=file_done)


def build_results_table(report: SyncReport, *, root: Path | None = None) -> Table:
    """One row per target file, plus a row for each platform-wide failure."""

    table = Table(title=f"Version sync {report.version}")
    table.add_column("Platform", style="cyan", no_wrap=True)
    table.add_column("File", style="white")
    table.add_column("Status", no_wrap=True)
    table.add_column("Values / Error", style="magenta")

    for platform_report in report.platforms:
        label = platform_report.platform.label()
        if platform_report.error:
            table.add_row(label, "-", Text("FAIL", style="red"), Text(platform_report.error, style="red"))
        for result in platform_report.results:
            if result.ok:
                detail = Text(", ".join(f"{k}={v}" for k, v in result.values.items()))
            else:
                detail = Text(result.error or "", style="red")
            table.add_row(label, _display_path(result.path, root), _status(result), detail)
    return table
