"""Rich terminal renderer for upgrade reports and release status.

Color scheme
------------
- green   : unchanged / up to date
- yellow  : changed (blob replaced, or would be on a dry run)
- cyan    : skipped via the version marker
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from blobwright.core.errors import causal_chain
from blobwright.models.blobs import BlobManifest
from blobwright.models.outcomes import ChangeKind, DependencyOutcome, RunReport, RunStatus
from blobwright.models.resources import ResourceDescriptor

_KIND_LABELS: dict[ChangeKind, str] = {
    ChangeKind.UNCHANGED: "[green]unchanged[/green]",
    ChangeKind.CHANGED: "[yellow]changed[/yellow]",
}

_STATUS_LABELS: dict[RunStatus, str] = {
    RunStatus.UPDATED: "[bold yellow]updated[/bold yellow]",
    RunStatus.NOOP: "[bold green]no-op[/bold green]",
}


def outcome_label(outcome: DependencyOutcome) -> str:
    if outcome.fast_path:
        return "[cyan]up to date (marker)[/cyan]"
    return _KIND_LABELS[outcome.kind]


class ReportRenderer:
    """Renders ``RunReport`` and release status as Rich output.

    Parameters
    ----------
    console:
        Rich Console instance. A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_report(self, report: RunReport) -> Panel:
        table = Table(show_header=True, header_style="bold", expand=True)
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Version")
        table.add_column("Previous")
        table.add_column("Result")
        table.add_column("Blobs")

        for outcome in report.outcomes:
            blobs = "\n".join(
                f"{change.old.path} -> {change.new.path}" if change.new else change.old.path
                for change in outcome.changes
            )
            table.add_row(
                outcome.package_name,
                outcome.resolved_version,
                outcome.previous_marker or "[dim]-[/dim]",
                outcome_label(outcome),
                blobs or "[dim]-[/dim]",
            )

        summary_parts = [
            f"[bold]Status:[/bold] {_STATUS_LABELS[report.status]}",
            f"[bold]Dependencies:[/bold] {len(report.outcomes)}",
            f"[bold]Mutated:[/bold] {report.mutation_count}",
            f"[bold]Uploaded:[/bold] {'yes' if report.uploaded else 'no'}",
        ]
        if report.dry_run:
            summary_parts.append("[magenta][bold]dry run[/bold][/magenta]")

        return Panel(
            Group(table, Text(""), Text.from_markup("  |  ".join(summary_parts))),
            title="[bold]Blob Upgrade[/bold]",
            border_style="yellow" if report.status is RunStatus.UPDATED else "green",
        )

    def render_status(
        self,
        descriptors: list[ResourceDescriptor],
        manifest: BlobManifest,
        markers: dict[str, str | None],
    ) -> Table:
        table = Table(title="Tracked dependencies", show_header=True, header_style="bold")
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Recorded")
        table.add_column("Marker")
        table.add_column("Bundled blobs")

        for descriptor in descriptors:
            records = manifest.for_package(descriptor.package_name)
            table.add_row(
                descriptor.package_name,
                descriptor.recorded_version or "[dim]-[/dim]",
                markers.get(descriptor.package_name) or "[dim]-[/dim]",
                "\n".join(record.path for record in records) or "[dim]none[/dim]",
            )
        return table

    def print_report(self, report: RunReport) -> None:
        self.console.print(self.render_report(report))

    def print_error(self, exc: BaseException) -> None:
        """Print an error and each exception that caused it."""
        chain = causal_chain(exc)
        self.console.print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}")
        for cause in chain[1:]:
            self.console.print(f"  [red]caused by {type(cause).__name__}:[/red] {escape(str(cause))}")
