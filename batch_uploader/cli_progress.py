"""Console rendering and progress helpers for batch-up CLI."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import UploadState, UploadStatus
from .orchestrator.models import BatchUploadResult
from .utils.formatting import human_size

console = Console()

STATUS_ICONS = {
    UploadState.PENDING: "[blue]…[/blue]",
    UploadState.UPLOADING: "[blue]⟳[/blue]",
    UploadState.SUCCESS: "[green]✓[/green]",
    UploadState.ERROR: "[red]✗[/red]",
    UploadState.VALIDATION_ERROR: "[red]✗[/red]",
}

MESSAGE_STYLES = {
    UploadState.SUCCESS: "green",
    UploadState.ERROR: "red",
    UploadState.VALIDATION_ERROR: "red",
}

MAX_LISTED_FILES = 5


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else escape(str(value))
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]batch-up[/bold green]",
        subtitle="[dim]batch uploader CLI[/dim]",
        border_style="blue",
    )
    console.print(panel)


def _group_label(status: UploadStatus) -> str:
    if status.status == UploadState.VALIDATION_ERROR:
        return "Validation Failed"
    return f"Request Group ({len(status.file_names)} Files)"


def _file_list(names) -> str:
    shown = [escape(name) for name in names[:MAX_LISTED_FILES]]
    if len(names) > MAX_LISTED_FILES:
        shown.append(f"[dim]+{len(names) - MAX_LISTED_FILES} more[/dim]")
    return "\n".join(shown)


def build_status_table(statuses: List[UploadStatus]) -> Table:
    groups = sum(1 for s in statuses if s.status != UploadState.VALIDATION_ERROR)
    rejected = len(statuses) - groups
    table = Table(
        title=f"Request Pipeline Status ({groups} groups pending/complete, {rejected} failed validation)",
        expand=False,
    )
    table.add_column("", width=2)
    table.add_column("Group", style="bold")
    table.add_column("Size", justify="right", style="cyan")
    table.add_column("Status")
    table.add_column("Files", style="dim")

    for status in statuses:
        style = MESSAGE_STYLES.get(status.status)
        message = escape(status.message)
        if style:
            message = f"[{style}]{message}[/{style}]"
        table.add_row(
            STATUS_ICONS[status.status],
            _group_label(status),
            human_size(status.total_size),
            message,
            _file_list(status.file_names),
        )
    return table


class StatusTableDisplay:
    """Live table of every group, redrawn on each status change."""

    def __init__(self, live: bool = True):
        self._statuses: Dict[str, UploadStatus] = {}
        self._order: List[str] = []
        self._live: Optional[Live] = None
        self._use_live = live

    def start(self, statuses: List[UploadStatus]) -> None:
        self._statuses = {s.id: s for s in statuses}
        self._order = [s.id for s in statuses]
        if self._use_live and self._live is None:
            self._live = Live(
                build_status_table(statuses),
                console=console,
                refresh_per_second=8,
                vertical_overflow="visible",
            )
            self._live.start()

    def on_status(self, status: UploadStatus) -> None:
        """Status sink: replaces the row with the same id."""
        if status.id not in self._statuses:
            self._order.append(status.id)
        self._statuses[status.id] = status
        if self._live is not None:
            self._live.update(build_status_table(self.statuses))

    @property
    def statuses(self) -> List[UploadStatus]:
        return [self._statuses[i] for i in self._order]

    def finish(self, result: BatchUploadResult) -> None:
        if self._live is not None:
            self._live.update(build_status_table(result.statuses))
            self._live.stop()
            self._live = None
        else:
            console.print(build_status_table(result.statuses))

        if result.all_success:
            console.print(f"[green]All {result.succeeded} group(s) uploaded.[/green]")
            return
        console.print(
            f"[yellow]{result.succeeded} succeeded[/yellow], "
            f"[red]{result.failed} failed[/red], "
            f"[red]{result.rejected} rejected[/red]"
        )

    def stop(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
