"""Display functions for CLI commands - pure functions for Rich output."""

from __future__ import annotations

from typing import Any, Mapping

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..platforms.base import PublishOutcome


def show_platforms_table(
    console: Console,
    platforms: list[str],
    connections: Mapping[str, bool],
) -> None:
    """Display registered adapters and whether credentials are present."""
    table = Table(title="Platforms")
    table.add_column("Platform", style="cyan")
    table.add_column("Connected")

    for name in platforms:
        connected = connections.get(name, False)
        table.add_row(name, "[green]yes[/green]" if connected else "[dim]no[/dim]")

    console.print(table)


def show_publish_results(console: Console, outcomes: Mapping[str, PublishOutcome]) -> None:
    """Display one row per attempted platform."""
    if not outcomes:
        console.print("[yellow]No selected platform is connected. Nothing was published.[/yellow]")
        return

    table = Table(title="Publish Results")
    table.add_column("Platform", style="cyan")
    table.add_column("Status")
    table.add_column("Details")

    for name, outcome in outcomes.items():
        if outcome.success:
            handle = outcome.permalink or outcome.post_id or outcome.post_urn or outcome.publish_id
            table.add_row(name, "[green]published[/green]", handle or "")
        else:
            kind = outcome.error_kind.value if outcome.error_kind else "error"
            table.add_row(name, f"[red]{kind}[/red]", outcome.error or "")

    console.print(table)


def show_job(console: Console, job: Mapping[str, Any]) -> None:
    """Display a job in its read-contract shape."""
    status = job.get("status")
    border = {"completed": "green", "failed": "red"}.get(status, "yellow")
    console.print(Panel(
        f"[bold]{job.get('job_id')}[/bold]  [dim]{status}[/dim]",
        title="Job",
        border_style=border,
    ))
    console.print_json(data=dict(job))


def show_sweep_result(console: Console, removed: int) -> None:
    if removed:
        console.print(f"[green]Removed {removed} expired job(s).[/green]")
    else:
        console.print("[dim]No expired jobs.[/dim]")
