"""Rich formatting helpers for demos, steps and history."""

from typing import assert_never

from rich.table import Table

from demo_client.lifecycle.steps import StepViewModel
from demo_client.types import Demo, DemoStatus


def status_label(demo: Demo) -> str:
    """Color-coded status with progress while processing."""
    match demo.status:
        case DemoStatus.PENDING:
            return "[dim]• Pending[/dim]"
        case DemoStatus.PROCESSING:
            return f"[blue]⏳ {demo.progress_percent}% Complete[/blue]"
        case DemoStatus.COMPLETED:
            return "[green]✓ Completed[/green]"
        case DemoStatus.FAILED:
            return "[red]✗ Failed[/red]"
        case _:
            assert_never(demo.status)


def format_duration(seconds: float | None) -> str:
    return f"{seconds:g}s" if seconds is not None else "Calculating..."


def format_size(size: int | None) -> str:
    return f"{size / 1024 / 1024:.2f} MB" if size is not None else "Calculating..."


def steps_table(view: StepViewModel) -> Table:
    """All steps, with the active one highlighted."""
    table = Table(title="Steps")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Title")

    for index, step in enumerate(view.steps):
        style = "bold reverse" if index == view.active_index else ""
        table.add_row(str(step.step_number), step.title, style=style)

    return table


def history_table(demos: list[Demo], page: int, total_pages: int) -> Table:
    table = Table(title=f"History (page {page}/{total_pages})")
    table.add_column("ID", style="cyan")
    table.add_column("Prompt")
    table.add_column("Status")
    table.add_column("Duration", justify="right")
    table.add_column("Created")

    for demo in demos:
        table.add_row(
            demo.id,
            demo.prompt,
            status_label(demo),
            f"{demo.duration:g}s" if demo.duration is not None else "-",
            demo.created_at.strftime("%Y-%m-%d"),
        )

    return table
