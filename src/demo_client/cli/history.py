"""History CLI commands.

- list: Display one page of history in table or JSON format
- delete: Delete a demo and show the page without it
"""

import json

import typer

from demo_client.cli.common import console, get_settings, open_client, run
from demo_client.cli.render import history_table
from demo_client.history.controller import HistoryListController, SortCriterion

history_app = typer.Typer(help="Browse and manage generated demos")


@history_app.command("list")
def list_history(
    page: int = typer.Option(1, "--page", "-p", help="Page number (clamped to the last page)"),
    sort: SortCriterion = typer.Option(SortCriterion.RECENT, "--sort", "-s", help="Order within the page"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List one page of your demos."""

    async def _list() -> None:
        settings = get_settings()
        async with open_client(settings) as api:
            history = HistoryListController(api, page_size=settings.page_size)
            # First load learns total_pages so an out-of-range page clamps
            await history.load_page(1)
            if page != 1:
                await history.load_page(page)

        demos = history.sort(sort)

        if json_output:
            data = {
                "page": history.page,
                "total_pages": history.total_pages,
                "demos": [
                    {
                        "id": d.id,
                        "prompt": d.prompt,
                        "status": d.status.value,
                        "duration": d.duration,
                        "created_at": d.created_at.isoformat(),
                        "thumbnail_url": d.thumbnail_url,
                    }
                    for d in demos
                ],
            }
            print(json.dumps(data, indent=2))
            return

        if not demos:
            console.print("No demos yet. Create one with [cyan]demo-client demo generate[/cyan].")
            return

        console.print(history_table(demos, history.page, history.total_pages))

    run(_list())


@history_app.command("delete")
def delete_demo(
    demo_id: str = typer.Argument(..., help="Demo ID to delete"),
    page: int = typer.Option(1, "--page", "-p", help="Page to show afterwards"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a demo."""
    if not yes:
        typer.confirm("Are you sure you want to delete this demo?", abort=True)

    async def _delete() -> None:
        settings = get_settings()
        async with open_client(settings) as api:
            history = HistoryListController(api, page_size=settings.page_size)
            await history.load_page(page)
            await history.delete(demo_id)

        console.print(f"Deleted demo {demo_id}")
        if history.items:
            console.print(
                history_table(history.visible_items, history.page, history.total_pages)
            )

    run(_delete())
