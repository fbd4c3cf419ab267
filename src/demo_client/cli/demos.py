"""Demo CLI commands.

This module provides the commands a learner uses day to day:
- generate: Submit a prompt and (by default) watch it until it finishes
- watch: Follow an existing demo until it finishes
- show: Print a demo with one step expanded
- download: Save the rendered video
- share: Create a share link
- credits: Show remaining quota
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel

from demo_client.cli.common import (
    console,
    err_console,
    get_settings,
    get_storage,
    open_client,
    run,
)
from demo_client.cli.render import (
    format_duration,
    format_size,
    status_label,
    steps_table,
)
from demo_client.exceptions import DemoClientError
from demo_client.lifecycle.controller import (
    DemoLifecycleController,
    LifecycleSnapshot,
    LifecycleState,
)
from demo_client.lifecycle.steps import StepViewModel
from demo_client.storage import load_preferences, remember_query
from demo_client.types import Demo, GenerationOptions, Language, Quality, Voice

logger = logging.getLogger(__name__)

demos_app = typer.Typer(help="Generate and view demos")


def _describe(snapshot: LifecycleSnapshot) -> str:
    if snapshot.demo is None:
        text = f"Waiting for demo {snapshot.demo_id}..."
    else:
        text = f"Demo {snapshot.demo_id}: {status_label(snapshot.demo)}"
    if snapshot.error is not None:
        text += f" [yellow](retrying: {snapshot.error})[/yellow]"
    return text


def _print_demo(demo: Demo, view: StepViewModel) -> None:
    console.print(f"{status_label(demo)}  [bold]{demo.prompt}[/bold]")
    console.print(f"Duration: {format_duration(demo.duration)}")
    console.print(f"File size: {format_size(demo.file_size)}")
    if demo.video_url:
        console.print(f"Video: {demo.video_url}")

    if not view.steps:
        console.print("[dim]Steps not yet generated...[/dim]")
        return

    console.print(steps_table(view))
    step = view.active_step
    if step is not None:
        body = step.description
        if step.media:
            body += f"\n\n[dim]{step.media}[/dim]"
        console.print(Panel(body, title=f"Step {step.step_number}: {step.title}"))


async def _follow(controller: DemoLifecycleController, timeout: float) -> None:
    """Render lifecycle updates until the demo finishes, then print it."""
    with console.status(_describe(controller.snapshot())) as status:
        controller.subscribe(lambda snapshot: status.update(_describe(snapshot)))
        try:
            final = await asyncio.wait_for(controller.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            controller.close()
            err_console.print(
                f"[red]Timed out after {timeout:g}s waiting for demo "
                f"{controller.demo_id}[/red]"
            )
            raise typer.Exit(1)

    if final.state is LifecycleState.ERRORED and final.error is not None:
        raise final.error
    if final.demo is None:
        return

    view = StepViewModel()
    view.update(final.demo)
    _print_demo(final.demo, view)

    if final.state is LifecycleState.FAILED:
        err_console.print("[red]Demo generation failed.[/red]")
        raise typer.Exit(1)
    if controller.can_download:
        console.print(
            f"Run [cyan]demo-client demo download {final.demo_id}[/cyan] "
            f"or [cyan]demo-client demo share {final.demo_id}[/cyan]."
        )


@demos_app.command("generate")
def generate(
    prompt: str = typer.Argument(..., help="What would you like to learn?"),
    quality: Optional[Quality] = typer.Option(None, "--quality", "-q", help="Video quality"),
    voice: Optional[Voice] = typer.Option(None, "--voice", help="Narration voice"),
    language: Optional[Language] = typer.Option(None, "--language", "-l", help="Narration language"),
    watch: bool = typer.Option(True, "--watch/--no-watch", help="Follow generation until it finishes"),
) -> None:
    """Submit a learning request and follow its generation."""

    async def _generate() -> None:
        settings = get_settings()
        storage = get_storage(settings)
        preferences = load_preferences(storage)
        options = GenerationOptions(
            language=language or preferences.language,
            quality=quality or preferences.quality,
            voice=voice or preferences.voice,
        )

        async with open_client(settings) as api:
            async with DemoLifecycleController(
                api,
                poll_interval=settings.poll_interval,
                remaining_quota=settings.free_tier_quota,
            ) as controller:
                try:
                    await controller.refresh_quota()
                except DemoClientError as e:
                    logger.warning(
                        "Could not read credits (%s); assuming %d remaining",
                        e,
                        settings.free_tier_quota,
                    )

                demo_id = await controller.submit(prompt, options)
                remember_query(storage, prompt)
                console.print(
                    f"Demo generation started! [cyan]{demo_id}[/cyan] "
                    f"({controller.remaining_quota} demos left this month)"
                )
                if watch:
                    await _follow(controller, settings.generation_timeout)

    run(_generate())


@demos_app.command("watch")
def watch_demo(
    demo_id: str = typer.Argument(..., help="Demo ID to follow"),
) -> None:
    """Follow an existing demo until it completes or fails."""

    async def _watch() -> None:
        settings = get_settings()
        async with open_client(settings) as api:
            async with DemoLifecycleController(
                api, poll_interval=settings.poll_interval
            ) as controller:
                controller.watch(demo_id)
                await _follow(controller, settings.generation_timeout)

    run(_watch())


@demos_app.command("show")
def show_demo(
    demo_id: str = typer.Argument(..., help="Demo ID to show"),
    step: int = typer.Option(1, "--step", "-s", help="Step to expand (1-based position)"),
) -> None:
    """Print a demo once, with one step expanded."""

    async def _show() -> None:
        async with open_client(get_settings()) as api:
            demo = await api.get_demo(demo_id)

        view = StepViewModel()
        view.update(demo)
        view.select(step - 1)
        _print_demo(demo, view)

    run(_show())


@demos_app.command("download")
def download_demo(
    demo_id: str = typer.Argument(..., help="Demo ID to download"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Destination file"),
) -> None:
    """Download the rendered video."""

    async def _download() -> None:
        async with open_client(get_settings()) as api:
            content = await api.download_demo(demo_id)

        path = output or Path(f"demo-{demo_id}.mp4")
        path.write_bytes(content)
        console.print(f"Saved {format_size(len(content))} to {path}")

    run(_download())


@demos_app.command("share")
def share_demo(
    demo_id: str = typer.Argument(..., help="Demo ID to share"),
) -> None:
    """Create a share link."""

    async def _share() -> None:
        async with open_client(get_settings()) as api:
            url = await api.share_demo(demo_id)
        console.print(url)

    run(_share())


@demos_app.command("credits")
def show_credits() -> None:
    """Show how many demos you can still generate this month."""

    async def _credits() -> None:
        async with open_client(get_settings()) as api:
            credits = await api.get_credits()
        limit = "unlimited" if credits.limit is None else str(credits.limit)
        console.print(f"{credits.remaining} demos remaining (limit: {limit})")

    run(_credits())
