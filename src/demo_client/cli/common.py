"""Shared wiring for CLI commands: settings, storage, client, errors."""

import asyncio
import logging
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from demo_client.api.client import APIClient
from demo_client.auth.store import StorageTokenStore
from demo_client.config import Settings
from demo_client.exceptions import DemoClientError
from demo_client.storage import LocalStorage

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep it for --verbose only
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


def get_settings() -> Settings:
    return Settings()


def get_storage(settings: Settings) -> LocalStorage:
    return LocalStorage(settings.storage_path)


@asynccontextmanager
async def open_client(settings: Settings) -> AsyncIterator[APIClient]:
    """APIClient over a fresh httpx client, using the persisted credential."""
    async with httpx.AsyncClient(
        base_url=settings.api_url,
        headers={"Content-Type": "application/json"},
    ) as http:
        yield APIClient(http=http, tokens=StorageTokenStore(get_storage(settings)))


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, turning client errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except DemoClientError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
