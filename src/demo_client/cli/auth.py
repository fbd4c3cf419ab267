"""Account CLI commands: register, login, logout, me, and preferences."""

from typing import Optional

import typer

from demo_client.auth.session import AuthSession
from demo_client.cli.common import console, get_settings, get_storage, open_client, run
from demo_client.storage import (
    load_preferences,
    recent_queries,
    save_preferences,
)
from demo_client.types import Language, Quality, Voice

auth_app = typer.Typer(help="Sign in and manage your account")
prefs_app = typer.Typer(help="Generation defaults remembered between runs")


@auth_app.command("register")
def register(
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    name: str = typer.Option(..., "--name", "-n", prompt=True),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Create an account."""

    async def _register() -> None:
        async with open_client(get_settings()) as api:
            profile = await AuthSession(api=api, tokens=api.tokens).register(
                email, password, name
            )
        console.print(f"Account created for {profile.email}. Run [cyan]demo-client auth login[/cyan].")

    run(_register())


@auth_app.command("login")
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Sign in and remember the credential until logout."""

    async def _login() -> None:
        async with open_client(get_settings()) as api:
            await AuthSession(api=api, tokens=api.tokens).login(email, password)
        console.print(f"Signed in as {email}")

    run(_login())


@auth_app.command("logout")
def logout() -> None:
    """Forget the stored credential."""

    async def _logout() -> None:
        async with open_client(get_settings()) as api:
            AuthSession(api=api, tokens=api.tokens).logout()
        console.print("Signed out")

    run(_logout())


@auth_app.command("me")
def me() -> None:
    """Show the signed-in account."""

    async def _me() -> None:
        async with open_client(get_settings()) as api:
            session = AuthSession(api=api, tokens=api.tokens)
            if not session.is_authenticated:
                console.print("Not signed in")
                raise typer.Exit(1)
            profile = await session.current_user()
        console.print(f"{profile.name or profile.email} <{profile.email}> (id {profile.id})")

    run(_me())


@prefs_app.command("show")
def show_preferences() -> None:
    """Show saved generation defaults and recent prompts."""
    storage = get_storage(get_settings())
    prefs = load_preferences(storage)
    console.print(f"Language: {prefs.language.value}")
    console.print(f"Quality: {prefs.quality.value}")
    console.print(f"Voice: {prefs.voice.value}")
    queries = recent_queries(storage)
    if queries:
        console.print("Recent prompts:")
        for query in queries:
            console.print(f"  - {query}")


@prefs_app.command("set")
def set_preferences(
    quality: Optional[Quality] = typer.Option(None, "--quality", "-q"),
    voice: Optional[Voice] = typer.Option(None, "--voice"),
    language: Optional[Language] = typer.Option(None, "--language", "-l"),
) -> None:
    """Change saved generation defaults."""
    storage = get_storage(get_settings())
    prefs = load_preferences(storage)
    if quality is not None:
        prefs.quality = quality
    if voice is not None:
        prefs.voice = voice
    if language is not None:
        prefs.language = language
    save_preferences(storage, prefs)
    console.print("Preferences saved")
