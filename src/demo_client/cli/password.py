"""Password recovery CLI commands: forgot, validate, reset."""

import typer

from demo_client.cli.common import console, err_console, get_settings, open_client, run

password_app = typer.Typer(help="Recover access to your account")

MIN_PASSWORD_LENGTH = 8


@password_app.command("forgot")
def forgot_password(
    email: str = typer.Option(..., "--email", "-e", prompt=True),
) -> None:
    """Email a password reset link."""

    async def _forgot() -> None:
        async with open_client(get_settings()) as api:
            await api.request_password_reset(email)
        console.print(
            "We've sent a password reset link to your email address. "
            "The link will expire in 1 hour."
        )

    run(_forgot())


@password_app.command("validate")
def validate_token(
    token: str = typer.Argument(..., help="Token from the reset link"),
) -> None:
    """Check whether a reset token is still usable."""

    async def _validate() -> None:
        async with open_client(get_settings()) as api:
            await api.validate_reset_token(token)
        console.print("Reset token is valid")

    run(_validate())


@password_app.command("reset")
def reset_password(
    token: str = typer.Argument(..., help="Token from the reset link"),
    password: str = typer.Option(
        ..., "--password", prompt="New password", hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Set a new password."""
    if len(password) < MIN_PASSWORD_LENGTH:
        err_console.print(
            f"[red]Password must be at least {MIN_PASSWORD_LENGTH} characters long[/red]"
        )
        raise typer.Exit(1)

    async def _reset() -> None:
        async with open_client(get_settings()) as api:
            await api.validate_reset_token(token)
            await api.reset_password(token, password)
        console.print("Password reset. Sign in with [cyan]demo-client auth login[/cyan].")

    run(_reset())
