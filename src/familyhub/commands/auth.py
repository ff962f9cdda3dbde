"""Account commands: sign up, sign in, sign out."""

import click

from ..auth import AuthClient
from ..db import TableStore
from ..errors import FamilyHubError
from ..session import SessionProvider
from .base import (
    async_command,
    clear_token,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    load_token,
    save_token,
    start_session,
)


@click.group()
def auth():
    """Manage the CLI session."""
    pass


@auth.command("signup")
@click.argument("email")
@click.password_option(help="Password (at least 6 characters)")
@click.pass_context
@async_command
async def signup(ctx: click.Context, email: str, password: str):
    """Create an account and sign in."""
    ensure_initialized(ctx)

    client = AuthClient(TableStore())
    try:
        session = await client.sign_up(email, password)
    except FamilyHubError as e:
        echo_error(str(e))
        ctx.exit(1)

    save_token(session.access_token)
    echo_success(f"Account created, signed in as {session.user.email}")


@auth.command("login")
@click.argument("email")
@click.password_option(confirmation_prompt=False)
@click.pass_context
@async_command
async def login(ctx: click.Context, email: str, password: str):
    """Sign in with email and password."""
    ensure_initialized(ctx)

    client = AuthClient(TableStore())
    try:
        session = await client.sign_in_with_password(email, password)
    except FamilyHubError as e:
        echo_error(str(e))
        ctx.exit(1)

    save_token(session.access_token)
    echo_success(f"Signed in as {session.user.email}")


@auth.command("logout")
@click.pass_context
@async_command
async def logout(ctx: click.Context):
    """Revoke the stored session."""
    ensure_initialized(ctx)

    provider = SessionProvider(AuthClient(TableStore(), access_token=load_token()))
    await provider.start()
    if provider.user is None:
        provider.close()
        clear_token()
        echo_info("Not signed in.")
        return

    try:
        await provider.sign_out()
    except FamilyHubError as e:
        echo_error(f"Could not sign out: {e}")
        ctx.exit(1)
    finally:
        provider.close()

    clear_token()
    echo_success("Signed out")


@auth.command("whoami")
@click.pass_context
@async_command
async def whoami(ctx: click.Context):
    """Show the signed-in user and role flags."""
    ensure_initialized(ctx)

    provider = await start_session(ctx)
    provider.close()

    profile = provider.profile
    click.echo(f"Email:       {provider.user.email}")
    if profile:
        click.echo(f"Name:        {profile.display_name}")
    click.echo(f"Admin:       {'yes' if provider.is_admin else 'no'}")
    click.echo(f"Super admin: {'yes' if provider.is_super_admin else 'no'}")
