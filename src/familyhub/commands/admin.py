"""Admin role commands."""

import click

from ..db import ProfileRepository, TableStore
from ..errors import FamilyHubError
from .base import async_command, echo_error, echo_success, ensure_initialized, start_session


@click.group()
def admin():
    """Grant admin rights."""
    pass


@admin.command("grant")
@click.argument("email")
@click.pass_context
@async_command
async def grant(ctx: click.Context, email: str):
    """Make the user registered under EMAIL an admin (super admins only)."""
    ensure_initialized(ctx)
    provider = await start_session(ctx)
    provider.close()

    if not provider.is_super_admin:
        echo_error("Super admin rights required.")
        ctx.exit(1)

    try:
        profile = await provider.make_admin(email)
    except FamilyHubError as e:
        echo_error(f"Could not grant admin rights: {e}")
        ctx.exit(1)

    echo_success(f"{profile.email} is now an admin")


@admin.command("promote")
@click.argument("email")
@click.option("--super", "super_admin", is_flag=True, help="Also grant super admin rights")
@click.pass_context
@async_command
async def promote(ctx: click.Context, email: str, super_admin: bool):
    """Set role flags directly in the database.

    Meant for the operator bootstrapping the first super admin; no sign-in
    is required.
    """
    ensure_initialized(ctx)

    profiles = ProfileRepository(TableStore())
    target = await profiles.get_by_email(email)
    if target is None:
        echo_error(f"No user found with email {email}")
        ctx.exit(1)

    try:
        await profiles.set_roles(
            target.id, is_admin=True, is_super_admin=True if super_admin else None
        )
    except FamilyHubError as e:
        echo_error(str(e))
        ctx.exit(1)

    role = "super admin" if super_admin else "admin"
    echo_success(f"{target.email} is now a {role}")
