"""Initialize project command."""

import click

from ..config import settings
from ..db import get_db_path, init_db
from .base import async_command, echo_info, echo_success, get_data_dir


@click.command()
@async_command
async def init():
    """Initialize the familyhub data directory and database.

    Creates the data and uploads directories and the SQLite schema. Safe to
    run again: existing tables and rows are kept.
    """
    data_dir = get_data_dir()
    echo_info(f"Initializing familyhub in {data_dir}")

    data_dir.mkdir(parents=True, exist_ok=True)
    settings.UPLOADS_DIR.mkdir(parents=True, exist_ok=True)

    await init_db(get_db_path(data_dir))
    echo_success("Database initialized")

    click.echo()
    click.echo("familyhub is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create an account:")
    click.echo("     familyhub auth signup you@example.com")
    click.echo()
    click.echo("  2. Make yourself a super admin (local operator only):")
    click.echo("     familyhub admin promote you@example.com --super")
    click.echo()
    click.echo("  3. Start the web interface:")
    click.echo("     familyhub serve")
