"""Experience (activity) management commands."""

import click
import questionary

from ..db import ActivityRepository, ScheduleRepository, TableStore
from ..errors import FamilyHubError
from ..notifications import Notifier
from ..services import ActivitySchedules, HostExperiences
from .base import (
    async_command,
    custom_style,
    echo_error,
    echo_info,
    echo_toasts,
    ensure_initialized,
    format_table,
    start_session,
)


@click.group()
def experiences():
    """Manage the experiences you host.

    New experiences are always created as drafts.
    """
    pass


@experiences.command("list")
@click.option("--page", "-p", default=1, type=int, help="Load pages 1..N (default: 1)")
@click.pass_context
@async_command
async def list_experiences(ctx: click.Context, page: int):
    """List your experiences, newest first."""
    ensure_initialized(ctx)
    provider = await start_session(ctx)
    provider.close()

    notifier = Notifier()
    host = HostExperiences(provider.user.id, ActivityRepository(TableStore()), notifier)
    await host.load_through(max(page, 1))
    echo_toasts(notifier)

    if not host.experiences:
        echo_info("No experiences yet. Create one with 'familyhub experiences create'.")
        return

    rows = [
        [a.id[:8], a.title, f"{a.price}", a.status.label, a.created_at.strftime("%Y-%m-%d")]
        for a in host.experiences
    ]
    click.echo(format_table(["ID", "Title", "Price", "Status", "Created"], rows))
    if host.has_more:
        click.echo()
        echo_info(f"More available: familyhub experiences list --page {host.page + 1}")


@experiences.command("create")
@click.option("--title", help="Title (prompted when missing)")
@click.option("--price", help="Price (prompted when missing)")
@click.option("--location", default="", help="Location")
@click.option("--description", default="", help="Description")
@click.pass_context
@async_command
async def create(
    ctx: click.Context,
    title: str | None,
    price: str | None,
    location: str,
    description: str,
):
    """Create a draft experience.

    Without --title/--price an interactive form is shown.
    """
    ensure_initialized(ctx)
    provider = await start_session(ctx)
    provider.close()

    if title is None:
        title = await questionary.text("Title:", style=custom_style).ask_async()
    if price is None:
        price = await questionary.text("Price:", default="0", style=custom_style).ask_async()
        location = location or await questionary.text(
            "Location (optional):", style=custom_style
        ).ask_async()
        description = description or await questionary.text(
            "Description (optional):", multiline=True, style=custom_style
        ).ask_async()

    notifier = Notifier()
    host = HostExperiences(
        provider.user.id,
        ActivityRepository(TableStore()),
        notifier,
        creator_name=provider.profile.display_name if provider.profile else None,
    )
    fields = {"title": title, "price": price, "location": location, "description": description}
    try:
        created = await host.create(fields)
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)

    echo_toasts(notifier)
    click.echo(f"  ID: {created.id}")


async def _owned_activity(ctx: click.Context, store: TableStore, activity_id: str, user_id: str):
    repo = ActivityRepository(store)
    activity = await repo.get_owned(activity_id, user_id)
    if activity is None:
        # Accept the short id shown by 'experiences list'
        for candidate in await repo.list_by_creator(user_id, page=1, page_size=1000):
            if candidate.id.startswith(activity_id):
                return candidate
        echo_error(f"Experience {activity_id} not found")
        ctx.exit(1)
    return activity


@experiences.command("schedules")
@click.argument("activity_id")
@click.pass_context
@async_command
async def list_schedules(ctx: click.Context, activity_id: str):
    """List the dates of one of your experiences."""
    ensure_initialized(ctx)
    provider = await start_session(ctx)
    provider.close()

    store = TableStore()
    activity = await _owned_activity(ctx, store, activity_id, provider.user.id)

    notifier = Notifier()
    schedules = ActivitySchedules(activity.id, ScheduleRepository(store), notifier)
    await schedules.load()
    echo_toasts(notifier)

    if not schedules.schedules:
        echo_info(f"No dates for '{activity.title}' yet.")
        return

    rows = [
        [
            s.date.isoformat(),
            s.time_range,
            f"{s.booked_spots}/{s.available_spots}",
            f"{s.effective_price(activity.price)}",
        ]
        for s in schedules.schedules
    ]
    click.echo(format_table(["Date", "Time", "Booked", "Price"], rows))


@experiences.command("add-schedule")
@click.argument("activity_id")
@click.option("--date", "day", help="Date (YYYY-MM-DD)")
@click.option("--start", "start_time", help="Start time (HH:MM)")
@click.option("--end", "end_time", help="End time (HH:MM)")
@click.option("--spots", type=int, help="Available spots")
@click.option("--price", "price_override", default="", help="Price for this date only")
@click.pass_context
@async_command
async def add_schedule(
    ctx: click.Context,
    activity_id: str,
    day: str | None,
    start_time: str | None,
    end_time: str | None,
    spots: int | None,
    price_override: str,
):
    """Add a date to one of your experiences. Missing values are prompted."""
    ensure_initialized(ctx)
    provider = await start_session(ctx)
    provider.close()

    store = TableStore()
    activity = await _owned_activity(ctx, store, activity_id, provider.user.id)

    if day is None:
        day = await questionary.text("Date (YYYY-MM-DD):", style=custom_style).ask_async()
    if start_time is None:
        start_time = await questionary.text("Start time (HH:MM):", style=custom_style).ask_async()
    if end_time is None:
        end_time = await questionary.text("End time (HH:MM):", style=custom_style).ask_async()
    if spots is None:
        spots = await questionary.text("Available spots:", style=custom_style).ask_async()

    notifier = Notifier()
    schedules = ActivitySchedules(activity.id, ScheduleRepository(store), notifier)
    fields = {
        "date": day,
        "start_time": start_time,
        "end_time": end_time,
        "available_spots": spots,
        "price_override": price_override,
    }
    try:
        await schedules.add_schedule(fields)
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)

    echo_toasts(notifier)
    click.echo(f"  '{activity.title}' now has {len(schedules.schedules)} date(s)")
