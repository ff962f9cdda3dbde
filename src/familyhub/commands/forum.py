"""Forum moderation commands (admins only)."""

import click

from ..db import ForumRepository, TableStore
from ..errors import FamilyHubError
from ..notifications import Notifier
from ..services import ForumModeration
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_toasts,
    ensure_initialized,
    format_table,
    start_session,
)


@click.group()
def forum():
    """Moderate forum posts and categories."""
    pass


async def _moderation(ctx: click.Context) -> tuple[ForumModeration, Notifier]:
    """Admin check plus a loaded moderation view."""
    provider = await start_session(ctx)
    provider.close()
    if not provider.is_admin:
        echo_error("Admin rights required.")
        ctx.exit(1)

    notifier = Notifier()
    moderation = ForumModeration(ForumRepository(TableStore()), notifier)
    await moderation.load()
    if moderation.error:
        echo_toasts(notifier)
        ctx.exit(1)
    return moderation, notifier


def _resolve(ctx: click.Context, moderation: ForumModeration, post_id: str) -> str:
    """Expand a short id prefix to the full post id."""
    matches = [p.id for p in moderation.posts if p.id.startswith(post_id)]
    if len(matches) != 1:
        echo_error(f"Post {post_id} not found" if not matches else f"Post id {post_id} is ambiguous")
        ctx.exit(1)
    return matches[0]


@forum.command("posts")
@click.pass_context
@async_command
async def posts(ctx: click.Context):
    """List all posts, newest first."""
    ensure_initialized(ctx)
    moderation, _ = await _moderation(ctx)

    if not moderation.posts:
        echo_info("No posts yet.")
        return

    rows = [
        [
            p.id[:8],
            p.title,
            p.author_name,
            str(p.reply_count),
            "yes" if p.is_locked else "",
            "yes" if p.is_pinned else "",
        ]
        for p in moderation.posts
    ]
    click.echo(format_table(["ID", "Title", "Author", "Replies", "Locked", "Pinned"], rows))


@forum.command("lock")
@click.argument("post_id")
@click.pass_context
@async_command
async def lock(ctx: click.Context, post_id: str):
    """Toggle the locked flag of a post."""
    ensure_initialized(ctx)
    moderation, notifier = await _moderation(ctx)
    try:
        await moderation.toggle_lock(_resolve(ctx, moderation, post_id))
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)
    echo_toasts(notifier)


@forum.command("pin")
@click.argument("post_id")
@click.pass_context
@async_command
async def pin(ctx: click.Context, post_id: str):
    """Toggle the pinned flag of a post."""
    ensure_initialized(ctx)
    moderation, notifier = await _moderation(ctx)
    try:
        await moderation.toggle_pin(_resolve(ctx, moderation, post_id))
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)
    echo_toasts(notifier)


@forum.command("delete")
@click.argument("post_id")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
@async_command
async def delete(ctx: click.Context, post_id: str, yes: bool):
    """Permanently delete a post and its replies."""
    ensure_initialized(ctx)
    moderation, notifier = await _moderation(ctx)
    full_id = _resolve(ctx, moderation, post_id)

    confirmed = yes or click.confirm("Delete this post permanently?", default=False)
    try:
        deleted = await moderation.delete(full_id, confirmed=confirmed)
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)

    if not deleted:
        echo_info("Cancelled.")
        return
    echo_toasts(notifier)


@forum.command("add-category")
@click.argument("name")
@click.option("--description", "-d", default="", help="Category description")
@click.pass_context
@async_command
async def add_category(ctx: click.Context, name: str, description: str):
    """Create a forum category."""
    ensure_initialized(ctx)
    moderation, notifier = await _moderation(ctx)
    try:
        await moderation.create_category(name, description)
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)
    echo_toasts(notifier)
