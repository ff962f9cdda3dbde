"""Admin routes: forum moderation and granting admin rights."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from ...db.repositories import ForumRepository
from ...errors import FamilyHubError
from ...logging_config import get_logger
from ...notifications import Notifier
from ...services import ForumModeration
from ...session import SessionProvider
from ..deps import (
    get_session_provider,
    get_store,
    redirect,
    redirect_with_toast,
    render,
    require_admin,
)

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])

FORUM_ADMIN_URL = "/admin/forum"


async def _moderation(request: Request, notifier: Notifier) -> ForumModeration:
    moderation = ForumModeration(ForumRepository(get_store(request)), notifier)
    await moderation.load()
    return moderation


@router.get("/admin/forum", response_class=HTMLResponse)
async def forum_admin_page(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
):
    """All posts with lock, pin and delete actions, plus categories."""
    denied = require_admin(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    moderation = await _moderation(request, notifier)
    return render(
        request,
        "admin/forum.html",
        {"moderation": moderation},
        provider=provider,
        notifier=notifier,
    )


@router.post("/admin/forum/{post_id}/lock")
async def toggle_lock(
    request: Request,
    post_id: str,
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_admin(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    moderation = await _moderation(request, notifier)
    try:
        await moderation.toggle_lock(post_id)
    except FamilyHubError:
        # Already reported as an error toast, which travels with the redirect
        pass
    return redirect_with_toast(FORUM_ADMIN_URL, notifier)


@router.post("/admin/forum/{post_id}/pin")
async def toggle_pin(
    request: Request,
    post_id: str,
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_admin(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    moderation = await _moderation(request, notifier)
    try:
        await moderation.toggle_pin(post_id)
    except FamilyHubError:
        pass
    return redirect_with_toast(FORUM_ADMIN_URL, notifier)


@router.post("/admin/forum/{post_id}/delete")
async def delete_post(
    request: Request,
    post_id: str,
    confirm: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    """Delete a post. The form must carry ``confirm=yes``."""
    denied = require_admin(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    moderation = await _moderation(request, notifier)
    try:
        deleted = await moderation.delete(post_id, confirmed=confirm == "yes")
    except FamilyHubError:
        return redirect_with_toast(FORUM_ADMIN_URL, notifier)
    if not deleted:
        return redirect(FORUM_ADMIN_URL, "Deletion was not confirmed", "info")
    return redirect_with_toast(FORUM_ADMIN_URL, notifier)


@router.post("/admin/forum/categories")
async def create_category(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_admin(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    moderation = await _moderation(request, notifier)
    try:
        await moderation.create_category(name, description)
    except FamilyHubError:
        pass
    return redirect_with_toast(FORUM_ADMIN_URL, notifier)


@router.get("/super-admin", response_class=HTMLResponse)
async def super_admin_page(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
):
    """Grant admin rights by email."""
    denied = require_admin(request, provider, super_admin=True)
    if denied is not None:
        return denied
    return render(request, "admin/super.html", {"email": ""}, provider=provider)


@router.post("/super-admin/admins")
async def make_admin(
    request: Request,
    email: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_admin(request, provider, super_admin=True)
    if denied is not None:
        return denied

    if not email.strip():
        return redirect("/super-admin", "Please enter an email address")

    try:
        profile = await provider.make_admin(email)
    except FamilyHubError as e:
        logger.warning(f"make_admin({email}) failed: {e}")
        return redirect("/super-admin", f"Could not grant admin rights: {e}")
    return redirect("/super-admin", f"{profile.email} is now an admin", "success")
