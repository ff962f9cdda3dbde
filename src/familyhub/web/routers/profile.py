"""Profile and personal settings routes."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from ...db.repositories import ProfileRepository
from ...errors import FamilyHubError
from ...notifications import Notifier
from ...services import ProfileSettings
from ...session import SessionProvider
from ..deps import (
    get_session_provider,
    get_storage,
    get_store,
    redirect,
    redirect_with_toast,
    render,
    require_user,
)

router = APIRouter(tags=["profile"])


def _settings(request: Request, provider: SessionProvider, notifier: Notifier) -> ProfileSettings:
    return ProfileSettings(
        provider.user.id,
        provider.auth,
        ProfileRepository(get_store(request)),
        get_storage(request),
        notifier,
    )


async def _loaded_page(request: Request, provider: SessionProvider, template: str):
    notifier = Notifier()
    profile_settings = _settings(request, provider, notifier)
    await profile_settings.load()
    if profile_settings.error:
        return render(
            request,
            "error.html",
            {"message": profile_settings.error, "retry_url": request.url.path},
            provider=provider,
            notifier=notifier,
            status_code=503,
        )
    return render(
        request,
        template,
        {"profile": profile_settings.profile},
        provider=provider,
        notifier=notifier,
    )


@router.get("/profile", response_class=HTMLResponse)
async def profile_page(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
):
    """Profile card with avatar upload."""
    denied = require_user(request, provider)
    if denied is not None:
        return denied
    return await _loaded_page(request, provider, "profile.html")


@router.post("/profile/avatar")
async def upload_avatar(
    request: Request,
    avatar: UploadFile = File(...),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    data = await avatar.read()
    if not avatar.filename or not data:
        return redirect("/profile", "Please choose an image to upload")

    notifier = Notifier()
    try:
        await _settings(request, provider, notifier).upload_avatar(avatar.filename, data)
    except FamilyHubError:
        # Already reported as an error toast, which travels with the redirect
        pass
    return redirect_with_toast("/profile", notifier)


@router.get("/settings", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
):
    """Personal data and password forms."""
    denied = require_user(request, provider)
    if denied is not None:
        return denied
    return await _loaded_page(request, provider, "settings/personal.html")


@router.post("/settings/profile")
async def save_profile(
    request: Request,
    first_name: str = Form(""),
    last_name: str = Form(""),
    phone: str = Form(""),
    avatar_url: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    try:
        await _settings(request, provider, notifier).update_profile(
            first_name, last_name, phone, avatar_url
        )
    except FamilyHubError:
        pass
    return redirect_with_toast("/settings", notifier)


@router.post("/settings/password")
async def change_password(
    request: Request,
    new_password: str = Form(""),
    confirm_password: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    try:
        await _settings(request, provider, notifier).update_password(
            new_password, confirm_password
        )
    except FamilyHubError:
        pass
    return redirect_with_toast("/settings", notifier)
