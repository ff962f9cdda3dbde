"""Sign-in, sign-up and sign-out routes."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ...auth import AuthClient, Session
from ...config import settings
from ...errors import FamilyHubError
from ...logging_config import get_logger
from ...notifications import Notifier
from ...session import SessionProvider
from ..deps import TOKEN_COOKIE, get_session_provider, get_store, redirect, render

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _signed_in(session: Session, message: str) -> RedirectResponse:
    response = redirect("/", message, "success")
    response.set_cookie(
        TOKEN_COOKIE,
        session.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return response


@router.get("", response_class=HTMLResponse)
async def auth_page(
    request: Request,
    mode: str = "login",
    provider: SessionProvider = Depends(get_session_provider),
):
    """Sign-in and sign-up forms."""
    if provider.user is not None:
        return redirect("/")
    return render(
        request,
        "auth.html",
        {"mode": "signup" if mode == "signup" else "login", "email": ""},
        provider=provider,
    )


@router.post("")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
):
    client = AuthClient(get_store(request))
    try:
        session = await client.sign_in_with_password(email, password)
    except FamilyHubError as e:
        notifier = Notifier()
        notifier.error(str(e))
        return render(
            request,
            "auth.html",
            {"mode": "login", "email": email},
            notifier=notifier,
            status_code=400,
        )
    return _signed_in(session, "Welcome back!")


@router.post("/signup")
async def signup(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
):
    client = AuthClient(get_store(request))
    try:
        session = await client.sign_up(email, password)
    except FamilyHubError as e:
        notifier = Notifier()
        notifier.error(str(e))
        return render(
            request,
            "auth.html",
            {"mode": "signup", "email": email},
            notifier=notifier,
            status_code=400,
        )
    return _signed_in(session, "Your account has been created")


@router.post("/logout")
async def logout(provider: SessionProvider = Depends(get_session_provider)):
    try:
        await provider.sign_out()
    except FamilyHubError as e:
        logger.error(f"Sign-out failed: {e}")
        return redirect("/", "Could not sign out, please try again")

    response = redirect("/auth", "You have been signed out", "info")
    response.delete_cookie(TOKEN_COOKIE)
    return response
