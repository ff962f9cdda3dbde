"""Request-scoped helpers shared by the routers.

Every request gets its own ``AuthClient`` (built from the token cookie) and
``SessionProvider``. Page guards turn a missing identity or role into a
redirect carrying a toast, and render a neutral loading page while the
provider has not settled.
"""

from typing import AsyncIterator
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from ..auth import AuthClient
from ..db.store import TableStore
from ..notifications import Notifier, Toast, ToastKind
from ..session import SessionProvider
from ..storage import LocalObjectStorage

TOKEN_COOKIE = "familyhub_token"

SIGN_IN_MESSAGE = "Please sign in to continue"
NO_ACCESS_MESSAGE = "You do not have access to this page"


def get_templates(request: Request) -> Jinja2Templates:
    """Get templates from app state."""
    return request.app.state.templates


def get_store(request: Request) -> TableStore:
    return request.app.state.store


def get_storage(request: Request) -> LocalObjectStorage:
    return request.app.state.storage


async def get_session_provider(request: Request) -> AsyncIterator[SessionProvider]:
    """Resolve the caller's identity for the duration of one request."""
    auth = AuthClient(get_store(request), access_token=request.cookies.get(TOKEN_COOKIE))
    provider = SessionProvider(auth)
    await provider.start()
    try:
        yield provider
    finally:
        provider.close()


def with_notice(url: str, message: str, level: str = "error") -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode({'notice': message, 'level': level})}"


def redirect(url: str, message: str | None = None, level: str = "error") -> RedirectResponse:
    if message:
        url = with_notice(url, message, level)
    return RedirectResponse(url=url, status_code=302)


def redirect_with_toast(url: str, notifier: Notifier) -> RedirectResponse:
    """Redirect carrying the most recent toast, if any."""
    toast = notifier.last
    if toast is None:
        return redirect(url)
    return redirect(url, toast.message, toast.kind.value)


def _query_toasts(request: Request) -> list[Toast]:
    message = request.query_params.get("notice")
    if not message:
        return []
    try:
        kind = ToastKind(request.query_params.get("level", "info"))
    except ValueError:
        kind = ToastKind.INFO
    return [Toast(kind, message)]


def render(
    request: Request,
    template: str,
    context: dict | None = None,
    provider: SessionProvider | None = None,
    notifier: Notifier | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    """Render a page with the shared layout context (identity and toasts)."""
    toasts = _query_toasts(request)
    if notifier is not None:
        toasts.extend(notifier.drain())

    page_context = {
        "current_user": provider.user if provider else None,
        "current_profile": provider.profile if provider else None,
        "is_admin": provider.is_admin if provider else False,
        "is_super_admin": provider.is_super_admin if provider else False,
        "toasts": toasts,
    }
    page_context.update(context or {})
    return get_templates(request).TemplateResponse(
        request, template, page_context, status_code=status_code
    )


def _settling(provider: SessionProvider) -> bool:
    return provider.loading or (provider.user is not None and not provider.roles_resolved)


def require_user(request: Request, provider: SessionProvider) -> Response | None:
    """None when the caller may see the page, otherwise the response to send."""
    if _settling(provider):
        return render(request, "loading.html", provider=provider)
    if provider.user is None:
        return redirect("/auth", SIGN_IN_MESSAGE)
    return None


def require_admin(
    request: Request, provider: SessionProvider, super_admin: bool = False
) -> Response | None:
    denied = require_user(request, provider)
    if denied is not None:
        return denied
    allowed = provider.is_super_admin if super_admin else provider.is_admin
    if not allowed:
        return redirect("/", NO_ACCESS_MESSAGE)
    return None
