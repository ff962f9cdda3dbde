"""Forum routes for members."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from ...db.repositories import ForumRepository
from ...errors import FamilyHubError
from ...notifications import Notifier
from ...services import ForumBoard
from ...session import SessionProvider
from ..deps import get_session_provider, get_store, redirect_with_toast, render, require_user

router = APIRouter(prefix="/forum", tags=["forum"])


def _board(
    request: Request,
    provider: SessionProvider,
    notifier: Notifier,
    category_id: str | None = None,
) -> ForumBoard:
    author_id = provider.user.id if provider.user else None
    author_name = provider.profile.display_name if provider.profile else None
    return ForumBoard(
        author_id,
        author_name,
        category_id,
        ForumRepository(get_store(request)),
        notifier,
    )


@router.get("", response_class=HTMLResponse)
async def forum_page(
    request: Request,
    category: str | None = None,
    provider: SessionProvider = Depends(get_session_provider),
):
    """Posts, pinned first, optionally within one category."""
    notifier = Notifier()
    board = _board(request, provider, notifier, category or None)
    await board.load()
    return render(
        request,
        "forum/list.html",
        {"board": board, "selected_category": category},
        provider=provider,
        notifier=notifier,
    )


@router.post("")
async def create_post(
    request: Request,
    title: str = Form(""),
    content: str = Form(""),
    category_id: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    board = _board(request, provider, notifier)
    try:
        post = await board.create_post(title, content, category_id or None)
    except FamilyHubError:
        return redirect_with_toast("/forum", notifier)
    return redirect_with_toast(f"/forum/{post.id}", notifier)


@router.get("/{post_id}", response_class=HTMLResponse)
async def thread_page(
    request: Request,
    post_id: str,
    provider: SessionProvider = Depends(get_session_provider),
):
    notifier = Notifier()
    board = _board(request, provider, notifier)
    post = await board.get_thread(post_id)
    if post is None:
        return render(
            request,
            "error.html",
            {"message": board.error or "Post not found", "retry_url": request.url.path},
            provider=provider,
            notifier=notifier,
            status_code=404,
        )
    return render(
        request,
        "forum/thread.html",
        {"board": board, "post": post},
        provider=provider,
        notifier=notifier,
    )


@router.post("/{post_id}/replies")
async def add_reply(
    request: Request,
    post_id: str,
    content: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    try:
        await _board(request, provider, notifier).add_reply(post_id, content)
    except FamilyHubError:
        # Already reported as an error toast, which travels with the redirect
        pass
    return redirect_with_toast(f"/forum/{post_id}", notifier)
