"""Host balance and withdrawal routes."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from ...db.repositories import BalanceRepository, ProfileRepository
from ...errors import FamilyHubError
from ...notifications import Notifier
from ...services import HostWallet
from ...session import SessionProvider
from ..deps import get_session_provider, get_store, redirect_with_toast, render, require_user

router = APIRouter(prefix="/settings/bank", tags=["wallet"])


async def _wallet(request: Request, provider: SessionProvider, notifier: Notifier) -> HostWallet:
    store = get_store(request)
    wallet = HostWallet(
        provider.user.id, BalanceRepository(store), ProfileRepository(store), notifier
    )
    await wallet.load()
    return wallet


@router.get("", response_class=HTMLResponse)
async def bank_page(
    request: Request,
    provider: SessionProvider = Depends(get_session_provider),
):
    """Balance summary, withdrawal form and payout account."""
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    wallet = await _wallet(request, provider, notifier)
    return render(
        request,
        "settings/bank.html",
        {"wallet": wallet},
        provider=provider,
        notifier=notifier,
    )


@router.post("/withdraw")
async def withdraw(
    request: Request,
    amount: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    wallet = await _wallet(request, provider, notifier)
    try:
        await wallet.withdraw(amount)
    except FamilyHubError:
        # Already reported as an error toast, which travels with the redirect
        pass
    return redirect_with_toast("/settings/bank", notifier)


@router.post("/account")
async def save_bank_account(
    request: Request,
    bank_account: str = Form(""),
    provider: SessionProvider = Depends(get_session_provider),
):
    denied = require_user(request, provider)
    if denied is not None:
        return denied

    notifier = Notifier()
    wallet = await _wallet(request, provider, notifier)
    try:
        await wallet.update_bank_account(bank_account)
    except FamilyHubError:
        pass
    return redirect_with_toast("/settings/bank", notifier)
