"""Host wallet commands."""

import click

from ..db import BalanceRepository, ProfileRepository, TableStore
from ..errors import FamilyHubError
from ..notifications import Notifier
from ..services import HostWallet
from .base import async_command, echo_toasts, ensure_initialized, format_table, start_session


@click.group()
def wallet():
    """Show your balance and request withdrawals."""
    pass


async def _wallet(ctx: click.Context) -> tuple[HostWallet, Notifier]:
    provider = await start_session(ctx)
    provider.close()

    store = TableStore()
    notifier = Notifier()
    host_wallet = HostWallet(
        provider.user.id, BalanceRepository(store), ProfileRepository(store), notifier
    )
    await host_wallet.load()
    if host_wallet.error:
        echo_toasts(notifier)
        ctx.exit(1)
    return host_wallet, notifier


@wallet.command("show")
@click.pass_context
@async_command
async def show(ctx: click.Context):
    """Display balance, payout account and withdrawal history."""
    ensure_initialized(ctx)
    host_wallet, _ = await _wallet(ctx)
    balance = host_wallet.balance

    click.echo("\n" + click.style("Balance", bold=True))
    click.echo("=" * 40)
    click.echo(f"Available:      {balance.available_balance}")
    click.echo(f"Pending:        {balance.pending_balance}")
    click.echo(f"Total earnings: {balance.total_earnings}")
    click.echo(f"Bank account:   {host_wallet.bank_account or '(not set)'}")

    if host_wallet.withdrawals:
        click.echo()
        rows = [
            [w.created_at.strftime("%Y-%m-%d"), f"{w.amount}", w.status.value]
            for w in host_wallet.withdrawals
        ]
        click.echo(format_table(["Date", "Amount", "Status"], rows))


@wallet.command("withdraw")
@click.argument("amount")
@click.pass_context
@async_command
async def withdraw(ctx: click.Context, amount: str):
    """Request a withdrawal of AMOUNT from the available balance."""
    ensure_initialized(ctx)
    host_wallet, notifier = await _wallet(ctx)
    try:
        await host_wallet.withdraw(amount)
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)

    echo_toasts(notifier)
    click.echo(f"  Available now: {host_wallet.balance.available_balance}")


@wallet.command("bank-account")
@click.argument("iban")
@click.pass_context
@async_command
async def bank_account(ctx: click.Context, iban: str):
    """Set the account withdrawals are paid to."""
    ensure_initialized(ctx)
    host_wallet, notifier = await _wallet(ctx)
    try:
        await host_wallet.update_bank_account(iban)
    except FamilyHubError:
        echo_toasts(notifier)
        ctx.exit(1)
    echo_toasts(notifier)
