"""Host wallet: balance summary, withdrawals and payout account."""

from ..db.repositories import BalanceRepository, ProfileRepository
from ..errors import FamilyHubError, InsufficientBalanceError, ValidationError
from ..logging_config import get_logger
from ..models.balance import HostBalance, WithdrawalRequest
from ..notifications import Notifier
from .base import ViewState, clean_text, parse_amount

logger = get_logger(__name__)

INVALID_AMOUNT_MESSAGE = "Please enter a valid amount"
INSUFFICIENT_BALANCE_MESSAGE = "You do not have enough available balance"


class HostWallet(ViewState):
    """Balance tab of the host settings.

    The available-balance check in ``withdraw`` only spares a round trip;
    the store repeats it against the stored balance in the same transaction
    that reserves the amount.
    """

    def __init__(
        self,
        user_id: str,
        repository: BalanceRepository | None = None,
        profiles: ProfileRepository | None = None,
        notifier: Notifier | None = None,
    ):
        super().__init__(notifier)
        self.user_id = user_id
        self.repository = repository or BalanceRepository()
        self.profiles = profiles or ProfileRepository(self.repository.store)
        self.balance: HostBalance | None = None
        self.bank_account: str | None = None
        self.withdrawals: list[WithdrawalRequest] = []

    async def load(self) -> None:
        self.loading = True
        try:
            balance = await self.repository.get(self.user_id)
            profile = await self.profiles.get(self.user_id)
            withdrawals = await self.repository.list_withdrawals(self.user_id)
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Loading wallet of {self.user_id} failed: {e}")
            self.error = str(e)
            self.loading = False
            self.notifier.error("Could not load your balance")
            return

        if not self.mounted:
            return
        self.balance = balance or HostBalance.empty(self.user_id)
        self.bank_account = profile.bank_account if profile else None
        self.withdrawals = withdrawals
        self.error = None
        self.loading = False

    async def refresh_balance(self) -> None:
        try:
            balance = await self.repository.get(self.user_id)
            withdrawals = await self.repository.list_withdrawals(self.user_id)
        except FamilyHubError as e:
            logger.error(f"Refreshing balance of {self.user_id} failed: {e}")
            return
        if self.mounted:
            self.balance = balance or HostBalance.empty(self.user_id)
            self.withdrawals = withdrawals

    async def withdraw(self, amount) -> WithdrawalRequest:
        """Request a payout of ``amount`` (number or user-entered text)."""
        value = parse_amount(amount)
        if value is None or value <= 0:
            self.notifier.error(INVALID_AMOUNT_MESSAGE)
            raise ValidationError(INVALID_AMOUNT_MESSAGE)

        available = self.balance.available_balance if self.balance else 0
        if value > available:
            self.notifier.error(INSUFFICIENT_BALANCE_MESSAGE)
            raise InsufficientBalanceError(INSUFFICIENT_BALANCE_MESSAGE)

        try:
            request = await self.repository.request_withdrawal(
                self.user_id, value, self.bank_account
            )
        except InsufficientBalanceError:
            # Local balance was stale
            self.notifier.error(INSUFFICIENT_BALANCE_MESSAGE)
            await self.refresh_balance()
            raise
        except FamilyHubError as e:
            self._fail(e, "Could not submit withdrawal request")
            raise

        logger.info(f"Withdrawal of {value} requested by {self.user_id}")
        self.notifier.success("Withdrawal request submitted")
        await self.refresh_balance()
        return request

    async def update_bank_account(self, iban: str) -> str | None:
        """Overwrite the payout account. Free text, no format check."""
        try:
            profile = await self.profiles.update(
                self.user_id, {"bank_account": clean_text(iban)}
            )
        except FamilyHubError as e:
            self._fail(e, "Could not save bank account")
            raise

        if self.mounted:
            self.bank_account = profile.bank_account
        logger.info(f"Bank account updated for {self.user_id}")
        self.notifier.success("Bank account saved")
        return profile.bank_account
