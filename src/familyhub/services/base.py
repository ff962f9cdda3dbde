"""Shared plumbing for the view-state controllers."""

from decimal import Decimal, InvalidOperation

from ..errors import FamilyHubError, ValidationError
from ..logging_config import get_logger
from ..models.base import to_cents
from ..notifications import Notifier

logger = get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"


def parse_amount(value) -> Decimal | None:
    """Parse a user-entered money amount, rounded to cents.

    None when it is not a finite number.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        amount = value
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    if not amount.is_finite():
        return None
    try:
        return to_cents(amount)
    except InvalidOperation:
        # Too many digits to hold in cents
        return None


def clean_text(value) -> str | None:
    """Trim a form value; empty strings become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def missing_fields(fields: dict, required: tuple[str, ...]) -> list[str]:
    return [name for name in required if clean_text(fields.get(name)) is None]


class ViewState:
    """Base for controllers that hold loading/error state for one view.

    ``close()`` marks the view as gone; results arriving afterwards are
    dropped instead of being applied.
    """

    def __init__(self, notifier: Notifier | None = None):
        self.notifier = notifier or Notifier()
        self.mounted = True
        self.loading = False
        self.error: str | None = None

    def close(self) -> None:
        self.mounted = False

    def _fail(self, error: FamilyHubError, fallback: str) -> None:
        """Toast a failed mutation. Validation messages are shown verbatim."""
        message = str(error) if isinstance(error, ValidationError) else fallback
        logger.warning(f"{fallback}: {error}")
        self.notifier.error(message)

    def _require(self, fields: dict, required: tuple[str, ...]) -> None:
        missing = missing_fields(fields, required)
        if missing:
            self.notifier.error(REQUIRED_FIELDS_MESSAGE)
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)
