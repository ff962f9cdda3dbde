"""Schedules of a single activity."""

from datetime import date

from ..db.repositories import ScheduleRepository
from ..errors import FamilyHubError, ValidationError
from ..logging_config import get_logger
from ..models.activity import Schedule
from ..notifications import Notifier
from .base import ViewState, clean_text, parse_amount

logger = get_logger(__name__)


class ActivitySchedules(ViewState):
    """All schedules of one activity, earliest first.

    Capacity is not checked here; the store rejects a schedule whose booked
    spots would fall outside ``0..available_spots``.
    """

    def __init__(
        self,
        activity_id: str | None,
        repository: ScheduleRepository | None = None,
        notifier: Notifier | None = None,
    ):
        super().__init__(notifier)
        self.activity_id = activity_id
        self.repository = repository or ScheduleRepository()
        self.schedules: list[Schedule] = []

    async def load(self) -> None:
        if not self.activity_id:
            return

        self.loading = True
        try:
            schedules = await self.repository.list_for_activity(self.activity_id)
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Loading schedules of {self.activity_id} failed: {e}")
            self.error = str(e)
            self.loading = False
            self.notifier.error("Could not load schedules")
            return

        if not self.mounted:
            return
        self.schedules = schedules
        self.error = None
        self.loading = False

    def _parse(self, fields: dict) -> Schedule:
        self._require(fields, ("date", "start_time", "end_time", "available_spots"))
        try:
            day = fields["date"]
            if not isinstance(day, date):
                day = date.fromisoformat(str(day).strip())
            spots = int(str(fields["available_spots"]).strip())
        except ValueError:
            self.notifier.error("Please enter a valid date and number of spots")
            raise ValidationError("Please enter a valid date and number of spots") from None

        price_override = None
        if clean_text(fields.get("price_override")) is not None:
            price_override = parse_amount(fields.get("price_override"))

        return Schedule(
            activity_id=self.activity_id,
            date=day,
            start_time=clean_text(fields["start_time"]),
            end_time=clean_text(fields["end_time"]),
            available_spots=spots,
            booked_spots=0,
            price_override=price_override,
        )

    async def add_schedule(self, fields: dict) -> Schedule:
        """Insert a schedule with nothing booked yet, then reload the list."""
        if not self.activity_id:
            raise ValidationError("No activity selected")

        schedule = self._parse(fields)
        try:
            created = await self.repository.create(schedule)
        except FamilyHubError as e:
            self._fail(e, "Could not add schedule")
            raise

        logger.info(f"Schedule {created.id} added to activity {self.activity_id}")
        self.notifier.success("Schedule added")
        await self.load()
        return created
