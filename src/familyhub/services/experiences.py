"""Paginated activity lists: a host's own experiences and the public catalog."""

from abc import ABC, abstractmethod

from ..config import settings
from ..db.repositories import ActivityRepository
from ..errors import FamilyHubError, ValidationError
from ..logging_config import get_logger
from ..models.activity import Activity, ActivityStatus
from ..notifications import Notifier
from .base import ViewState, clean_text, parse_amount

logger = get_logger(__name__)


class _PagedActivities(ViewState, ABC):
    """Newest-first activity list loaded one window at a time.

    ``has_more`` is true when the last window came back exactly full. When the
    total is a multiple of the page size this reports one extra, empty page.
    """

    load_error_message = "Could not load experiences"

    def __init__(
        self,
        repository: ActivityRepository | None = None,
        notifier: Notifier | None = None,
        page_size: int | None = None,
    ):
        super().__init__(notifier)
        self.repository = repository or ActivityRepository()
        self.page_size = page_size or settings.PAGE_SIZE
        self.experiences: list[Activity] = []
        self.has_more = False
        self.page = 1

    @abstractmethod
    async def _fetch(self, page: int) -> list[Activity]:
        """Fetch one window of activities."""
        pass

    async def load(self, page: int = 1) -> None:
        """Load window ``page``. Page 1 replaces the list, later pages append."""
        self.loading = True
        try:
            window = await self._fetch(page)
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Loading page {page} failed: {e}")
            self.error = str(e)
            self.loading = False
            self.notifier.error(self.load_error_message)
            return

        if not self.mounted:
            return

        if page == 1:
            self.experiences = window
        else:
            self.experiences = self.experiences + window
        self.has_more = len(window) == self.page_size
        self.page = page
        self.error = None
        self.loading = False
        logger.debug(f"Loaded page {page} ({len(window)} rows)")

    async def load_more(self) -> None:
        if self.has_more and not self.loading:
            await self.load(self.page + 1)

    async def load_through(self, page: int) -> None:
        """Load pages 1..page in order, stopping early when the list runs out."""
        await self.load(1)
        while self.page < page and self.has_more and self.error is None:
            await self.load_more()


class HostExperiences(_PagedActivities):
    """The experiences a host created, with a quick-create form."""

    def __init__(
        self,
        creator_id: str,
        repository: ActivityRepository | None = None,
        notifier: Notifier | None = None,
        page_size: int | None = None,
        creator_name: str | None = None,
    ):
        super().__init__(repository, notifier, page_size)
        self.creator_id = creator_id
        self.creator_name = creator_name

    async def _fetch(self, page: int) -> list[Activity]:
        return await self.repository.list_by_creator(self.creator_id, page, self.page_size)

    async def create(self, fields: dict) -> Activity:
        """Insert a new draft owned by the acting host, then reload page 1.

        Only title and price are required. ``creator_id`` and ``status`` in
        ``fields`` are ignored.
        """
        self._require(fields, ("title", "price"))
        price = parse_amount(fields.get("price"))
        if price is None or price < 0:
            self.notifier.error("Please enter a valid price")
            raise ValidationError("Please enter a valid price")

        activity = Activity(
            title=clean_text(fields.get("title")),
            price=price,
            creator_id=self.creator_id,
            description=clean_text(fields.get("description")) or "",
            location=clean_text(fields.get("location")) or "",
            category=clean_text(fields.get("category")) or "other",
            age_range=clean_text(fields.get("age_range")) or "all",
            is_premium=bool(fields.get("is_premium")),
            status=ActivityStatus.DRAFT,
            creator_name=self.creator_name,
        )

        try:
            created = await self.repository.create(activity)
        except FamilyHubError as e:
            self._fail(e, "Could not create experience")
            raise

        logger.info(f"Experience {created.id} created by {self.creator_id}")
        self.notifier.success("Experience created")
        await self.load(1)
        return created


class PublishedCatalog(_PagedActivities):
    """Published activities shown on the home page."""

    load_error_message = "Could not load activities"

    async def _fetch(self, page: int) -> list[Activity]:
        return await self.repository.list_published(page, self.page_size)

