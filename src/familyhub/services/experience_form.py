"""Full create/edit form for a single experience."""

from decimal import Decimal

from ..db.repositories import ActivityRepository
from ..errors import FamilyHubError
from ..logging_config import get_logger
from ..models.activity import Activity, ActivityStatus
from ..notifications import Notifier
from ..storage import ACTIVITY_IMAGES_BUCKET, LocalObjectStorage, random_file_name
from .base import ViewState, clean_text, parse_amount

logger = get_logger(__name__)

EDITOR_REQUIRED = ("title", "description", "location", "category", "age_range")

CATEGORIES = [
    ("outdoor", "Outdoor"),
    ("sports", "Sports"),
    ("arts", "Arts & crafts"),
    ("music", "Music"),
    ("education", "Education"),
    ("food", "Food & cooking"),
    ("nature", "Nature"),
    ("other", "Other"),
]


def empty_form() -> dict:
    return {
        "title": "",
        "description": "",
        "location": "",
        "category": "",
        "price": "0",
        "age_range": "",
        "image_url": None,
        "is_premium": False,
    }


def form_from_activity(activity: Activity) -> dict:
    return {
        "title": activity.title,
        "description": activity.description,
        "location": activity.location,
        "category": activity.category,
        "price": str(activity.price),
        "age_range": activity.age_range,
        "image_url": activity.image_url,
        "is_premium": activity.is_premium,
    }


class ExperienceEditor(ViewState):
    """Create mode when ``activity_id`` is None, edit mode otherwise.

    Edits are always scoped to the acting creator: a row owned by someone
    else behaves exactly like a missing one.
    """

    def __init__(
        self,
        creator_id: str,
        activity_id: str | None = None,
        repository: ActivityRepository | None = None,
        storage: LocalObjectStorage | None = None,
        notifier: Notifier | None = None,
        creator_name: str | None = None,
    ):
        super().__init__(notifier)
        self.creator_id = creator_id
        self.activity_id = activity_id
        self.creator_name = creator_name
        self.repository = repository or ActivityRepository()
        self.storage = storage or LocalObjectStorage()
        self.activity: Activity | None = None
        self.form = empty_form()
        self.not_found = False

    @property
    def editing(self) -> bool:
        return self.activity_id is not None

    async def load(self) -> None:
        if not self.editing:
            self.form = empty_form()
            return

        self.loading = True
        try:
            activity = await self.repository.get_owned(self.activity_id, self.creator_id)
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Loading experience {self.activity_id} failed: {e}")
            self.error = "Could not load experience"
            self.loading = False
            return

        if not self.mounted:
            return
        self.loading = False
        if activity is None:
            self.not_found = True
            self.error = "Experience not found"
            return

        self.activity = activity
        self.form = form_from_activity(activity)
        self.error = None

    async def save(self, form: dict, image: tuple[str, bytes] | None = None) -> Activity:
        """Validate, upload the optional image, then insert or update.

        ``image`` is a ``(filename, data)`` pair.
        """
        self._require(form, EDITOR_REQUIRED)

        image_url = clean_text(form.get("image_url"))
        if image is not None:
            filename, data = image
            try:
                image_url = await self.storage.upload(
                    ACTIVITY_IMAGES_BUCKET, random_file_name(filename), data
                )
            except FamilyHubError as e:
                self._fail(e, "Could not upload image")
                raise

        price = parse_amount(form.get("price"))
        if price is None or price < 0:
            price = Decimal("0")

        activity = Activity(
            title=clean_text(form.get("title")),
            description=clean_text(form.get("description")),
            location=clean_text(form.get("location")),
            category=clean_text(form.get("category")),
            age_range=clean_text(form.get("age_range")),
            price=price,
            image_url=image_url,
            is_premium=bool(form.get("is_premium")),
            status=ActivityStatus.DRAFT,
            creator_id=self.creator_id,
            creator_name=self.creator_name,
        )

        try:
            if self.editing:
                values = activity.to_dict()
                # Keep the name recorded at creation
                values.pop("creator_name")
                saved = await self.repository.update_owned(
                    self.activity_id, self.creator_id, values
                )
            else:
                saved = await self.repository.create(activity)
        except FamilyHubError as e:
            self._fail(e, "Could not save experience")
            raise

        logger.info(f"Experience {saved.id} saved by {self.creator_id}")
        self.notifier.success("Experience updated" if self.editing else "Experience created")
        self.activity = saved
        self.form = form_from_activity(saved)
        return saved
