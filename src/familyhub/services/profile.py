"""Profile settings: personal details, avatar and password."""

import asyncio

from ..auth import AuthClient
from ..config import settings
from ..db.repositories import ProfileRepository
from ..errors import FamilyHubError, ValidationError
from ..logging_config import get_logger
from ..models.profile import Profile
from ..notifications import Notifier
from ..storage import AVATARS_BUCKET, LocalObjectStorage, random_file_name
from .base import ViewState, clean_text

logger = get_logger(__name__)

PROFILE_TIMEOUT_MESSAGE = "Loading your profile timed out"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"


class ProfileSettings(ViewState):
    def __init__(
        self,
        user_id: str,
        auth: AuthClient,
        profiles: ProfileRepository | None = None,
        storage: LocalObjectStorage | None = None,
        notifier: Notifier | None = None,
        timeout: float | None = None,
    ):
        super().__init__(notifier)
        self.user_id = user_id
        self.auth = auth
        self.profiles = profiles or ProfileRepository(auth.store)
        self.storage = storage or LocalObjectStorage()
        self.timeout = timeout if timeout is not None else settings.PROFILE_LOAD_TIMEOUT
        self.profile: Profile | None = None

    async def load(self) -> None:
        """Fetch the profile, giving up after ``timeout`` seconds."""
        self.loading = True
        try:
            profile = await asyncio.wait_for(self.profiles.get(self.user_id), self.timeout)
        except asyncio.TimeoutError:
            if not self.mounted:
                return
            logger.warning(f"Profile load for {self.user_id} timed out after {self.timeout}s")
            self.error = PROFILE_TIMEOUT_MESSAGE
            self.loading = False
            return
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Profile load for {self.user_id} failed: {e}")
            self.error = "Could not load your profile"
            self.loading = False
            return

        if not self.mounted:
            return
        self.loading = False
        if profile is None:
            self.error = "Profile not found"
            return
        self.profile = profile
        self.error = None

    async def update_profile(
        self,
        first_name: str | None,
        last_name: str | None,
        phone: str | None,
        avatar_url: str | None,
    ) -> Profile:
        """Save personal details. Blank values are stored as null."""
        values = {
            "first_name": clean_text(first_name),
            "last_name": clean_text(last_name),
            "phone": clean_text(phone),
            "avatar_url": clean_text(avatar_url),
        }
        try:
            profile = await self.profiles.update(self.user_id, values)
        except FamilyHubError as e:
            self._fail(e, "Could not update profile")
            raise

        if self.mounted:
            self.profile = profile
        logger.info(f"Profile {self.user_id} updated")
        self.notifier.success("Profile updated")
        return profile

    async def upload_avatar(self, filename: str, data: bytes) -> str:
        """Store a new avatar image and point the profile at it."""
        try:
            url = await self.storage.upload(AVATARS_BUCKET, random_file_name(filename), data)
            profile = await self.profiles.update(self.user_id, {"avatar_url": url})
        except FamilyHubError as e:
            self._fail(e, "Could not upload avatar")
            raise

        if self.mounted:
            self.profile = profile
        self.notifier.success("Avatar updated")
        return url

    async def update_password(self, new_password: str, confirm_password: str) -> None:
        if new_password != confirm_password:
            self.notifier.error(PASSWORD_MISMATCH_MESSAGE)
            raise ValidationError(PASSWORD_MISMATCH_MESSAGE)

        try:
            await self.auth.update_user(password=new_password)
        except FamilyHubError as e:
            self._fail(e, "Could not update password")
            raise

        logger.info(f"Password changed for {self.user_id}")
        self.notifier.success("Password updated")
