"""Session provider: who is signed in and which role flags they carry."""

from .auth import AuthClient, AuthEvent, Session, Subscription, User
from .db.repositories import ProfileRepository
from .errors import FamilyHubError, NotFoundError
from .logging_config import get_logger
from .models.profile import Profile

logger = get_logger(__name__)


class SessionProvider:
    """One per client. Owns the current identity and its role flags.

    Lifecycle: ``start()`` reads the existing session and subscribes to auth
    changes, ``close()`` unsubscribes. Every identity change triggers a
    profile lookup that derives ``is_admin`` and ``is_super_admin``; a lookup
    that finishes after the identity changed again is discarded.
    """

    def __init__(self, auth: AuthClient, profiles: ProfileRepository | None = None):
        self._auth = auth
        self._profiles = profiles or ProfileRepository(auth.store)
        self._session: Session | None = None
        self._profile: Profile | None = None
        self._is_admin = False
        self._is_super_admin = False
        self._loading = True
        self._roles_resolved = False
        self._generation = 0
        self._subscription: Subscription | None = None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user if self._session else None

    @property
    def profile(self) -> Profile | None:
        return self._profile

    @property
    def is_admin(self) -> bool:
        return self._is_admin

    @property
    def is_super_admin(self) -> bool:
        return self._is_super_admin

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def roles_resolved(self) -> bool:
        """False while a signed-in user's flags are still being looked up."""
        return self._roles_resolved

    @property
    def auth(self) -> AuthClient:
        return self._auth

    async def start(self) -> None:
        if self._subscription is None:
            self._subscription = self._auth.on_auth_state_change(self._on_auth_change)

        try:
            session = await self._auth.get_session()
        except FamilyHubError as e:
            logger.error(f"Could not read the current session: {e}")
            session = None

        await self._apply_session(session)
        self._loading = False

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def _on_auth_change(self, event: AuthEvent, session: Session | None) -> None:
        logger.debug(f"Auth state changed: {event.value}")
        await self._apply_session(session)

    def _clear(self) -> None:
        self._session = None
        self._profile = None
        self._is_admin = False
        self._is_super_admin = False
        self._roles_resolved = True

    async def _apply_session(self, session: Session | None) -> None:
        self._generation += 1
        generation = self._generation

        if session is None:
            self._clear()
            return

        self._session = session
        self._is_admin = False
        self._is_super_admin = False
        self._roles_resolved = False

        profile = await self._lookup_profile(session.user.id)
        if generation != self._generation:
            logger.debug(f"Discarding stale role lookup for {session.user.id}")
            return

        self._profile = profile
        self._is_admin = bool(profile and profile.is_admin)
        self._is_super_admin = bool(profile and profile.is_super_admin)
        self._roles_resolved = True

    async def _lookup_profile(self, user_id: str) -> Profile | None:
        try:
            profile = await self._profiles.get(user_id)
        except FamilyHubError as e:
            logger.error(f"Role lookup failed for {user_id}: {e}")
            return None
        if profile is None:
            logger.warning(f"No profile row for user {user_id}")
        return profile

    async def make_admin(self, email: str) -> Profile:
        """Grant the admin flag to the user registered under ``email``."""
        target = await self._profiles.get_by_email(email)
        if target is None:
            raise NotFoundError(f"No user found with email {email}")

        updated = await self._profiles.set_roles(target.id, is_admin=True)
        logger.info(f"Granted admin to {updated.email}")
        return updated

    async def sign_out(self) -> None:
        """Revoke the session, then forget identity and flags.

        If revocation fails the error propagates and state is left as is.
        """
        await self._auth.sign_out()
        self._generation += 1
        self._clear()
