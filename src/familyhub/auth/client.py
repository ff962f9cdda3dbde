"""Identity service: sign-up, sign-in, sessions and change notifications."""

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from ..config import settings
from ..db.store import TableStore, utc_now
from ..errors import AuthError, ValidationError
from ..logging_config import get_logger
from .security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"


@dataclass(frozen=True)
class User:
    id: str
    email: str


@dataclass(frozen=True)
class Session:
    """An authenticated session as handed to callers."""

    access_token: str
    user: User
    expires_at: datetime


AuthListener = Callable[[AuthEvent, Session | None], Awaitable[None]]


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, client: "AuthClient", listener: AuthListener):
        self._client = client
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._client._listeners.remove(self._listener)
            self.active = False


class AuthClient:
    """Client-side handle on the identity service.

    Holds at most one current access token, the way a browser SDK keeps
    one session per client.
    """

    def __init__(self, store: TableStore | None = None, access_token: str | None = None):
        self.store = store or TableStore()
        self._access_token = access_token
        self._listeners: list[AuthListener] = []

    @property
    def access_token(self) -> str | None:
        return self._access_token

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Register a coroutine called with (event, session) on every change."""
        self._listeners.append(listener)
        return Subscription(self, listener)

    async def _notify(self, event: AuthEvent, session: Session | None) -> None:
        for listener in list(self._listeners):
            await listener(event, session)

    async def _open_session(self, user_id: str, email: str) -> Session:
        expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
        rows = await self.store.insert(
            "auth_sessions",
            {"user_id": user_id, "expires_at": expires_at.isoformat()},
        )
        session_id = rows[0]["id"]
        token = create_access_token({"sub": user_id, "sid": session_id})
        self._access_token = token
        return Session(access_token=token, user=User(id=user_id, email=email), expires_at=expires_at)

    async def sign_up(self, email: str, password: str) -> Session:
        """Register a new user, create its profile and wallet, and sign in."""
        email = email.strip().lower()
        if not email or "@" not in email:
            raise ValidationError("Please enter a valid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        existing = await self.store.select_one("auth_users", {"email": email})
        if existing:
            raise AuthError("User already registered")

        user_id = str(uuid.uuid4())
        async with self.store.transaction() as tx:
            await tx.insert(
                "auth_users",
                {"id": user_id, "email": email, "password_hash": get_password_hash(password)},
            )
            await tx.insert("profiles", {"id": user_id, "email": email})
            await tx.insert("host_balances", {"user_id": user_id})

        logger.info(f"User registered: {email}")
        session = await self._open_session(user_id, email)
        await self._notify(AuthEvent.SIGNED_IN, session)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        email = email.strip().lower()
        row = await self.store.select_one("auth_users", {"email": email})
        if row is None or not verify_password(password, row["password_hash"]):
            logger.warning(f"Failed sign-in for {email}")
            raise AuthError("Invalid login credentials")

        session = await self._open_session(row["id"], row["email"])
        logger.info(f"User signed in: {email}")
        await self._notify(AuthEvent.SIGNED_IN, session)
        return session

    async def get_session(self) -> Session | None:
        """Validate the held token against the session table."""
        if not self._access_token:
            return None

        payload = decode_access_token(self._access_token)
        if not payload:
            return None

        row = await self.store.select_one("auth_sessions", {"id": payload.get("sid")})
        if row is None or row["revoked_at"] is not None:
            return None
        expires_at = datetime.fromisoformat(row["expires_at"])
        if expires_at <= datetime.now(timezone.utc):
            return None

        user = await self.store.select_one("auth_users", {"id": row["user_id"]})
        if user is None:
            return None

        return Session(
            access_token=self._access_token,
            user=User(id=user["id"], email=user["email"]),
            expires_at=expires_at,
        )

    async def sign_out(self) -> None:
        """Revoke the current session.

        The token is only dropped once the revocation has been stored, so a
        failure leaves the client signed in.
        """
        if self._access_token:
            payload = decode_access_token(self._access_token)
            if payload and payload.get("sid"):
                await self.store.update(
                    "auth_sessions", {"revoked_at": utc_now()}, {"id": payload["sid"]}
                )
        self._access_token = None
        await self._notify(AuthEvent.SIGNED_OUT, None)

    async def update_user(self, password: str) -> User:
        """Change the current user's password."""
        session = await self.get_session()
        if session is None:
            raise AuthError("Auth session missing")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        await self.store.update(
            "auth_users",
            {"password_hash": get_password_hash(password)},
            {"id": session.user.id},
        )
        await self._notify(AuthEvent.USER_UPDATED, session)
        return session.user
