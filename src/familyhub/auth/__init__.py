"""Identity service for familyhub."""

from .client import AuthClient, AuthEvent, Session, Subscription, User

__all__ = [
    "AuthClient",
    "AuthEvent",
    "Session",
    "Subscription",
    "User",
]
