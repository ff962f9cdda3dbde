"""Tests for the session provider."""

import asyncio

import pytest

from familyhub.auth import AuthClient
from familyhub.db import ProfileRepository
from familyhub.errors import NotFoundError, StoreError
from familyhub.models import Profile
from familyhub.session import SessionProvider


class BlockingProfiles:
    """Profile lookup that waits until the test releases it."""

    def __init__(self, profile):
        self.profile = profile
        self.started = None
        self.release = None

    async def get(self, user_id):
        self.started.set()
        await self.release.wait()
        return self.profile


class FailingProfiles:
    async def get(self, user_id):
        raise StoreError("connection lost")


class TestStart:
    """Tests for resolving identity and flags."""

    def test_anonymous(self, store):
        provider = SessionProvider(AuthClient(store))
        assert provider.loading is True

        asyncio.run(provider.start())

        assert provider.loading is False
        assert provider.user is None
        assert provider.is_admin is False
        assert provider.is_super_admin is False

    def test_flags_from_profile(self, store, host):
        _, session = host
        asyncio.run(ProfileRepository(store).set_roles(session.user.id, is_admin=True))

        provider = SessionProvider(AuthClient(store, access_token=session.access_token))
        asyncio.run(provider.start())

        assert provider.user.id == session.user.id
        assert provider.is_admin is True
        assert provider.is_super_admin is False
        assert provider.roles_resolved is True

    def test_missing_profile_means_no_flags(self, store, host):
        _, session = host
        asyncio.run(store.delete("profiles", {"id": session.user.id}))

        provider = SessionProvider(AuthClient(store, access_token=session.access_token))
        asyncio.run(provider.start())

        assert provider.user is not None
        assert provider.is_admin is False
        assert provider.is_super_admin is False

    def test_failed_lookup_means_no_flags(self, store, host):
        _, session = host
        provider = SessionProvider(
            AuthClient(store, access_token=session.access_token), FailingProfiles()
        )
        asyncio.run(provider.start())

        assert provider.user is not None
        assert provider.is_admin is False

    def test_follows_auth_changes(self, store, host):
        """Test that a sign-in on the same client updates the provider."""
        _, session = host
        asyncio.run(ProfileRepository(store).set_roles(session.user.id, is_super_admin=True))
        client = AuthClient(store)
        provider = SessionProvider(client)

        async def scenario():
            await provider.start()
            assert provider.user is None
            await client.sign_in_with_password("host@example.com", "secret123")

        asyncio.run(scenario())

        assert provider.user.email == "host@example.com"
        assert provider.is_super_admin is True

    def test_close_unsubscribes(self, store, host):
        client = AuthClient(store)
        provider = SessionProvider(client)

        async def scenario():
            await provider.start()
            provider.close()
            await client.sign_in_with_password("host@example.com", "secret123")

        asyncio.run(scenario())
        assert provider.user is None


class TestSignOut:
    """Tests for sign_out."""

    def test_clears_identity(self, store, host):
        _, session = host
        asyncio.run(ProfileRepository(store).set_roles(session.user.id, is_admin=True))
        provider = SessionProvider(AuthClient(store, access_token=session.access_token))

        async def scenario():
            await provider.start()
            assert provider.is_admin is True
            await provider.sign_out()

        asyncio.run(scenario())

        assert provider.user is None
        assert provider.session is None
        assert provider.is_admin is False

    def test_sign_out_during_lookup(self, store, host):
        """Test that a lookup finishing after sign-out is discarded."""
        _, session = host
        profiles = BlockingProfiles(
            Profile(id=session.user.id, email="host@example.com", is_admin=True, is_super_admin=True)
        )
        provider = SessionProvider(
            AuthClient(store, access_token=session.access_token), profiles
        )

        async def scenario():
            profiles.started = asyncio.Event()
            profiles.release = asyncio.Event()
            start = asyncio.create_task(provider.start())
            await profiles.started.wait()
            await provider.sign_out()
            profiles.release.set()
            await start

        asyncio.run(scenario())

        assert provider.user is None
        assert provider.is_admin is False
        assert provider.is_super_admin is False
        assert provider.loading is False

    def test_failed_sign_out_keeps_state(self, store, host):
        _, session = host
        client = AuthClient(store, access_token=session.access_token)
        provider = SessionProvider(client)
        asyncio.run(provider.start())

        async def broken_update(*args, **kwargs):
            raise StoreError("write failed")

        store.update = broken_update
        with pytest.raises(StoreError):
            asyncio.run(provider.sign_out())

        assert provider.user is not None
        assert client.access_token == session.access_token


class TestMakeAdmin:
    """Tests for make_admin."""

    def test_grants_flag(self, store, host, other_user):
        _, session = host
        provider = SessionProvider(AuthClient(store, access_token=session.access_token))

        updated = asyncio.run(provider.make_admin("Other@Example.com"))

        assert updated.is_admin is True
        stored = asyncio.run(ProfileRepository(store).get_by_email("other@example.com"))
        assert stored.is_admin is True

    def test_unknown_email(self, store, host):
        provider = SessionProvider(AuthClient(store))
        with pytest.raises(NotFoundError):
            asyncio.run(provider.make_admin("nobody@example.com"))
