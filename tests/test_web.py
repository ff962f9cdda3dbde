"""Tests for the web interface."""

import asyncio
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from familyhub.auth import AuthClient
from familyhub.db import ActivityRepository, ForumRepository, ProfileRepository, TableStore
from familyhub.errors import StoreError
from familyhub.models import ForumPost
from familyhub.session import SessionProvider
from familyhub.web import create_app
from familyhub.web.deps import get_session_provider


@pytest.fixture
def client(temp_db_path, temp_uploads_dir):
    app = create_app(temp_db_path, temp_uploads_dir)
    with TestClient(app) as client:
        yield client


def _notice(response):
    """The (path, notice, level) a redirect points at."""
    location = urlparse(response.headers["location"])
    query = parse_qs(location.query)
    return location.path, query.get("notice", [None])[0], query.get("level", [None])[0]


def _sign_up(client, email="host@example.com"):
    response = client.post(
        "/auth/signup",
        data={"email": email, "password": "secret123"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    return response


def _grant(temp_db_path, email, **roles):
    profiles = ProfileRepository(TableStore(temp_db_path))
    profile = asyncio.run(profiles.get_by_email(email))
    asyncio.run(profiles.set_roles(profile.id, **roles))


class TestPublicPages:
    """Tests for pages that need no sign-in."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_empty_catalog(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "No activities have been published yet." in response.text

    def test_auth_page(self, client):
        response = client.get("/auth?mode=signup")
        assert response.status_code == 200

    def test_unknown_activity(self, client):
        response = client.get("/activities/does-not-exist")
        assert response.status_code == 404


class TestAuthFlow:
    """Tests for sign-up, sign-in and sign-out."""

    def test_signup_sets_cookie(self, client):
        response = _sign_up(client)

        assert "familyhub_token" in response.cookies
        assert _notice(response) == ("/", "Your account has been created", "success")

    def test_bad_login(self, client):
        _sign_up(client)
        client.cookies.clear()

        response = client.post(
            "/auth", data={"email": "host@example.com", "password": "wrong-password"}
        )

        assert response.status_code == 400
        assert "Invalid login credentials" in response.text

    def test_logout(self, client):
        _sign_up(client)

        response = client.post("/auth/logout", follow_redirects=False)
        assert _notice(response)[0] == "/auth"

        client.cookies.clear()
        response = client.get("/settings/bank", follow_redirects=False)
        assert _notice(response)[0] == "/auth"


class TestGuards:
    """Tests for the page guards."""

    def test_anonymous_admin_page(self, client):
        response = client.get("/admin/forum", follow_redirects=False)

        assert response.status_code == 302
        assert _notice(response) == ("/auth", "Please sign in to continue", "error")

    def test_non_admin_is_sent_home(self, client):
        _sign_up(client)

        response = client.get("/admin/forum", follow_redirects=False)

        assert _notice(response) == ("/", "You do not have access to this page", "error")

    def test_admin_is_not_super_admin(self, client, temp_db_path):
        _sign_up(client)
        _grant(temp_db_path, "host@example.com", is_admin=True)

        assert client.get("/admin/forum").status_code == 200
        response = client.get("/super-admin", follow_redirects=False)
        assert _notice(response)[0] == "/"


class TestModeration:
    """Tests for the forum moderation page."""

    @pytest.fixture
    def post(self, temp_db_path):
        repo = ForumRepository(TableStore(temp_db_path))
        return asyncio.run(
            repo.create_post(
                ForumPost(title="Playground tips", content="...", author_id="U1", author_name="Ana")
            )
        )

    @pytest.fixture
    def admin(self, client, temp_db_path):
        _sign_up(client)
        _grant(temp_db_path, "host@example.com", is_admin=True)

    def test_lists_posts(self, client, admin, post):
        response = client.get("/admin/forum")
        assert "Playground tips" in response.text

    def test_lock(self, client, admin, post, temp_db_path):
        response = client.post(f"/admin/forum/{post.id}/lock", follow_redirects=False)

        assert _notice(response) == ("/admin/forum", "Post locked", "success")
        stored = asyncio.run(ForumRepository(TableStore(temp_db_path)).get_post(post.id))
        assert stored.is_locked is True

    def test_delete_requires_confirmation(self, client, admin, post, temp_db_path):
        repo = ForumRepository(TableStore(temp_db_path))

        response = client.post(f"/admin/forum/{post.id}/delete", follow_redirects=False)
        assert _notice(response)[1] == "Deletion was not confirmed"
        assert asyncio.run(repo.get_post(post.id)) is not None

        client.post(f"/admin/forum/{post.id}/delete", data={"confirm": "yes"})
        assert asyncio.run(repo.get_post(post.id)) is None


class TestSuperAdmin:
    """Tests for granting admin rights."""

    def test_grant(self, client, temp_db_path):
        _sign_up(client, "other@example.com")
        client.cookies.clear()
        _sign_up(client)
        _grant(temp_db_path, "host@example.com", is_super_admin=True)

        response = client.post(
            "/super-admin/admins", data={"email": "other@example.com"}, follow_redirects=False
        )

        assert _notice(response) == ("/super-admin", "other@example.com is now an admin", "success")
        profiles = ProfileRepository(TableStore(temp_db_path))
        assert asyncio.run(profiles.get_by_email("other@example.com")).is_admin is True

    def test_unknown_email(self, client, temp_db_path):
        _sign_up(client)
        _grant(temp_db_path, "host@example.com", is_super_admin=True)

        response = client.post(
            "/super-admin/admins", data={"email": "nobody@example.com"}, follow_redirects=False
        )

        path, notice, level = _notice(response)
        assert path == "/super-admin"
        assert notice.startswith("Could not grant admin rights")
        assert level == "error"


class TestHostPages:
    """Tests for the host's experiences and balance pages."""

    def test_quick_create(self, client):
        _sign_up(client)

        response = client.post(
            "/settings/experiences",
            data={"title": "Pony ride", "price": "15"},
            follow_redirects=False,
        )
        assert _notice(response) == ("/settings/experiences", "Experience created", "success")

        page = client.get("/settings/experiences")
        assert "Pony ride" in page.text
        assert "Draft" in page.text

    def test_quick_create_missing_title(self, client):
        _sign_up(client)

        response = client.post("/settings/experiences", data={"title": "", "price": "15"})

        assert response.status_code == 400
        assert "Please fill in all required fields" in response.text

    def test_withdraw_invalid_amount(self, client):
        _sign_up(client)

        response = client.post(
            "/settings/bank/withdraw", data={"amount": "abc"}, follow_redirects=False
        )

        assert _notice(response) == ("/settings/bank", "Please enter a valid amount", "error")

    def test_withdraw_more_than_available(self, client):
        _sign_up(client)

        response = client.post(
            "/settings/bank/withdraw", data={"amount": "10"}, follow_redirects=False
        )

        assert _notice(response)[1] == "You do not have enough available balance"

    def test_bank_page(self, client):
        _sign_up(client)
        client.post("/settings/bank/account", data={"bank_account": "DE00 1234"})

        response = client.get("/settings/bank")

        assert response.status_code == 200
        assert "DE00 1234" in response.text


class TestUnsettledSession:
    """Tests for pages requested before the caller's roles are known."""

    @staticmethod
    def _unsettled_provider(request: Request):
        # Never started: still loading
        auth = AuthClient(
            request.app.state.store, access_token=request.cookies.get("familyhub_token")
        )
        return SessionProvider(auth)

    def test_admin_page_shows_loading(self, client, temp_db_path):
        _sign_up(client)
        _grant(temp_db_path, "host@example.com", is_admin=True)
        repo = ForumRepository(TableStore(temp_db_path))
        asyncio.run(
            repo.create_post(
                ForumPost(title="Moderators only", content="...", author_id="U1", author_name="Ana")
            )
        )
        client.app.dependency_overrides[get_session_provider] = self._unsettled_provider

        response = client.get("/admin/forum", follow_redirects=False)

        assert response.status_code == 200
        assert "Loading..." in response.text
        assert "Moderators only" not in response.text
        assert "Forum moderation" not in response.text

    def test_anonymous_is_not_redirected_while_loading(self, client):
        client.app.dependency_overrides[get_session_provider] = self._unsettled_provider

        response = client.get("/settings/bank", follow_redirects=False)

        assert response.status_code == 200
        assert "Loading..." in response.text


class TestUploads:
    """Tests for avatar uploads through the web interface."""

    def test_html_avatar_is_rejected(self, client, temp_uploads_dir, temp_db_path):
        _sign_up(client)

        response = client.post(
            "/profile/avatar",
            files={"avatar": ("evil.html", b"<script>alert(1)</script>", "text/html")},
            follow_redirects=False,
        )

        assert _notice(response) == ("/profile", "Could not upload avatar", "error")
        assert list(temp_uploads_dir.rglob("*.html")) == []
        profiles = ProfileRepository(TableStore(temp_db_path))
        assert asyncio.run(profiles.get_by_email("host@example.com")).avatar_url is None

    def test_image_avatar_is_served(self, client, temp_db_path):
        _sign_up(client)

        client.post("/profile/avatar", files={"avatar": ("me.png", b"\x89PNG", "image/png")})

        profiles = ProfileRepository(TableStore(temp_db_path))
        url = asyncio.run(profiles.get_by_email("host@example.com")).avatar_url
        response = client.get(url)
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"


class TestScheduleRoute:
    """Tests for adding schedules through the web interface."""

    def test_store_failure_becomes_toast(self, client, monkeypatch):
        _sign_up(client)

        async def failing_get_owned(self, activity_id, creator_id):
            raise StoreError("database is locked")

        monkeypatch.setattr(ActivityRepository, "get_owned", failing_get_owned)

        response = client.post(
            "/activities/A1/schedules",
            data={"date": "2026-07-01", "start_time": "10:00", "end_time": "11:00", "available_spots": "5"},
            follow_redirects=False,
        )

        assert response.status_code == 302
        assert _notice(response) == ("/activities/A1/edit", "Could not add schedule", "error")
