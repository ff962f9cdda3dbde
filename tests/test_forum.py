"""Tests for forum moderation and browsing."""

import asyncio

import pytest

from familyhub.db import ForumRepository
from familyhub.errors import AuthError, StoreError, ValidationError
from familyhub.models import ForumPost
from familyhub.notifications import ToastKind
from familyhub.services import ForumBoard, ForumModeration


def _post(store, title="Hello", **extra):
    post = ForumPost(title=title, content="First post", author_id="U1", author_name="Ana", **extra)
    return asyncio.run(ForumRepository(store).create_post(post))


@pytest.fixture
def moderation(store):
    return ForumModeration(ForumRepository(store))


class TestForumModeration:
    """Tests for ForumModeration."""

    def test_toggle_lock(self, store, moderation):
        """Test that locking flips only the lock flag, remotely and locally."""
        post = _post(store)
        asyncio.run(moderation.load())
        before = moderation.posts[0]

        asyncio.run(moderation.toggle_lock(post.id))

        after = moderation.posts[0]
        assert after.is_locked is True
        assert (after.title, after.content, after.is_pinned, after.reply_count) == (
            before.title,
            before.content,
            before.is_pinned,
            before.reply_count,
        )
        remote = asyncio.run(ForumRepository(store).get_post(post.id))
        assert remote.is_locked is True
        assert remote.is_pinned is False
        assert moderation.notifier.last.message == "Post locked"

    def test_toggle_lock_twice(self, store, moderation):
        post = _post(store)
        asyncio.run(moderation.load())

        asyncio.run(moderation.toggle_lock(post.id))
        asyncio.run(moderation.toggle_lock(post.id))

        assert moderation.posts[0].is_locked is False

    def test_toggle_pin(self, store, moderation):
        post = _post(store)
        asyncio.run(moderation.load())

        updated = asyncio.run(moderation.toggle_pin(post.id))

        assert updated.is_pinned is True
        assert updated.is_locked is False
        assert moderation.posts[0].is_pinned is True

    def test_delete_needs_confirmation(self, store, moderation):
        post = _post(store)
        asyncio.run(moderation.load())

        assert asyncio.run(moderation.delete(post.id)) is False
        assert len(moderation.posts) == 1
        assert asyncio.run(ForumRepository(store).get_post(post.id)) is not None

        assert asyncio.run(moderation.delete(post.id, confirmed=True)) is True
        assert moderation.posts == []
        assert asyncio.run(ForumRepository(store).get_post(post.id)) is None

    def test_create_category_appends(self, store, moderation):
        asyncio.run(moderation.load())
        category = asyncio.run(moderation.create_category("Outdoors", "Parks and trips"))

        assert [c.id for c in moderation.categories] == [category.id]

    def test_duplicate_category(self, store, moderation):
        asyncio.run(moderation.load())
        asyncio.run(moderation.create_category("Outdoors"))

        with pytest.raises(StoreError):
            asyncio.run(moderation.create_category("Outdoors"))

        assert len(moderation.categories) == 1
        assert moderation.notifier.last.kind == ToastKind.ERROR


class TestForumBoard:
    """Tests for ForumBoard."""

    def test_pinned_first_then_newest(self, store):
        _post(store, title="Old")
        _post(store, title="Pinned", is_pinned=True)
        _post(store, title="New")
        board = ForumBoard(repository=ForumRepository(store))

        asyncio.run(board.load())

        assert [p.title for p in board.posts] == ["Pinned", "New", "Old"]

    def test_category_filter(self, store):
        repo = ForumRepository(store)
        category = asyncio.run(repo.create_category("Tips"))
        _post(store, title="In category", category_id=category.id)
        _post(store, title="Elsewhere")
        board = ForumBoard(category_id=category.id, repository=repo)

        asyncio.run(board.load())

        assert [p.title for p in board.posts] == ["In category"]

    def test_create_post_requires_author(self, store):
        board = ForumBoard(repository=ForumRepository(store))
        with pytest.raises(AuthError):
            asyncio.run(board.create_post("Hi", "There"))
        assert asyncio.run(store.select("forum_posts")) == []

    def test_reply_bumps_count(self, store):
        post = _post(store)
        board = ForumBoard("U2", "Ben", repository=ForumRepository(store))

        asyncio.run(board.add_reply(post.id, "Welcome!"))

        assert board.thread.reply_count == 1
        assert [r.content for r in board.replies] == ["Welcome!"]
        assert board.replies[0].author_name == "Ben"

    def test_locked_thread_refuses_replies(self, store):
        post = _post(store, is_locked=True)
        board = ForumBoard("U2", "Ben", repository=ForumRepository(store))

        with pytest.raises(ValidationError):
            asyncio.run(board.add_reply(post.id, "Let me in"))

        assert board.notifier.last.message == "This thread is locked"
        assert asyncio.run(store.select("forum_replies")) == []
        assert asyncio.run(ForumRepository(store).get_post(post.id)).reply_count == 0
