"""Forum browsing and moderation."""

from ..db.repositories import ForumRepository
from ..errors import AuthError, FamilyHubError, NotFoundError
from ..logging_config import get_logger
from ..models.forum import ForumCategory, ForumPost, ForumReply
from ..notifications import Notifier
from .base import ViewState, clean_text

logger = get_logger(__name__)


class ForumModeration(ViewState):
    """Admin view over every post and category.

    Flag toggles replace the local entry with the row the store returned;
    deletes filter the entry out once the store confirmed the removal.
    """

    def __init__(self, repository: ForumRepository | None = None, notifier: Notifier | None = None):
        super().__init__(notifier)
        self.repository = repository or ForumRepository()
        self.posts: list[ForumPost] = []
        self.categories: list[ForumCategory] = []

    async def load(self) -> None:
        self.loading = True
        try:
            posts = await self.repository.list_posts()
            categories = await self.repository.list_categories()
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Loading forum for moderation failed: {e}")
            self.error = str(e)
            self.loading = False
            self.notifier.error("Could not load forum posts")
            return

        if not self.mounted:
            return
        self.posts = posts
        self.categories = categories
        self.error = None
        self.loading = False

    def _find(self, post_id: str) -> ForumPost:
        for post in self.posts:
            if post.id == post_id:
                return post
        raise NotFoundError(f"Post {post_id} not found")

    def _replace(self, updated: ForumPost) -> None:
        self.posts = [updated if p.id == updated.id else p for p in self.posts]

    async def toggle_lock(self, post_id: str) -> ForumPost:
        try:
            post = self._find(post_id)
            updated = await self.repository.set_flags(post_id, is_locked=not post.is_locked)
        except FamilyHubError as e:
            self._fail(e, "Could not update post")
            raise

        if self.mounted:
            self._replace(updated)
        logger.info(f"Post {post_id} {'locked' if updated.is_locked else 'unlocked'}")
        self.notifier.success("Post locked" if updated.is_locked else "Post unlocked")
        return updated

    async def toggle_pin(self, post_id: str) -> ForumPost:
        try:
            post = self._find(post_id)
            updated = await self.repository.set_flags(post_id, is_pinned=not post.is_pinned)
        except FamilyHubError as e:
            self._fail(e, "Could not update post")
            raise

        if self.mounted:
            self._replace(updated)
        logger.info(f"Post {post_id} {'pinned' if updated.is_pinned else 'unpinned'}")
        self.notifier.success("Post pinned" if updated.is_pinned else "Post unpinned")
        return updated

    async def delete(self, post_id: str, confirmed: bool = False) -> bool:
        """Hard-delete a post. Does nothing unless ``confirmed``."""
        if not confirmed:
            return False

        try:
            await self.repository.delete_post(post_id)
        except FamilyHubError as e:
            self._fail(e, "Could not delete post")
            raise

        if self.mounted:
            self.posts = [p for p in self.posts if p.id != post_id]
        logger.info(f"Post {post_id} deleted")
        self.notifier.success("Post deleted")
        return True

    async def create_category(self, name: str, description: str | None = None) -> ForumCategory:
        self._require({"name": name}, ("name",))
        try:
            category = await self.repository.create_category(
                clean_text(name), clean_text(description)
            )
        except FamilyHubError as e:
            self._fail(e, "Could not create category")
            raise

        if self.mounted:
            self.categories = self.categories + [category]
        logger.info(f"Forum category created: {category.name}")
        self.notifier.success("Category created")
        return category


class ForumBoard(ViewState):
    """Member-facing forum: post list, threads and replies."""

    def __init__(
        self,
        author_id: str | None = None,
        author_name: str | None = None,
        category_id: str | None = None,
        repository: ForumRepository | None = None,
        notifier: Notifier | None = None,
    ):
        super().__init__(notifier)
        self.author_id = author_id
        self.author_name = author_name
        self.category_id = category_id
        self.repository = repository or ForumRepository()
        self.posts: list[ForumPost] = []
        self.categories: list[ForumCategory] = []
        self.thread: ForumPost | None = None
        self.replies: list[ForumReply] = []

    async def load(self) -> None:
        """Posts with pinned ones first, newest first within each group."""
        self.loading = True
        try:
            posts = await self.repository.list_posts(self.category_id)
            categories = await self.repository.list_categories()
        except FamilyHubError as e:
            if not self.mounted:
                return
            logger.error(f"Loading forum failed: {e}")
            self.error = str(e)
            self.loading = False
            self.notifier.error("Could not load forum posts")
            return

        if not self.mounted:
            return
        # sorted() is stable, so the newest-first order survives within groups
        self.posts = sorted(posts, key=lambda p: not p.is_pinned)
        self.categories = categories
        self.error = None
        self.loading = False

    async def get_thread(self, post_id: str) -> ForumPost | None:
        self.loading = True
        try:
            post = await self.repository.get_post(post_id)
            replies = await self.repository.list_replies(post_id) if post else []
        except FamilyHubError as e:
            if not self.mounted:
                return None
            logger.error(f"Loading thread {post_id} failed: {e}")
            self.error = str(e)
            self.loading = False
            self.notifier.error("Could not load thread")
            return None

        if not self.mounted:
            return None
        self.loading = False
        if post is None:
            self.error = "Post not found"
            return None
        self.thread = post
        self.replies = replies
        self.error = None
        return post

    def _require_author(self) -> None:
        if not self.author_id:
            self.notifier.error("Please sign in to post")
            raise AuthError("Auth session missing")

    async def create_post(
        self, title: str, content: str, category_id: str | None = None
    ) -> ForumPost:
        self._require_author()
        self._require({"title": title, "content": content}, ("title", "content"))

        post = ForumPost(
            title=clean_text(title),
            content=clean_text(content),
            author_id=self.author_id,
            author_name=self.author_name or "Member",
            category_id=clean_text(category_id),
        )
        try:
            created = await self.repository.create_post(post)
        except FamilyHubError as e:
            self._fail(e, "Could not create post")
            raise

        logger.info(f"Post {created.id} created by {self.author_id}")
        self.notifier.success("Post published")
        await self.load()
        return created

    async def add_reply(self, post_id: str, content: str) -> ForumReply:
        """Reply to a thread. Locked threads are refused by the store."""
        self._require_author()
        self._require({"content": content}, ("content",))

        reply = ForumReply(
            post_id=post_id,
            content=clean_text(content),
            author_id=self.author_id,
            author_name=self.author_name or "Member",
        )
        try:
            created = await self.repository.add_reply(reply)
        except FamilyHubError as e:
            self._fail(e, "Could not add reply")
            raise

        logger.info(f"Reply {created.id} added to post {post_id}")
        self.notifier.success("Reply posted")
        await self.get_thread(post_id)
        return created
