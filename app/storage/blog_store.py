"""
File-backed blog store.

Every post lives in its own directory under the data root, named by its
current slug. Nothing is cached between calls: each read re-scans the tree,
so edits made out-of-band are picked up immediately. A single reader/writer
lock covers the whole store so scans never observe a half-applied mutation.
"""
import shutil
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from ..logging_config import SLOW_SCAN_MS, storage_logger, timed
from ..models.post import Post, PostChanges
from .codec import PostRecordCodec
from .errors import (
    CorruptPostError,
    PostNotFoundError,
    PostValidationError,
    SlugConflictError,
    StorageIOError,
)
from .rwlock import ReadWriteLock
from .slug import is_valid_slug, slugify

DEFAULT_AUTHOR_NAME = "John Doe"
DEFAULT_AUTHOR_USERNAME = "johndoe"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FileBlogStore:
    """CRUD and listing over posts keyed by slug."""

    def __init__(
        self,
        data_dir,
        default_author_name: str = DEFAULT_AUTHOR_NAME,
        default_author_username: str = DEFAULT_AUTHOR_USERNAME,
        codec: Optional[PostRecordCodec] = None,
    ):
        self.data_dir = Path(data_dir)
        self.default_author_name = default_author_name
        self.default_author_username = default_author_username
        self.codec = codec or PostRecordCodec()
        self._lock = ReadWriteLock()
        # Last timestamp handed out; guarded by the write lock
        self._last_stamp: Optional[datetime] = None

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(f"failed to create data directory {self.data_dir}: {e}") from e

    def post_dir(self, slug: str) -> Path:
        return self.data_dir / slug

    # ============================================================
    # READS
    # ============================================================

    def list_all(self) -> List[Post]:
        """All decodable posts, newest created first."""
        with self._lock.read_lock():
            return self._load_all()

    def get_by_slug(self, slug: str) -> Post:
        with self._lock.read_lock():
            return self._find(self._load_all(), slug)

    def stats(self) -> Dict[str, int]:
        """Post counts for health reporting."""
        with self._lock.read_lock():
            posts = self._load_all()
        published = sum(1 for p in posts if p.published)
        return {
            "total": len(posts),
            "published": published,
            "drafts": len(posts) - published,
        }

    @timed(storage_logger, slow_ms=SLOW_SCAN_MS)
    def _load_all(self) -> List[Post]:
        try:
            entries = [entry for entry in self.data_dir.iterdir() if entry.is_dir()]
        except OSError as e:
            raise StorageIOError(f"failed to read data directory {self.data_dir}: {e}") from e

        posts = []
        skipped = 0
        for entry in entries:
            if not self.codec.is_post_dir(entry):
                continue
            try:
                posts.append(self.codec.read(entry))
            except (CorruptPostError, PostNotFoundError) as e:
                skipped += 1
                storage_logger.warning(
                    "Skipping unreadable post directory",
                    post_dir=entry.name,
                    reason=str(e),
                )

        if skipped:
            storage_logger.warning(
                f"Skipped {skipped} corrupt post(s) while listing",
                skipped=skipped,
                loaded=len(posts),
            )

        # Slug as tie-break keeps the order stable for equal timestamps
        posts.sort(key=lambda p: p.slug)
        posts.sort(key=lambda p: p.created_at, reverse=True)
        return posts

    @staticmethod
    def _find(posts: List[Post], slug: str) -> Post:
        for post in posts:
            if post.slug == slug:
                return post
        raise PostNotFoundError(slug)

    # ============================================================
    # WRITES
    # ============================================================

    def create(self, post: Post) -> Post:
        """
        Persist a new post.

        Assigns the id and timestamps, fills author and meta fallbacks, and
        derives the slug from the title when none is supplied.
        """
        _require_text(post.title, "title")
        _require_text(post.content, "content")

        slug = post.slug or slugify(post.title)
        if not slug:
            raise PostValidationError(
                "Title must contain at least one letter or digit to form a slug",
                field="title",
            )
        _require_slug(slug)

        new_post = Post(
            id=uuid.uuid4(),
            slug=slug,
            title=post.title,
            content=post.content,
            author_name=post.author_name or self.default_author_name,
            author_username=post.author_username or self.default_author_username,
            meta_title=post.meta_title or post.title,
            meta_description=post.meta_description or f"Read about {post.title}",
            published=post.published,
        )

        with self._lock.write_lock():
            if self.post_dir(slug).exists():
                raise SlugConflictError(slug)
            new_post.created_at = new_post.updated_at = self._stamp()
            try:
                self._persist(new_post, self.post_dir(slug))
            except StorageIOError:
                # The directory did not exist before this call
                shutil.rmtree(self.post_dir(slug), ignore_errors=True)
                raise

        storage_logger.info("Created post", slug=slug, post_id=str(new_post.id))
        return new_post

    def update_by_slug(self, slug: str, changes: PostChanges) -> Post:
        """
        Apply a sparse set of field changes to an existing post.

        A slug change moves the post directory before the new metadata is
        written, so the post is never persisted under its old name.
        """
        if changes.title is not None:
            _require_text(changes.title, "title")
        if changes.content is not None:
            _require_text(changes.content, "content")
        if changes.slug is not None:
            _require_slug(changes.slug)

        with self._lock.write_lock():
            posts = self._load_all()
            existing = self._find(posts, slug)

            new_slug = changes.slug if changes.slug is not None else existing.slug
            if new_slug != existing.slug:
                for other in posts:
                    if other.slug == new_slug and other.id != existing.id:
                        raise SlugConflictError(new_slug)
                # A directory that is not a decodable post still occupies the name
                if self.post_dir(new_slug).exists():
                    raise SlugConflictError(new_slug)

            updated = changes.apply_to(existing)
            updated.id = existing.id
            updated.created_at = existing.created_at
            updated.updated_at = self._stamp(after=existing.updated_at)

            if new_slug == existing.slug:
                try:
                    self._persist(updated, self.post_dir(new_slug))
                except StorageIOError:
                    self._restore(existing, self.post_dir(new_slug))
                    raise
            else:
                self._rename(existing.slug, new_slug)
                try:
                    self._persist(updated, self.post_dir(new_slug))
                except StorageIOError:
                    self._restore(existing, self.post_dir(new_slug))
                    self._rename(new_slug, existing.slug)
                    raise

        storage_logger.info(
            "Updated post",
            slug=new_slug,
            previous_slug=slug if new_slug != slug else None,
            fields=sorted(changes.supplied()),
        )
        return updated

    def delete_by_slug(self, slug: str):
        """Remove the post directory. Irreversible."""
        with self._lock.write_lock():
            self._find(self._load_all(), slug)
            try:
                shutil.rmtree(self.post_dir(slug))
            except OSError as e:
                storage_logger.error("Failed to delete post directory", error=e, slug=slug)
                raise StorageIOError(f"failed to delete blog directory for '{slug}': {e}") from e

        storage_logger.info("Deleted post", slug=slug)

    def _stamp(self, after: Optional[datetime] = None) -> datetime:
        """
        Current time, strictly later than every stamp this store has issued
        and than ``after``. Call with the write lock held.
        """
        stamp = _now()
        for floor in (self._last_stamp, after):
            if floor is not None and stamp <= floor:
                stamp = floor + timedelta(microseconds=1)
        self._last_stamp = stamp
        return stamp

    def _restore(self, previous: Post, directory: Path):
        """
        Put back the metadata of a post whose update failed part way.

        The body is only replaced after the metadata, so restoring the
        metadata is enough to return the directory to its previous state.
        """
        try:
            self.codec.write_metadata(previous, directory)
        except StorageIOError as e:
            storage_logger.error("Failed to restore post after failed update", error=e, slug=previous.slug)
            raise
        storage_logger.warning("Restored post after failed update", slug=previous.slug)

    def _rename(self, old_slug: str, new_slug: str):
        try:
            self.post_dir(old_slug).rename(self.post_dir(new_slug))
        except OSError as e:
            storage_logger.error(
                "Failed to rename post directory",
                error=e,
                old_slug=old_slug,
                new_slug=new_slug,
            )
            raise StorageIOError(f"failed to rename blog directory '{old_slug}' to '{new_slug}': {e}") from e
        storage_logger.info("Renamed post directory", old_slug=old_slug, new_slug=new_slug)

    def _persist(self, post: Post, directory: Path):
        try:
            self.codec.write(post, directory)
        except StorageIOError as e:
            storage_logger.error("Failed to persist post", error=e, slug=post.slug)
            raise


def _require_text(value: str, field: str):
    if not value or not value.strip():
        raise PostValidationError(f"{field.capitalize()} is required", field=field)


def _require_slug(slug: str):
    if not is_valid_slug(slug):
        raise PostValidationError(
            "Slug may only contain lowercase letters, digits and single hyphens",
            field="slug",
        )


