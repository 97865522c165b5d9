from .blog_store import FileBlogStore
from .codec import PostRecordCodec
from .errors import (
    BlogStoreError,
    CorruptPostError,
    PostNotFoundError,
    PostValidationError,
    SlugConflictError,
    StorageIOError,
)
from .rwlock import ReadWriteLock
from .slug import is_valid_slug, slugify

__all__ = [
    "FileBlogStore",
    "PostRecordCodec",
    "BlogStoreError",
    "CorruptPostError",
    "PostNotFoundError",
    "PostValidationError",
    "SlugConflictError",
    "StorageIOError",
    "ReadWriteLock",
    "is_valid_slug",
    "slugify",
]
