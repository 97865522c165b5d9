"""
Blog store error taxonomy.
"""


class BlogStoreError(Exception):
    """Base class for all blog store errors."""


class PostValidationError(BlogStoreError):
    """Caller-supplied post data failed the required-field checks."""

    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class PostNotFoundError(BlogStoreError):
    """No valid, fully decodable post exists for the slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"blog '{slug}' not found")


class SlugConflictError(BlogStoreError):
    """The slug is already used by a different post."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"slug '{slug}' already exists")


class CorruptPostError(BlogStoreError):
    """A post directory exists but its files cannot be decoded."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"corrupt post at {path}: {reason}")


class StorageIOError(BlogStoreError, OSError):
    """A filesystem operation failed (permissions, disk full, missing parent)."""
