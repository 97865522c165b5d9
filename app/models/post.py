"""
Blog post value types shared by the store and the HTTP layer.
"""
import uuid
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Optional


@dataclass
class Post:
    """A blog post: markdown body plus its sidecar metadata."""
    title: str
    content: str
    id: Optional[uuid.UUID] = None
    slug: str = ""
    author_name: str = ""
    author_username: str = ""
    meta_title: str = ""
    meta_description: str = ""
    published: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Serialize for JSON responses and embedded page data."""
        return {
            "id": str(self.id) if self.id else None,
            "title": self.title,
            "content": self.content,
            "author_name": self.author_name,
            "author_username": self.author_username,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "slug": self.slug,
            "created": self.created_at.isoformat(timespec="microseconds") if self.created_at else None,
            "updated": self.updated_at.isoformat(timespec="microseconds") if self.updated_at else None,
            "published": self.published,
        }


@dataclass
class PostChanges:
    """
    Sparse set of field changes for an update.

    A field left as None is not touched.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    author_name: Optional[str] = None
    author_username: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    slug: Optional[str] = None
    published: Optional[bool] = None

    def supplied(self) -> dict:
        """Return only the fields that were set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.supplied()

    def apply_to(self, post: Post) -> Post:
        """Return a copy of post with the supplied fields replaced."""
        return replace(post, **self.supplied())
