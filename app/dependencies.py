"""
Request-scoped access to the blog store.

The store is built once per application (see main.lifespan) and hung off
app.state; tests swap it out with app.dependency_overrides.
"""
from fastapi import Request

from .config import Settings
from .storage import FileBlogStore


def build_blog_store(settings: Settings) -> FileBlogStore:
    """Create the store described by settings."""
    return FileBlogStore(
        settings.blog_data_dir,
        default_author_name=settings.default_author_name,
        default_author_username=settings.default_author_username,
    )


def get_blog_store(request: Request) -> FileBlogStore:
    return request.app.state.blog_store
