"""
Blog routes for CRUD operations on file-backed posts.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Request

from ..config import get_settings
from ..dependencies import get_blog_store
from ..limiter import limiter
from ..models.post import Post, PostChanges
from ..responses import bad_request, require, success
from ..schemas.blogs import BlogCreate, BlogResponse, BlogUpdate
from ..storage import FileBlogStore

router = APIRouter(prefix="/api/blogs", tags=["blogs"])

WRITE_LIMIT = get_settings().write_rate_limit


@router.get("", response_model=List[BlogResponse])
def list_blogs(
    published: Optional[bool] = None,
    store: FileBlogStore = Depends(get_blog_store),
):
    """List all posts, newest first, optionally filtered by published flag."""
    posts = store.list_all()
    if published is not None:
        posts = [p for p in posts if p.published == published]
    return [p.to_dict() for p in posts]


@router.get("/{slug}", response_model=BlogResponse)
def get_blog(slug: str, store: FileBlogStore = Depends(get_blog_store)):
    """Get a single post by slug."""
    return store.get_by_slug(slug).to_dict()


@router.post("", status_code=201)
@limiter.limit(WRITE_LIMIT)
def create_blog(
    request: Request,
    blog_data: BlogCreate,
    store: FileBlogStore = Depends(get_blog_store),
):
    """Create a new post; the slug is derived from the title when omitted."""
    require(blog_data.title, "title")
    require(blog_data.content, "content")

    post = store.create(Post(**blog_data.model_dump()))
    return success("Blog created successfully", post.to_dict())


@router.put("/{slug}")
@limiter.limit(WRITE_LIMIT)
def update_blog(
    request: Request,
    slug: str,
    blog_update: BlogUpdate,
    store: FileBlogStore = Depends(get_blog_store),
):
    """Apply a partial update; renaming the slug moves the post."""
    changes = PostChanges(**blog_update.model_dump(exclude_unset=True))
    if changes.is_empty():
        bad_request("No fields to update", "At least one field must be provided")

    post = store.update_by_slug(slug, changes)
    return success("Blog updated successfully", post.to_dict())


@router.delete("/{slug}")
@limiter.limit(WRITE_LIMIT)
def delete_blog(
    request: Request,
    slug: str,
    store: FileBlogStore = Depends(get_blog_store),
):
    """Delete a post and everything in its directory."""
    store.delete_by_slug(slug)
    return success("Blog deleted successfully")
