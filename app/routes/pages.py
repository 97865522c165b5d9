"""
Server-rendered pages and sitemap.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from ..config import get_settings
from ..dependencies import get_blog_store
from ..pages import base_url, generate_sitemap_xml, render_page
from ..storage import FileBlogStore, PostNotFoundError

router = APIRouter(tags=["pages"])


def _assets(request: Request):
    return getattr(request.app.state, "assets", None)


def _not_found_page(request: Request) -> HTMLResponse:
    html = render_page("Page not found", assets=_assets(request))
    return HTMLResponse(html, status_code=404)


@router.get("/", response_class=HTMLResponse)
def home_page(request: Request, store: FileBlogStore = Depends(get_blog_store)):
    """Home page with every post embedded."""
    settings = get_settings()
    posts = store.list_all()
    html = render_page(
        settings.site_title,
        description=settings.site_description,
        data=[p.to_dict() for p in posts],
        assets=_assets(request),
        canonical=base_url(request.headers.get("host", "localhost")) + "/",
    )
    return HTMLResponse(html)


@router.get("/blogs/new", response_class=HTMLResponse)
def new_blog_page(request: Request):
    return HTMLResponse(render_page("New post", assets=_assets(request)))


@router.get("/blogs/{slug}", response_class=HTMLResponse)
def blog_page(slug: str, request: Request, store: FileBlogStore = Depends(get_blog_store)):
    """Single post page; unknown slugs get the not-found shell."""
    try:
        post = store.get_by_slug(slug)
    except PostNotFoundError:
        return _not_found_page(request)

    host = request.headers.get("host", "localhost")
    html = render_page(
        post.meta_title or post.title,
        description=post.meta_description,
        data=post.to_dict(),
        assets=_assets(request),
        canonical=f"{base_url(host)}/blogs/{post.slug}",
    )
    return HTMLResponse(html)


@router.get("/blogs/{slug}/edit", response_class=HTMLResponse)
def edit_blog_page(slug: str, request: Request, store: FileBlogStore = Depends(get_blog_store)):
    try:
        post = store.get_by_slug(slug)
    except PostNotFoundError:
        return _not_found_page(request)

    html = render_page(f"Edit: {post.title}", data=post.to_dict(), assets=_assets(request))
    return HTMLResponse(html)


@router.get("/sitemap.xml")
def sitemap(request: Request, store: FileBlogStore = Depends(get_blog_store)):
    """Sitemap of the home page and all published posts."""
    host = request.headers.get("host", "localhost")
    xml = generate_sitemap_xml(store.list_all(), base_url(host))
    return Response(content=xml, media_type="application/xml")
