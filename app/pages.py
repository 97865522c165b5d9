"""
Server-rendered page shells.

Each page is a minimal HTML document that loads the frontend bundle and
embeds post data as ``window.__BLOG_DATA__`` so the client can hydrate
without a second request.
"""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, List, Optional

from .models.post import Post


@dataclass
class AssetInfo:
    """Hashed frontend bundle names, e.g. index-3f2a1c.js"""
    js_file: str
    css_file: str


def find_asset_files(static_path: Path) -> AssetInfo:
    """Locate the built index-*.js and index-*.css under static_path/assets."""
    assets_dir = Path(static_path) / "assets"
    js_files = sorted(assets_dir.glob("index-*.js"))
    if not js_files:
        raise FileNotFoundError(f"no JS files found in {assets_dir}")
    css_files = sorted(assets_dir.glob("index-*.css"))
    if not css_files:
        raise FileNotFoundError(f"no CSS files found in {assets_dir}")
    return AssetInfo(js_file=js_files[0].name, css_file=css_files[0].name)


def embed_json(data: Any) -> str:
    """JSON safe to place inside a <script> element."""
    return (
        json.dumps(data)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def base_url(host: str) -> str:
    """Canonical base URL; localhost is served over plain http."""
    if "localhost" in host or host.startswith("127.0.0.1"):
        return f"http://{host}"
    return f"https://{host}"


def render_page(
    title: str,
    description: str = "",
    data: Any = None,
    assets: Optional[AssetInfo] = None,
    canonical: Optional[str] = None,
) -> str:
    head = [
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        f"<title>{escape(title)}</title>",
    ]
    if description:
        head.append(f'<meta name="description" content="{escape(description)}">')
        head.append(f'<meta property="og:description" content="{escape(description)}">')
    head.append(f'<meta property="og:title" content="{escape(title)}">')
    if canonical:
        head.append(f'<link rel="canonical" href="{escape(canonical)}">')
    if assets:
        head.append(f'<link rel="stylesheet" href="/assets/{escape(assets.css_file)}">')

    body = ['<div id="root"></div>']
    if data is not None:
        body.append(f"<script>window.__BLOG_DATA__ = {embed_json(data)};</script>")
    if assets:
        body.append(f'<script type="module" src="/assets/{escape(assets.js_file)}"></script>')

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n  " + "\n  ".join(head) + "\n</head>\n"
        "<body>\n  " + "\n  ".join(body) + "\n</body>\n"
        "</html>\n"
    )


def generate_sitemap_xml(posts: List[Post], base: str) -> str:
    """Sitemap with the home page and every published post."""
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        "  <url>",
        f"    <loc>{escape(base)}/</loc>",
        f"    <lastmod>{today}</lastmod>",
        "    <changefreq>daily</changefreq>",
        "    <priority>1.0</priority>",
        "  </url>",
    ]
    for post in posts:
        if not post.published:
            continue
        lines.extend([
            "  <url>",
            f"    <loc>{escape(base)}/blogs/{escape(post.slug)}</loc>",
            f"    <lastmod>{post.updated_at.strftime('%Y-%m-%d')}</lastmod>",
            "    <changefreq>monthly</changefreq>",
            "    <priority>0.8</priority>",
            "  </url>",
        ])
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
