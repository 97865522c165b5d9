"""
Slug generation for blog post URLs.
"""
import re

_SEPARATORS = re.compile(r"[ _]")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")
_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(title: str) -> str:
    """
    Convert a title to a URL-safe slug.

    "Hello, World!" -> "hello-world". A title without any ASCII letters or
    digits produces an empty string; callers must treat that as invalid.
    """
    slug = _SEPARATORS.sub("-", title.lower())
    slug = _DISALLOWED.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    """True if the slug is already in canonical slugify() form."""
    return bool(slug) and _SLUG_PATTERN.match(slug) is not None
