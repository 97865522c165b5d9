"""
Tests for slug generation.
"""
import re

import pytest

from app.storage.slug import is_valid_slug, slugify


class TestSlugify:
    """Test title -> slug conversion."""

    def test_punctuation_is_stripped(self):
        assert slugify("Hello, World!") == "hello-world"

    def test_underscores_become_hyphens(self):
        assert slugify("snake_case_title") == "snake-case-title"

    def test_hyphen_runs_collapse(self):
        assert slugify("a -- b   ---  c") == "a-b-c"

    def test_leading_and_trailing_hyphens_trimmed(self):
        assert slugify("  - Spaced Out -  ") == "spaced-out"

    def test_digits_kept(self):
        assert slugify("Top 10 Tips for 2024") == "top-10-tips-for-2024"

    def test_non_ascii_letters_dropped(self):
        assert slugify("Café Crème") == "caf-crme"

    def test_no_alphanumerics_gives_empty(self):
        assert slugify("!!! ???") == ""
        assert slugify("") == ""

    @pytest.mark.parametrize("title", [
        "Hello, World!",
        "--Leading and trailing--",
        "Mixed_CASE and   spaces",
        "Symbols #$%^&* everywhere",
        "Émojis 🎉 and ünïcödé",
        "a_-_b",
    ])
    def test_output_shape(self, title):
        slug = slugify(title)
        assert re.fullmatch(r"[a-z0-9-]*", slug)
        assert "--" not in slug
        assert not slug.startswith("-")
        assert not slug.endswith("-")

    def test_idempotent(self):
        slug = slugify("Some Title: Part 2")
        assert slugify(slug) == slug


class TestIsValidSlug:
    """Test canonical slug check."""

    @pytest.mark.parametrize("slug", ["hello", "hello-world", "a1-b2-c3"])
    def test_valid(self, slug):
        assert is_valid_slug(slug)

    @pytest.mark.parametrize("slug", ["", "Hello", "-x", "x-", "a--b", "a b", "../etc", "a/b", "a_b"])
    def test_invalid(self, slug):
        assert not is_valid_slug(slug)
