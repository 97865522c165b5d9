#!/usr/bin/env python3
"""
Seed a blog data directory with sample posts.

Usage:
    python scripts/seed_posts.py [--data-dir data] [--force]

Skips seeding when the directory already holds posts unless --force is given.
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.models.post import Post  # noqa: E402
from app.storage import FileBlogStore, SlugConflictError  # noqa: E402

SAMPLE_POSTS = [
    Post(
        title="Hello, World!",
        content="# Hello, World!\n\nThe first post on a brand new blog.\n",
        published=True,
    ),
    Post(
        title="Writing Posts in Markdown",
        content=(
            "## Formatting\n\n"
            "Posts are plain markdown. Use **bold**, _italics_ and `code`.\n\n"
            "```python\nprint('hello')\n```\n"
        ),
        meta_description="A quick tour of the markdown supported in posts",
        published=True,
    ),
    Post(
        title="Draft: Upcoming Features",
        content="Ideas for what comes next.\n",
        author_name="Site Admin",
        author_username="admin",
    ),
]


def seed(data_dir: str, force: bool = False) -> int:
    store = FileBlogStore(data_dir)

    existing = store.list_all()
    if existing and not force:
        print(f"Data directory already contains {len(existing)} post(s), skipping.")
        return 0

    created = 0
    for sample in SAMPLE_POSTS:
        try:
            post = store.create(sample)
        except SlugConflictError as e:
            print(f"- Skipped: {e}")
            continue
        created += 1
        print(f"✓ Created: {post.slug}")

    return created


def main():
    parser = argparse.ArgumentParser(description="Seed sample blog posts")
    parser.add_argument("--data-dir", default="data", help="Blog data directory")
    parser.add_argument("--force", action="store_true", help="Seed even if posts exist")
    args = parser.parse_args()

    created = seed(args.data_dir, force=args.force)
    print(f"Blog data seeded: {created} post(s) in {args.data_dir}")


if __name__ == "__main__":
    main()
