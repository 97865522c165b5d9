"""
Post record codec: one directory per post holding the markdown body and a
JSON sidecar with every other field.

    <data_dir>/<slug>/content.md
    <data_dir>/<slug>/metadata.json
"""
import json
import os
import re
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..logging_config import storage_logger
from ..models.post import Post
from .errors import CorruptPostError, PostNotFoundError, StorageIOError

CONTENT_FILE = "content.md"
METADATA_FILE = "metadata.json"

# Alternate layout accepted when strict RFC 3339 parsing fails.
ALT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# Fractional seconds of any length; fromisoformat before 3.11 takes only 3 or 6 digits
_FRACTION = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def format_timestamp(value: datetime) -> str:
    """RFC 3339 with microseconds and an explicit offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="microseconds")


def parse_timestamp(raw) -> Optional[datetime]:
    """
    Parse a stored timestamp.

    Accepts RFC 3339 (``Z`` suffix and fractional seconds included) or the
    ``%Y-%m-%dT%H:%M:%S%z`` layout. Returns None when neither applies or the
    value carries no UTC offset.
    """
    if not isinstance(raw, str) or not raw:
        return None

    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is not None:
            return parsed
    except ValueError:
        pass

    try:
        return datetime.strptime(raw.strip(), ALT_TIMESTAMP_FORMAT)
    except ValueError:
        return None


class PostRecordCodec:
    """Reads and writes a single post directory."""

    def is_post_dir(self, directory: Path) -> bool:
        """True if both backing files are present."""
        return (directory / CONTENT_FILE).is_file() and (directory / METADATA_FILE).is_file()

    def encode_metadata(self, post: Post) -> dict:
        return {
            "id": str(post.id),
            "slug": post.slug,
            "title": post.title,
            "author_name": post.author_name,
            "author_username": post.author_username,
            "meta_title": post.meta_title,
            # Older readers only know meta_name
            "meta_name": post.meta_title,
            "meta_description": post.meta_description,
            "created": format_timestamp(post.created_at),
            "updated": format_timestamp(post.updated_at),
            "published": post.published,
        }

    def write(self, post: Post, directory: Path):
        """
        Persist post into directory, creating it if needed.

        Each file is written to a temporary sibling and moved into place, so a
        failed write never leaves a truncated file behind. Metadata is
        replaced before the body: if the body write fails the previous body
        is still on disk and write_metadata() with the old post restores the
        record.
        """
        directory = Path(directory)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            self._write_file(directory / METADATA_FILE, self._metadata_text(post))
            self._write_file(directory / CONTENT_FILE, post.content)
        except OSError as e:
            raise StorageIOError(f"failed to write post '{post.slug}' to {directory}: {e}") from e

    def write_metadata(self, post: Post, directory: Path):
        """Replace only the metadata file of an existing post directory."""
        directory = Path(directory)
        try:
            self._write_file(directory / METADATA_FILE, self._metadata_text(post))
        except OSError as e:
            raise StorageIOError(f"failed to write metadata for '{post.slug}' to {directory}: {e}") from e

    def _metadata_text(self, post: Post) -> str:
        return json.dumps(self.encode_metadata(post), indent=2)

    def _write_file(self, path: Path, text: str):
        tmp = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        try:
            with tmp:
                tmp.write(text)
            os.replace(tmp.name, path)
        except OSError:
            try:
                os.unlink(tmp.name)
            except FileNotFoundError:
                pass
            raise

    def read(self, directory: Path) -> Post:
        """
        Load the post stored in directory.

        Raises PostNotFoundError if either file is missing and
        CorruptPostError if the metadata cannot be decoded.
        """
        directory = Path(directory)
        if not self.is_post_dir(directory):
            raise PostNotFoundError(directory.name)

        try:
            raw_metadata = (directory / METADATA_FILE).read_text(encoding="utf-8")
            with open(directory / CONTENT_FILE, encoding="utf-8", newline="") as f:
                content = f.read()
        except FileNotFoundError:
            # Removed between the existence check and the read
            raise PostNotFoundError(directory.name)
        except UnicodeDecodeError as e:
            raise CorruptPostError(directory, f"not valid UTF-8: {e}")
        except OSError as e:
            raise StorageIOError(f"failed to read post at {directory}: {e}") from e

        try:
            metadata = json.loads(raw_metadata)
        except json.JSONDecodeError as e:
            raise CorruptPostError(directory, f"invalid metadata JSON: {e}")
        if not isinstance(metadata, dict):
            raise CorruptPostError(directory, "metadata is not a JSON object")

        return self.decode(metadata, content, directory)

    def decode(self, metadata: dict, content: str, directory: Path) -> Post:
        raw_id = metadata.get("id")
        if not isinstance(raw_id, str):
            raise CorruptPostError(directory, "missing id")
        try:
            post_id = uuid.UUID(raw_id)
        except ValueError:
            raise CorruptPostError(directory, f"invalid id {raw_id!r}")

        slug = _text(metadata, "slug", directory) or directory.name
        if slug != directory.name:
            raise CorruptPostError(directory, f"slug {slug!r} does not match directory")

        published = metadata.get("published", False)
        if not isinstance(published, bool):
            raise CorruptPostError(directory, "published is not a boolean")

        meta_title = _text(metadata, "meta_title", directory)
        if "meta_title" not in metadata:
            meta_title = _text(metadata, "meta_name", directory)

        return Post(
            id=post_id,
            slug=slug,
            title=_text(metadata, "title", directory),
            content=content,
            author_name=_text(metadata, "author_name", directory),
            author_username=_text(metadata, "author_username", directory),
            meta_title=meta_title,
            meta_description=_text(metadata, "meta_description", directory),
            published=published,
            created_at=_timestamp(metadata, "created", directory),
            updated_at=_timestamp(metadata, "updated", directory),
        )


def _text(metadata: dict, key: str, directory: Path) -> str:
    value = metadata.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise CorruptPostError(directory, f"{key} is not a string")
    return value


def _timestamp(metadata: dict, key: str, directory: Path) -> datetime:
    raw = metadata.get(key)
    parsed = parse_timestamp(raw)
    if parsed is None:
        storage_logger.warning(
            f"Unparseable {key} timestamp, using current time",
            post_dir=str(directory),
            field=key,
            value=raw,
        )
        return datetime.now(timezone.utc)
    return parsed
