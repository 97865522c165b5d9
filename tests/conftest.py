"""
Pytest configuration and fixtures for blog API tests.
"""
import os
import tempfile

# Settings are read at import time; keep the default store out of the repo
os.environ.setdefault("BLOG_DATA_DIR", tempfile.mkdtemp(prefix="blog-test-"))

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_blog_store
from app.limiter import limiter
from app.main import app
from app.models.post import Post
from app.storage import FileBlogStore

# Disable rate limiting for tests
limiter.enabled = False


@pytest.fixture(scope="function")
def data_dir(tmp_path):
    """Fresh, empty data root for each test."""
    return tmp_path / "data"


@pytest.fixture(scope="function")
def store(data_dir):
    """Store bound to the per-test data root."""
    return FileBlogStore(data_dir)


@pytest.fixture(scope="function")
def client(store):
    """Test client whose handlers use the per-test store."""
    app.dependency_overrides[get_blog_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_post(store):
    """Create a post through the store with sensible defaults."""
    def _make(title="Test Post", content="Some *markdown* body.", **fields):
        return store.create(Post(title=title, content=content, **fields))
    return _make
