"""
Blog API Health Check Routes
"""
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import psutil
from fastapi import APIRouter, Depends

from ..dependencies import get_blog_store
from ..storage import BlogStoreError, FileBlogStore

router = APIRouter(prefix="/api/health", tags=["health"])

START_TIME = datetime.now(timezone.utc)


def get_uptime() -> str:
    """Get service uptime as human-readable string"""
    delta = datetime.now(timezone.utc) - START_TIME
    hours, remainder = divmod(delta.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    if delta.days > 0:
        return f"{delta.days}d {hours}h {minutes}m"
    elif hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    else:
        return f"{minutes}m {seconds}s"


def check_storage(data_dir: Path) -> Dict[str, Any]:
    """Check that the data directory exists, is writable and has free space"""
    if not data_dir.is_dir():
        return {
            "status": "unhealthy",
            "error": f"Data directory does not exist: {data_dir}",
        }
    if not os.access(data_dir, os.W_OK):
        return {
            "status": "unhealthy",
            "error": f"Data directory is not writable: {data_dir}",
        }

    try:
        usage = psutil.disk_usage(str(data_dir))
    except OSError as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }

    free_percent = usage.free / usage.total * 100 if usage.total else 0.0
    status = "healthy" if free_percent > 10 else "warning" if free_percent > 5 else "critical"

    return {
        "status": status,
        "path": str(data_dir),
        "total_gb": round(usage.total / (1024**3), 2),
        "free_gb": round(usage.free / (1024**3), 2),
        "free_percent": round(free_percent, 1),
    }


def check_posts(store: FileBlogStore) -> Dict[str, Any]:
    """Scan the store and report post counts"""
    try:
        counts = store.stats()
    except BlogStoreError as e:
        return {
            "status": "unhealthy",
            "error": str(e),
        }
    return {"status": "healthy", **counts}


# ============================================================
# ROUTES
# ============================================================

@router.get("")
def health():
    """Liveness probe."""
    return {
        "status": "ok",
        "message": "Blog backend is healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "features": ["blogs", "file-storage"],
        "uptime": get_uptime(),
    }


@router.get("/ready")
def health_ready(store: FileBlogStore = Depends(get_blog_store)):
    """
    Readiness probe - can the service read and write posts?
    """
    storage = check_storage(store.data_dir)
    posts = check_posts(store)

    ready = storage["status"] in ("healthy", "warning") and posts["status"] == "healthy"

    return {
        "ok": ready,
        "status": "ready" if ready else "not_ready",
        "checks": {
            "storage": storage,
            "posts": posts,
        },
        "python_version": sys.version.split()[0],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
