from .blogs import router as blogs_router
from .health import router as health_router
from .pages import router as pages_router

__all__ = [
    "blogs_router",
    "health_router",
    "pages_router",
]
