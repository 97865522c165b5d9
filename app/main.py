"""
Blog API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .dependencies import build_blog_store
from .limiter import limiter
from .logging_config import api_logger
from .middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from .pages import find_asset_files
from .responses import (
    api_exception_handler,
    request_validation_handler,
    store_exception_handler,
    unhandled_exception_handler,
)
from .routes import blogs_router, health_router, pages_router
from .storage import BlogStoreError

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the blog store for the lifetime of the app"""
    app.state.blog_store = build_blog_store(settings)
    api_logger.info(
        "Blog store ready",
        data_dir=str(app.state.blog_store.data_dir),
        environment=settings.environment,
    )
    yield


app = FastAPI(
    title=settings.app_name,
    description="File-backed blog publishing backend",
    version="1.0.0",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.state.assets = None
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(BlogStoreError, store_exception_handler)
app.add_exception_handler(StarletteHTTPException, api_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

# Frontend build: hashed assets are resolved once at startup
if settings.static_path:
    static_path = Path(settings.static_path)
    if static_path.is_dir():
        app.state.assets = find_asset_files(static_path)
        app.mount("/assets", StaticFiles(directory=static_path / "assets"), name="assets")
        api_logger.info(
            "Serving frontend assets",
            js=app.state.assets.js_file,
            css=app.state.assets.css_file,
        )
    else:
        api_logger.warning("Static path not found, skipping asset serving", path=str(static_path))

# Routes
app.include_router(health_router)
app.include_router(blogs_router)
app.include_router(pages_router)
