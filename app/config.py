"""
Application configuration using environment variables.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Blog API"
    debug: bool = False
    environment: str = "development"
    port: int = 8080

    # Storage
    blog_data_dir: str = "data"

    # Frontend build (hashed assets + SSR shell); None disables static serving
    static_path: Optional[str] = None

    # Site metadata for server-rendered pages
    site_title: str = "Blog Platform"
    site_description: str = "A file-backed blog platform"

    # Fallbacks applied when a new post omits its author
    default_author_name: str = "John Doe"
    default_author_username: str = "johndoe"

    # CORS
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Rate limiting (write endpoints)
    rate_limit_enabled: bool = True
    write_rate_limit: str = "30/minute"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
