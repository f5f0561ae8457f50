# config.py

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BlogSettings(BaseSettings):
    """
    Environment-driven settings for the blog page.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- Page ----
    site_name: str = Field(default="PHP Learning Blog", alias="BLOG_SITE_NAME")
    page_title: str = Field(default="My PHP Blog", alias="BLOG_PAGE_TITLE")
    admin_email: str = Field(default="admin@example.com", alias="BLOG_ADMIN_EMAIL")

    # ---- Storage ----
    # In-memory by default: posts live as long as the process does
    database_url: str = Field(default="sqlite+aiosqlite:///:memory:", alias="BLOG_DATABASE_URL")

    # ---- Session ----
    session_secret: str = Field(default="change-me", alias="BLOG_SESSION_SECRET")
    default_user: str = Field(default="John Doe", alias="BLOG_DEFAULT_USER")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", alias="BLOG_LOG_LEVEL")


@lru_cache
def load_settings() -> BlogSettings:
    return BlogSettings()


settings = load_settings()
