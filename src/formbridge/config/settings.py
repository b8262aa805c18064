from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FORMBRIDGE_",
        env_file=".env",
        extra="ignore",
    )

    # Runtime
    ENVIRONMENT: str = Field(default="dev", description="Environment name")
    HOST: str = Field(default="0.0.0.0", description="Bind host")
    PORT: int = Field(default=7920, description="Bind port")
    LOG_LEVEL: str = Field(default="INFO", description="Root logging level")

    # Database
    DATABASE_URL: str = Field(default="sqlite:///formbridge_dev.db")

    # Page URLs
    PAGE_HEADER: str = Field(default="x-page", description="Current page header name")
    BASE_URL: str = Field(default="/", description="Prefix for resolved page URLs")
    URL_POSTFIX: str = Field(
        default="", description="Suffix appended to resolved page URLs, e.g. .html"
    )

    # Menu
    MENU_ACTIVE_CLASS: str = Field(default="ui-state-active")
    MENU_INACTIVE_CLASS: str = Field(default="ui-state-default")
    MENU_ITEMS: str = Field(
        default="Home",
        description="Comma-separated menu labels; '|' adds a separator",
    )

    # Forms
    EMPTY_OPTION_TEXT: str = Field(
        default="- no value -",
        description="Empty option added to list widgets of optional fields",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
