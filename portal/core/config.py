"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portal.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Find .env file - check multiple possible locations
def find_env_file() -> Optional[Path]:
    """Find .env file in multiple possible locations."""
    current_dir = os.path.dirname(os.path.abspath(__file__))

    possible_paths = [
        os.path.join(os.getcwd(), ".env"),
        os.path.join(os.path.dirname(current_dir), ".env"),
        os.path.join(os.path.dirname(os.path.dirname(current_dir)), ".env"),
    ]

    for path_str in possible_paths:
        if os.path.exists(path_str):
            path = Path(path_str)
            LOGGER.info(f"Found .env file at: {path}")
            return path

    LOGGER.debug("No .env file found in expected locations")
    return None


ENV_FILE = find_env_file()


class NotionSettings(BaseSettings):
    """Notion workspace credentials, API endpoint and collection defaults."""

    integration_secret: str = Field(default="", validation_alias="NOTION_INTEGRATION_SECRET")
    page_url: str = Field(default="", validation_alias="NOTION_PAGE_URL")
    api_url: str = Field(default="https://api.notion.com/v1", validation_alias="NOTION_API_URL")
    api_version: str = Field(default="2022-06-28", validation_alias="NOTION_VERSION")
    config_path: str = Field(default="notion-config.json", validation_alias="NOTION_CONFIG_PATH")
    page_size: int = Field(default=100, validation_alias="NOTION_PAGE_SIZE")

    # Fallback collection ids, consulted only after the persisted mapping
    categories_database_id: Optional[str] = Field(default=None, validation_alias="NOTION_CATEGORIES_DATABASE_ID")
    articles_database_id: Optional[str] = Field(default=None, validation_alias="NOTION_ARTICLES_DATABASE_ID")
    faqs_database_id: Optional[str] = Field(default=None, validation_alias="NOTION_FAQS_DATABASE_ID")
    support_tickets_database_id: Optional[str] = Field(
        default=None, validation_alias="NOTION_SUPPORT_TICKETS_DATABASE_ID"
    )

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        env_prefix="",  # No prefix for nested settings
    )

    def model_post_init(self, __context) -> None:
        """Log credential presence after initialization."""
        LOGGER.debug(f"Notion integration secret present: {bool(self.integration_secret)}")
        LOGGER.debug(f"Notion page URL present: {bool(self.page_url)}")


class Settings(BaseSettings):
    """Unified application settings with nested models."""

    # Timeout Settings (in seconds)
    http_timeout: int = Field(default=30, validation_alias="HTTP_TIMEOUT")

    notion: NotionSettings = Field(default_factory=lambda: NotionSettings())

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def notion_page_url(self) -> str:
        return self.notion.page_url


settings = Settings()
