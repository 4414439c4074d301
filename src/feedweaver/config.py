"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `FEEDWEAVER_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Feedweaver settings.

    All fields are environment-configurable. Prefix is `FEEDWEAVER_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="FEEDWEAVER_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Export
    export_title: str = Field(default="Exported OPML")
    opml_version: str = Field(default="2.0")
    export_filename: str = Field(default="exported_opml.opml")
    export_media_type: str = Field(default="text/xml")
    indent: str = Field(default="  ")

    # Defaults for nodes created by `add`
    new_folder_label: str = Field(default="New Folder")
    new_feed_label: str = Field(default="New RSS Feed")
    new_feed_url: str = Field(default="http://example.com/feed.xml")
    new_feed_site_url: str = Field(default="http://example.com")

    # Action journal (JSONL); disabled when unset
    journal_path: Path | None = Field(default=None)

    # API
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000, ge=1, le=65535)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("FEEDWEAVER_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
