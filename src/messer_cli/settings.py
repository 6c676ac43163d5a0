"""Pydantic-based settings for the Messer client."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MESSER_",
        case_sensitive=False,
        env_file=os.getenv("MESSER_ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gateway settings
    base_url: str = Field(default="http://localhost:8010/v1", description="Messaging gateway base URL")
    events_url: str = Field(default="ws://localhost:8010/v1/events", description="WebSocket URL for push events")
    request_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    # Thread settings
    thread_list_limit: int = Field(default=20, description="Threads fetched per thread list refresh")
    thread_list_folders: list[str] = Field(default=["INBOX"], description="Folders included in a refresh")
    history_limit: int = Field(default=10, description="Default number of messages shown by history")

    # Terminal settings
    log_level: str = Field(default="WARNING", description="Logging level")
    notify_terminal: bool = Field(default=True, description="Show unread count in the terminal title")

    @property
    def log_format(self) -> str:
        """Log message format."""
        return "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


settings = Settings()
