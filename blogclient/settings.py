from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """
    Environment-driven settings for the blog client.
    """

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    # ---- API ----
    api_base_url: str = Field(default="http://localhost:8045", alias="BLOG_API_BASE_URL")
    api_prefix: str = Field(default="/api", alias="BLOG_API_PREFIX")

    request_timeout_sec: float = Field(default=15.0, alias="BLOG_REQUEST_TIMEOUT_SEC")
    user_agent: str = Field(default="blogclient/0.1", alias="BLOG_USER_AGENT")

    # ---- Views ----
    # Server returns 20 posts when unset
    list_limit: Optional[int] = Field(default=None, alias="BLOG_LIST_LIMIT")

    # ---- Effect jobs ----
    poll_interval_sec: float = Field(default=1.0, alias="BLOG_POLL_INTERVAL_SEC")

    log_level: str = Field(default="INFO", alias="BLOG_LOG_LEVEL")


def load_settings() -> ClientSettings:
    return ClientSettings()
