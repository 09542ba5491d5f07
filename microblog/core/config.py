"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Supabase (database, auth, storage, realtime)
    supabase_url: str = "http://localhost:54321"
    supabase_key: str = "your-anon-key"
    supabase_jwt_secret: str = "super-secret-jwt-token-with-at-least-32-characters-long"
    supabase_jwt_audience: str = "authenticated"
    profiles_bucket: str = "profiles"

    # Cloudinary (media CDN)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    media_folder: str = "posts"
    max_upload_mb: int = 50

    # App
    feed_page_size: int = 10
    session_cookie_name: str = "access_token"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    debug: bool = True

    @field_validator("supabase_url")
    @classmethod
    def check_supabase_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("Invalid Supabase URL format. Must start with http:// or https://")
        return value.rstrip("/")

    @property
    def cloudinary_configured(self) -> bool:
        """True when every Cloudinary credential is present."""
        return bool(self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
