"""Configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "TRANSCRIPT_HUB_"}

    database_url: str = "sqlite:///./transcript_hub.db"
    host: str = "0.0.0.0"
    port: int = 8400

    youtube_api_key: str = ""
    youtube_api_url: str = "https://www.googleapis.com/youtube/v3"
    caption_fallback_language: str = "en"

    gemini_api_key: str = ""
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_default_model: str = "gemini-2.5-flash"

    cache_max_size: int = 500
    cache_ttl_seconds: int = 3600
    rate_limit_per_minute: int = 10

    # Identity is asserted by the authenticating proxy in front of the app
    user_id_header: str = "X-User-Id"
    user_email_header: str = "X-User-Email"
    user_first_name_header: str = "X-User-First-Name"
    user_last_name_header: str = "X-User-Last-Name"
    admin_emails: list[str] = []


settings = Settings()
