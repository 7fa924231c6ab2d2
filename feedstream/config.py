from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Credentials
    feedstream_api_key: str | None = None
    feedstream_api_secret: str | None = None  # Server-side only, never ship to browsers/apps
    feedstream_app_id: str | None = None  # Needed for real-time subscriptions

    # API endpoint
    feedstream_base_url: str = "https://api.feedstream.io"
    feedstream_api_version: str = "v1.0"

    # HTTP client timeouts (seconds)
    feedstream_http_connect_timeout: float = 5.0
    feedstream_http_read_timeout: float = 30.0

    # Logging
    feedstream_log_level: str = "info"

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
