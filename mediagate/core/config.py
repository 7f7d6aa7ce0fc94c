from pydantic_settings import BaseSettings, SettingsConfigDict

# Credentials are read from <PROVIDER_UPPERCASE> + this suffix, e.g. OPENAI_API_KEY
CREDENTIAL_ENV_SUFFIX = "_API_KEY"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # Public origin used to build media URLs, e.g. "https://gateway.example.com".
    # Empty → URLs are relative to the gateway root.
    public_base_url: str = ""

    # Vendor calls
    vendor_timeout_seconds: float = 120.0
    playht_user_id: str = "user_id"
    google_cloud_project: str = ""  # Veo (Vertex AI)
    google_cloud_location: str = "us-central1"

    # Video task polling (Runway, Luma)
    video_poll_interval_seconds: float = 5.0
    video_poll_max_attempts: int = 120

    # Binary output store
    media_ttl_seconds: int = 3600
    media_max_items: int = 256

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable


settings = Settings()


def validate_settings_for_production() -> None:
    """Validate critical settings. Called on startup."""
    errors: list[str] = []

    if settings.vendor_timeout_seconds <= 0:
        errors.append("VENDOR_TIMEOUT_SECONDS must be positive")

    if settings.video_poll_max_attempts < 1:
        errors.append("VIDEO_POLL_MAX_ATTEMPTS must be at least 1")

    if settings.media_max_items < 1:
        errors.append("MEDIA_MAX_ITEMS must be at least 1")

    if settings.app_env == "production":
        if settings.app_debug:
            errors.append("APP_DEBUG must be false in production")
        if not settings.public_base_url:
            errors.append("PUBLIC_BASE_URL must be set in production so media URLs are absolute")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
