"""Application settings for database, storage, auth and third-party services."""

from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from the environment or a ``.env`` file."""

    # Application configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_title: str = Field(default="Barrel Coach Backend", alias="API_TITLE")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    app_url: str = Field(default="https://barrel-coach.lovable.app", alias="APP_URL")
    public_api_url: str = Field(default="http://localhost:8000", alias="PUBLIC_API_URL")

    # Database configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./barrelcoach.db",
        alias="DATABASE_URL",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Video storage
    storage_root: str = Field(default="./storage", alias="STORAGE_ROOT")
    storage_public_url: str = Field(
        default="http://localhost:8000/storage", alias="STORAGE_PUBLIC_URL"
    )
    swing_video_bucket: str = Field(default="swing-videos", alias="SWING_VIDEO_BUCKET")
    drill_video_bucket: str = Field(default="videos", alias="DRILL_VIDEO_BUCKET")

    # Authentication configuration
    jwt_secret_key: str = Field(
        default="change-this-secret-key-in-production-use-openssl-rand-hex-32",
        alias="JWT_SECRET_KEY",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: Optional[str] = Field(default=None, alias="JWT_AUDIENCE")
    service_role_key: Optional[str] = Field(default=None, alias="SERVICE_ROLE_KEY")

    # Twilio messaging
    twilio_account_sid: Optional[str] = Field(default=None, alias="TWILIO_ACCOUNT_SID")
    twilio_auth_token: Optional[str] = Field(default=None, alias="TWILIO_AUTH_TOKEN")
    twilio_phone_number: Optional[str] = Field(default=None, alias="TWILIO_PHONE_NUMBER")
    twilio_whatsapp_number: Optional[str] = Field(default=None, alias="TWILIO_WHATSAPP_NUMBER")
    twilio_api_base: str = Field(default="https://api.twilio.com", alias="TWILIO_API_BASE")

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1", alias="AI_GATEWAY_URL"
    )
    ai_gateway_api_key: Optional[str] = Field(default=None, alias="AI_GATEWAY_API_KEY")
    auto_tag_model: str = Field(default="google/gemini-2.5-flash", alias="AUTO_TAG_MODEL")
    auto_tag_temperature: float = Field(default=0.3, alias="AUTO_TAG_TEMPERATURE")

    # Transcription
    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    transcription_model: str = Field(default="whisper-1", alias="TRANSCRIPTION_MODEL")

    # Swing scoring engine
    scoring_api_url: str = Field(default="https://api.rebootmotion.com", alias="SCORING_API_URL")
    scoring_username: Optional[str] = Field(default=None, alias="SCORING_USERNAME")
    scoring_password: Optional[str] = Field(default=None, alias="SCORING_PASSWORD")
    scoring_timeout_seconds: float = Field(default=120.0, alias="SCORING_TIMEOUT_SECONDS")
    token_expiry_buffer_seconds: int = Field(default=3600, alias="TOKEN_EXPIRY_BUFFER_SECONDS")

    # Email
    resend_api_key: Optional[str] = Field(default=None, alias="RESEND_API_KEY")
    resend_api_base: str = Field(default="https://api.resend.com", alias="RESEND_API_BASE")
    email_from: str = Field(
        default="Catching Barrels <onboarding@resend.dev>", alias="EMAIL_FROM"
    )

    # Error tracking / observability
    error_tracking_enabled: bool = Field(default=False, alias="ERROR_TRACKING_ENABLED")
    sentry_dsn: Optional[str] = Field(default=None, alias="SENTRY_DSN")
    sentry_traces_sample_rate: float = Field(default=0.0, alias="SENTRY_TRACES_SAMPLE_RATE")
    sentry_profiles_sample_rate: float = Field(default=0.0, alias="SENTRY_PROFILES_SAMPLE_RATE")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate and normalize database URL."""
        # Convert sync SQLite URLs to async
        if v.startswith("sqlite:///") and "aiosqlite" not in v:
            v = v.replace("sqlite:///", "sqlite+aiosqlite:///")
        # Convert sync PostgreSQL URLs to async
        if v.startswith("postgresql://") and "asyncpg" not in v:
            v = v.replace("postgresql://", "postgresql+asyncpg://")
        return v

    @property
    def is_sqlite(self) -> bool:
        """Check if the database is SQLite."""
        return "sqlite" in self.database_url.lower()

    @property
    def twilio_configured(self) -> bool:
        return bool(
            self.twilio_account_sid and self.twilio_auth_token and self.twilio_phone_number
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
