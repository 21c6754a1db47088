"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration loaded from environment variables.

    Only secrets and deployment-specific values belong here.
    Application constants live in their respective modules.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ---------------------------------------------------------------------------
    # Supabase (auth, storage, short-link table)
    # ---------------------------------------------------------------------------
    supabase_url: str = Field(default="", validation_alias="SUPABASE_URL")
    supabase_publishable_key: str = Field(default="", validation_alias="SUPABASE_PUBLISHABLE_KEY")
    supabase_secret_key: str = Field(default="", validation_alias="SUPABASE_SECRET_KEY")
    supabase_jwt_secret: str | None = Field(default=None, validation_alias="SUPABASE_JWT_SECRET")
    supabase_jwt_audience: str | None = Field(default=None, validation_alias="SUPABASE_JWT_AUDIENCE")
    supabase_auth_mode: str = Field(default="remote", validation_alias="SUPABASE_AUTH_MODE")
    supabase_bucket: str = Field(default="recordings", validation_alias="SUPABASE_BUCKET")
    storage_public_base_url: str = Field(default="", validation_alias="STORAGE_PUBLIC_BASE_URL")

    # ---------------------------------------------------------------------------
    # Third-party identity (OAuth access tokens)
    # ---------------------------------------------------------------------------
    oauth_userinfo_url: str | None = Field(
        default="https://openidconnect.googleapis.com/v1/userinfo",
        validation_alias="OAUTH_USERINFO_URL",
    )

    # ---------------------------------------------------------------------------
    # AI providers
    # ---------------------------------------------------------------------------
    groq_api_key: str = Field(default="", validation_alias="GROQ_API_KEY")
    groq_model: str = Field(default="whisper-large-v3-turbo", validation_alias="GROQ_MODEL")
    transcription_prompt: str | None = Field(default=None, validation_alias="TRANSCRIPTION_PROMPT")
    transcription_language: str | None = Field(default=None, validation_alias="TRANSCRIPTION_LANGUAGE")
    openrouter_api_key: str = Field(default="", validation_alias="OPENROUTER_API_KEY")
    openrouter_model: str = Field(default="openai/gpt-4o-mini", validation_alias="OPENROUTER_MODEL")

    # ---------------------------------------------------------------------------
    # Upload processing
    # ---------------------------------------------------------------------------
    public_app_url: str | None = Field(default=None, validation_alias="PUBLIC_APP_URL")
    upload_dir: str = Field(default="uploads", validation_alias="UPLOAD_DIR")
    ffmpeg_path: str = Field(default="ffmpeg", validation_alias="FFMPEG_PATH")
    upload_timeout_seconds: float = Field(default=600.0, validation_alias="UPLOAD_TIMEOUT_SECONDS")
    max_request_bytes: int = Field(default=500 * 1024 * 1024, validation_alias="MAX_REQUEST_BYTES")

    # ---------------------------------------------------------------------------
    # Deployment config (optional)
    # ---------------------------------------------------------------------------
    app_env: str = Field(default="local", validation_alias="APP_ENV")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")
    # Comma-separated, not JSON.
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        validation_alias="CORS_ALLOW_ORIGINS",
    )
    rate_limit: int = Field(default=0, validation_alias="RATE_LIMIT")  # requests/min, 0 = disabled
    # Only enable behind a proxy that overwrites X-Forwarded-For.
    trust_proxy_headers: bool = Field(default=False, validation_alias="TRUST_PROXY_HEADERS")

    @field_validator(
        "supabase_url",
        "supabase_publishable_key",
        "supabase_secret_key",
        "supabase_jwt_secret",
        "supabase_jwt_audience",
        "supabase_auth_mode",
        "supabase_bucket",
        "groq_api_key",
        "openrouter_api_key",
        "app_env",
        mode="before",
    )
    @classmethod
    def _strip_strings(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("storage_public_base_url", mode="before")
    @classmethod
    def _strip_base_url(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("public_app_url", "oauth_userinfo_url", mode="before")
    @classmethod
    def _optional_url(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().rstrip("/") or None
        return value

    @field_validator("transcription_prompt", "transcription_language", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _parse_list(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            items = [item.strip() for item in value.split(",")]
            return [item for item in items if item]
        return value

    @field_validator("upload_timeout_seconds")
    @classmethod
    def _clamp_upload_timeout(cls, value: float) -> float:
        return max(1.0, value)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
