from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "classroom-relay"
    app_env: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Runtime environment: development|production.",
    )
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
        description="Interface the server binds to when started with `python -m relay`.",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="Port the server listens on when started with `python -m relay`.",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
        description="Origins allowed by the CORS middleware.",
    )

    # LLM provider (OpenAI-compatible Chat Completions API)
    # The key is process-wide and never leaves the server.
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="OpenAI API key (required for the completion routes).",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("OPENAI_MODEL", "openai_model"),
        description="Model identifier sent with every completion request.",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL", "openai_base_url"),
        description="Base URL for the OpenAI API (override for proxies/emulators).",
    )
    openai_max_tokens: int = Field(
        default=500,
        ge=1,
        validation_alias=AliasChoices("OPENAI_MAX_TOKENS", "openai_max_tokens"),
        description="Token budget for a single completion.",
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        validation_alias=AliasChoices("OPENAI_TIMEOUT_SECONDS", "openai_timeout_seconds"),
        description="Timeout for OpenAI API requests (seconds).",
    )

    # LMS (Canvas REST API)
    # Credentials are supplied per request by the caller; only the endpoint lives here.
    lms_base_url: str = Field(
        default="https://canvas.instructure.com/api/v1",
        validation_alias=AliasChoices("LMS_BASE_URL", "CANVAS_API_URL", "lms_base_url"),
        description="Base URL of the Canvas REST API.",
    )
    lms_timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        validation_alias=AliasChoices("LMS_TIMEOUT_SECONDS", "lms_timeout_seconds"),
        description="Timeout for LMS API requests (seconds).",
    )
    lms_page_size: int = Field(
        default=100,
        ge=1,
        le=100,
        validation_alias=AliasChoices("LMS_PAGE_SIZE", "lms_page_size"),
        description="`per_page` value sent with list requests.",
    )
    lms_student_role: str = Field(
        default="StudentEnrollment",
        validation_alias=AliasChoices("LMS_STUDENT_ROLE", "lms_student_role"),
        description="Enrollment role kept by the /students route.",
    )

    # Output filtering
    profanity_extra_words: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("PROFANITY_EXTRA_WORDS", "profanity_extra_words"),
        description="Words censored in addition to the default word list.",
    )
    profanity_allowed_words: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("PROFANITY_ALLOWED_WORDS", "profanity_allowed_words"),
        description="Words removed from the default word list.",
    )

    @property
    def is_development(self) -> bool:
        return str(self.app_env).strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
