"""
Configuration settings for the Writerly AI orchestration service.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Writerly AI"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # === Provider routing ===
    LLM_PROVIDER: Optional[str] = None  # Preferred provider, tried after an explicit override
    PROVIDER_ORDER: list[str] = ["openai", "gemini", "anthropic", "ollama"]
    PROVIDER_TIMEOUT: float = 60.0  # seconds

    # === Generation defaults ===
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 512

    # === OpenAI ===
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str = "https://api.openai.com"

    # === Anthropic ===
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-latest"
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com"
    ANTHROPIC_VERSION: str = "2023-06-01"

    # === Gemini ===
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"

    # === Ollama (local, no key) ===
    OLLAMA_ENABLED: bool = True
    OLLAMA_BASE_URL: str = Field(
        default="http://localhost:11434",
        validation_alias=AliasChoices("OLLAMA_BASE_URL", "OLLAMA_URL"),
    )
    OLLAMA_MODEL: str = "llama3.2:3b"

    # === Rate limiting (requests per minute, per user and provider) ===
    OPENAI_RPM: int = Field(default=60, gt=0)
    GEMINI_RPM: int = Field(default=60, gt=0)
    ANTHROPIC_RPM: int = Field(default=60, gt=0)
    DEFAULT_LLM_RPM: int = Field(default=60, gt=0)
    RATE_LIMIT_WINDOW_MS: int = 60_000

    # === Input sanitization ===
    SANITIZE_MAX_LENGTH: int = 10_000

    # === Monitoring ===
    METRICS_MAX_SAMPLES: int = 1000
    PROMETHEUS_ENABLED: bool = True

    # === Grammar checker proxy ===
    GRAMMAR_BASE_URL: str = "http://localhost:8010"
    GRAMMAR_TIMEOUT: float = 8.0  # seconds, hard limit on the single upstream call
    GRAMMAR_DEFAULT_LANGUAGE: str = "en-US"

    def provider_rpm(self) -> dict[str, int]:
        """Per-provider request budgets; providers not listed use DEFAULT_LLM_RPM."""
        return {
            "openai": self.OPENAI_RPM,
            "gemini": self.GEMINI_RPM,
            "anthropic": self.ANTHROPIC_RPM,
        }


# Global settings instance
settings = Settings()
