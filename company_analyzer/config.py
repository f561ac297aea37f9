"""Application configuration using pydantic-settings."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Anthropic (page summaries). Either variable works; first non-empty wins.
    anthropic_api_key: Optional[str] = None
    claude_api_key: Optional[str] = None
    claude_model: str = "claude-sonnet-4-20250514"

    # Page fetching: plain HTTP or headless browser render (crawl4ai)
    fetch_mode: Literal["http", "browser"] = "http"

    # Job store backend
    job_store_backend: Literal["memory", "supabase"] = "memory"

    # Supabase (optional - only required for the supabase job store)
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    supabase_table: str = "analysis_results"

    # CORS
    cors_origins: str = "http://localhost:5173"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def summarizer_api_key(self) -> Optional[str]:
        """Credential for the summarization service, if any is configured."""
        return self.anthropic_api_key or self.claude_api_key or None

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings for testing."""
    global _settings
    _settings = None
