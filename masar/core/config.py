"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_NAME: str = "Masar"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENV: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./masar.db"
    DATABASE_ECHO: bool = False

    # AI
    OPENAI_API_KEY: str | None = None
    OPENAI_API_BASE_URL: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE: float = 0.4

    # Job market (JSearch on RapidAPI)
    JSEARCH_API_KEY: str | None = None
    JSEARCH_BASE_URL: str = "https://jsearch.p.rapidapi.com"
    JSEARCH_HOST: str = "jsearch.p.rapidapi.com"
    JSEARCH_COUNTRY: str = "eg"
    JSEARCH_NUM_PAGES: int = 1
    JOB_MARKET_SAMPLE_SIZE: int = 5

    # Roadmap generation rate limit (per client address)
    ROADMAP_RATE_LIMIT: int = 5
    ROADMAP_RATE_WINDOW_SECONDS: int = 60

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
