# app/core/config.py
# -----------------------------------------------------------------------------
# Application settings (pydantic-settings v2)
# - reads the .env file and OS environment variables into a Settings object
# - built once at process start and handed to every component explicitly
# -----------------------------------------------------------------------------
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Base
    APP_NAME: str = "Location Recommender"
    ENV: str = "dev"
    APP_PORT: int = 8080

    # Search engine (Elasticsearch / OpenSearch)
    ELASTICSEARCH_URL: str = "http://localhost:9200"
    LOCATIONS_INDEX: str = "locations"
    SEARCH_TIMEOUT_S: float = 10.0

    # Reference store (PostgreSQL)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "analytical_user"
    POSTGRES_PASSWORD: str = "analytical_pass"
    POSTGRES_DB: str = "analytical_db"
    DATABASE_URL: str | None = None  # full override, e.g. sqlite+aiosqlite:///./ref.db

    # Request handling
    REQUEST_DEADLINE_S: float = 15.0

    # Indexing / bootstrap
    BULK_BATCH_SIZE: int = 500
    AUTO_CREATE_INDEX: bool = True
    AUTO_SEED_REFERENCE: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore"  # ignore unrelated keys in .env
    )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


@lru_cache
def get_settings() -> Settings:
    """Settings for the running process; entrypoints call this exactly once."""
    return Settings()
