"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_SECRET = "dev-secret-change-in-production"


class Settings(BaseSettings):
    # Relational store (full URL wins over the postgres_* parts)
    database_url: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "placement_user"
    postgres_password: str = "password"
    postgres_db: str = "placement_db"

    # MongoDB (shared session store)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_sessions"

    # Sessions
    session_backend: Literal["memory", "mongo"] = "memory"
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_name: str = "placement_session"
    session_max_age_seconds: int = 24 * 60 * 60
    jwt_algorithm: str = "HS256"

    # App
    environment: Literal["development", "production"] = "development"
    cors_origins: List[str] = ["http://localhost:5173"]
    debug: bool = False
    log_level: str = "INFO"
    seed_demo_data: bool = True

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        url = self.database_url or self.postgres_url
        # Heroku/Render style URLs
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def check_session_secret(self) -> "Settings":
        if self.is_production and self.session_secret == DEFAULT_SESSION_SECRET:
            raise ValueError("SESSION_SECRET must be set in production")
        return self

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
