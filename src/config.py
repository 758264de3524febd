"""Configuration management for the application."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    db_driver: str = Field(default="postgresql")
    db_host: str = Field(default="localhost")
    db_user: str = Field(default="root")
    db_password: str = Field(default="")
    db_name: str = Field(default="demo")
    database_url: str | None = Field(default=None)
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_echo: bool = Field(default=False)

    # Passwords
    min_password_length: int = Field(default=6)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Session cookie
    session_cookie_name: str = Field(default="session_id")
    session_cookie_path: str = Field(default="/")
    session_cookie_domain: str | None = Field(default=None)
    session_cookie_secure: bool = Field(default=False)
    session_cookie_httponly: bool = Field(default=True)
    session_cookie_samesite: Literal["lax", "strict", "none"] = Field(default="lax")
    session_lifetime_minutes: int = Field(default=1440, gt=0)  # 24 hours

    # API
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    @model_validator(mode="after")
    def build_database_url(self) -> "Settings":
        """Derive the connection URL from the individual parameters unless given."""
        if not self.database_url:
            self.database_url = URL.create(
                self.db_driver,
                username=self.db_user,
                password=self.db_password or None,
                host=self.db_host,
                database=self.db_name,
            ).render_as_string(hide_password=False)
        return self

    @model_validator(mode="after")
    def validate_cookie_settings(self) -> "Settings":
        """Browsers drop SameSite=None cookies that are not Secure."""
        if self.session_cookie_samesite == "none" and not self.session_cookie_secure:
            raise ValueError("SESSION_COOKIE_SAMESITE=none requires SESSION_COOKIE_SECURE")
        return self

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.is_production:
            if not self.session_cookie_secure:
                raise ValueError("SESSION_COOKIE_SECURE must be enabled in production")
            if "localhost" in (self.database_url or self.db_host):
                raise ValueError("Database host should not be localhost in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def session_lifetime_seconds(self) -> int:
        return self.session_lifetime_minutes * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
