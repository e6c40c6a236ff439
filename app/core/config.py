"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the OAuth flow and the
maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Optional

import os

from pydantic import AliasChoices, AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


def _split_csv(value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    if isinstance(value, tuple):
        return value
    if isinstance(value, list):
        return tuple(value)
    return tuple(item.strip() for item in value.split(",") if item.strip())


class GoogleSettings(BaseSettings):
    """Configuration required for interacting with Google APIs."""

    model_config = SettingsConfigDict(populate_by_name=True)

    client_id: str = Field(..., validation_alias="GOOGLE_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="GOOGLE_CLIENT_SECRET")
    redirect_uri: AnyHttpUrl = Field(..., validation_alias="GOOGLE_REDIRECT_URI")
    refresh_token: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("GOOGLE_REFRESH_TOKEN", "REFRESH_TOKEN"),
        description="Long-lived refresh token used to mint access tokens at startup.",
    )


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    scopes: Annotated[tuple[str, ...], NoDecode] = Field(
        (
            "https://www.googleapis.com/auth/youtube.force-ssl",
            "https://www.googleapis.com/auth/youtube",
        ),
        validation_alias="OAUTH_SCOPES",
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma-separated string."""
        return _split_csv(value)


class DatabaseSettings(BaseSettings):
    """Document store configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    mongo_uri: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("MONGO_URI", "DATABASE_URL"),
        description="MongoDB connection string. Falls back to SQLite when unset.",
    )
    mongo_database: str = Field("youtube_studio", validation_alias="MONGO_DATABASE")
    local_db_path: str = Field(
        "data/youtube_studio.db",
        validation_alias="LOCAL_DB_PATH",
        description="SQLite file used as the document store in local setups.",
    )


class SecuritySettings(BaseSettings):
    """Security-related configuration."""

    model_config = SettingsConfigDict(populate_by_name=True)

    token_encryption_secret: Optional[str] = Field(
        None,
        validation_alias="TOKEN_ENCRYPTION_SECRET",
        description=(
            "Secret used to derive the symmetric key for encrypting stored tokens."
        ),
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    port: int = Field(5000, validation_alias="PORT")
    dashboard_url: str = Field(
        "http://localhost:3000/dashboard",
        validation_alias="DASHBOARD_URL",
        description="Where the browser lands after a successful OAuth callback.",
    )
    cors_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        ("http://localhost:3000",),
        validation_alias="CORS_ORIGINS",
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        return _split_csv(value)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "GoogleSettings",
    "OAuthSettings",
    "SecuritySettings",
    "get_settings",
]
