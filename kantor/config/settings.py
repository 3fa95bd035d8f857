"""
Configuration Management for Kantor

Settings come from environment variables (and .env) via pydantic-settings.

Each external service has its own settings group with its own env prefix.
Groups are only built when first used, so the in-memory backend runs
with no cloud configuration at all.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FirebaseSettings(BaseSettings):
    """Firebase Authentication and Firestore configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        extra="ignore"
    )

    api_key: str = Field(
        ...,
        description="Firebase web API key"
    )
    project_id: str = Field(
        ...,
        description="Firebase project ID"
    )
    auth_base_url: str = Field(
        default="https://identitytoolkit.googleapis.com/v1",
        description="Identity Toolkit REST endpoint"
    )
    firestore_base_url: str = Field(
        default="https://firestore.googleapis.com/v1",
        description="Firestore REST endpoint"
    )
    database_id: str = Field(
        default="(default)",
        description="Firestore database ID"
    )
    request_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=120,
        description="Timeout for a single HTTP request"
    )

    @field_validator("auth_base_url", "firestore_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class GoogleSheetsSettings(BaseSettings):
    """Google Sheets storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Service account key file with access to the spreadsheet"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Spreadsheet holding one worksheet per collection"
    )

    @field_validator('credentials_path')
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Only warn on a missing key file; it may be mounted after start-up."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"Google credentials file not found at {v}. "
                "The sheets backend will fail to connect until it exists."
            )
        return v


class AppSettings(BaseSettings):
    """Which backend and app variant to run, plus environment flags."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Deployment name, for logs only"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose logging"
    )

    # Wiring
    store_backend: Literal["firestore", "sheets", "memory"] = Field(
        default="firestore",
        description="Which document store backend to use"
    )
    app_variant: Literal["exchange", "note"] = Field(
        default="exchange",
        description="Which record controller the UI runs"
    )
    persist_audit_events: bool = Field(
        default=False,
        description="Also append audit events to the user's document store"
    )


class Settings(BaseSettings):
    """Entry point for every settings group."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so the memory backend runs unconfigured

    @property
    def firebase(self) -> FirebaseSettings:
        return FirebaseSettings()

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Process-wide settings instance.

    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Check which settings groups can be built from the current environment.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries carrying the validation message for failed groups.
    """
    results = {}

    settings = get_settings()

    for name in ("firebase", "google_sheets", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
