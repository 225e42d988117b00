"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./charter_notifications.db",
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    app_timezone: str = Field(
        default="UTC",
        description="Timezone used to localize timestamps stored in the database",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    push_gateway_timeout_seconds: float = Field(
        default=10.0,
        description="Upper bound in seconds for a single push gateway call",
        gt=0,
    )
    firebase_project_id: str | None = Field(
        default=None, description="Firebase project that owns the messaging sender"
    )
    firebase_client_email: str | None = Field(
        default=None, description="Service account email used to sign FCM requests"
    )
    firebase_private_key: str | None = Field(
        default=None,
        description="Service account private key; literal ``\\n`` sequences are accepted",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )

    @model_validator(mode="after")
    def _validate_credential_groups(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")

        firebase_values = (
            self.firebase_project_id,
            self.firebase_client_email,
            self.firebase_private_key,
        )
        if any(firebase_values) and not all(firebase_values):
            raise ValueError(
                "FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL and FIREBASE_PRIVATE_KEY "
                "must all be provided to enable push notifications"
            )
        return self

    @property
    def push_enabled(self) -> bool:
        return bool(self.firebase_project_id)

    @property
    def email_enabled(self) -> bool:
        return bool(self.sendgrid_api_key and self.sendgrid_sender)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
