"""Application configuration via environment variables."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Credentials the relay cannot work without, by environment variable name
REQUIRED_VARIABLES = ("EMAIL_USER", "EMAIL_PASS")


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file.

    Frozen once built: the same instance is handed to the mail dispatcher
    and the routes for the lifetime of the process.
    """
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", frozen=True, extra="ignore"
    )

    # Application
    app_name: str = "Edge Cases RSVP"
    environment: str = "production"  # "development" echoes error details
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all
    static_dir: str = "public"
    log_dir: Path = Field(default_factory=lambda: Path.home() / ".logs" / "rsvp")

    # Mail relay
    email_user: str = ""
    email_pass: str = ""
    smtp_host: str = "smtp.protonmail.ch"
    smtp_port: int = 587
    smtp_ssl: bool = False  # Implicit TLS instead of STARTTLS
    smtp_verify_tls: bool = True
    smtp_timeout: float = 30.0
    verify_on_startup: bool = True

    # Notifications
    admin_email: str = "edgecases@promontoryai.com"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def missing_variables(self) -> list[str]:
        """Names of required variables that are unset or empty."""
        return [name for name in REQUIRED_VARIABLES if not getattr(self, name.lower())]

    def configured_variables(self) -> list[str]:
        """Names of required variables that carry a value."""
        return [name for name in REQUIRED_VARIABLES if getattr(self, name.lower())]


@lru_cache
def get_settings() -> Settings:
    """Dependency returning the process-wide settings."""
    return Settings()
