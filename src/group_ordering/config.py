"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STAFF_ROLES = frozenset({"admin", "waiter", "owner", "chef"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    staff_tokens: str | None = None
    otp_ttl_hours: int = 24
    total_update_attempts: int = 5
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_staff_tokens(raw: str | None) -> dict[str, str]:
    """Parse ``token:role`` pairs separated by commas into a lookup."""
    if raw is None:
        return {}
    tokens: dict[str, str] = {}
    for chunk in raw.split(","):
        token, sep, role = chunk.strip().partition(":")
        token = token.strip()
        role = role.strip().lower()
        if not sep or not token:
            continue
        if role in STAFF_ROLES:
            tokens[token] = role
    return tokens
