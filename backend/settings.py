from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field("sqlite+aiosqlite:///./daily_pivot.db", alias="DATABASE_URL")

    session_ttl_hours: int = Field(168, alias="SESSION_TTL_HOURS")
    password_min_length: int = Field(6, alias="PASSWORD_MIN_LENGTH")
    require_email_confirmation: bool = Field(True, alias="REQUIRE_EMAIL_CONFIRMATION")

    allowed_emails_raw: str = Field("", alias="ALLOWED_EMAILS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_emails(self) -> List[str]:
        return [email.strip().lower() for email in self.allowed_emails_raw.split(",") if email.strip()]

    def email_allowed(self, email: str) -> bool:
        allowed = self.allowed_emails
        return not allowed or email.strip().lower() in allowed


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
