import ssl
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_env: str = Field(default="development", alias="APP_ENV")

    database_url: str = Field(
        default="sqlite:///./tripmates.db", alias="DATABASE_URL"
    )

    identity_issuer: str | None = Field(default=None, alias="IDENTITY_ISSUER")
    identity_audience: str | None = Field(default=None, alias="IDENTITY_AUDIENCE")
    identity_jwks_url: str | None = Field(default=None, alias="IDENTITY_JWKS_URL")
    identity_shared_secret: str | None = Field(
        default=None, alias="IDENTITY_SHARED_SECRET"
    )
    identity_algorithms: list[str] = Field(
        default_factory=lambda: ["RS256"], alias="IDENTITY_ALGORITHMS"
    )

    invite_base_url: str | None = Field(default=None, alias="INVITE_BASE_URL")
    invite_ttl_days: int = Field(default=7, alias="INVITE_TTL_DAYS", ge=1)

    smtp_host: str | None = Field(default=None, alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_username: str | None = Field(default=None, alias="SMTP_USERNAME")
    smtp_password: str | None = Field(default=None, alias="SMTP_PASSWORD")
    mail_from: str | None = Field(default=None, alias="MAIL_FROM")

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ORIGINS"
    )

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.mail_from)


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore


def get_smtp_ctx() -> ssl.SSLContext:
    return ssl.create_default_context()
