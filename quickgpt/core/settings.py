from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="QuickGPT", alias="APP_NAME")
    environment: Literal["local", "dev", "staging", "prod"] = Field(
        default="local", alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")

    imagekit_url_endpoint: str | None = Field(
        default=None, alias="IMAGEKIT_URL_ENDPOINT"
    )
    imagekit_private_key: str | None = Field(
        default=None, alias="IMAGEKIT_PRIVATE_KEY"
    )
    imagekit_upload_url: str = Field(
        default="https://upload.imagekit.io/api/v1/files/upload",
        alias="IMAGEKIT_UPLOAD_URL",
    )
    imagekit_folder: str = Field(default="quickgpt", alias="IMAGEKIT_FOLDER")
    image_http_timeout: float = Field(default=60.0, alias="IMAGE_HTTP_TIMEOUT")

    jwt_secret: str = Field(
        default="quickgpt-local-development-secret-key",
        alias="JWT_SECRET",
    )
    jwt_expires_days: int = Field(default=30, alias="JWT_EXPIRES_DAYS")

    default_credits: int = Field(default=20, alias="DEFAULT_CREDITS")
    text_message_cost: int = Field(default=1, ge=0, alias="TEXT_MESSAGE_COST")
    image_message_cost: int = Field(default=2, ge=0, alias="IMAGE_MESSAGE_COST")

    db_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    db_port: int = Field(default=5432, alias="POSTGRES_PORT")
    db_user: str = Field(default="app", alias="POSTGRES_USER")
    db_password: str = Field(default="app", alias="POSTGRES_PASSWORD")
    db_name: str = Field(default="quickgpt", alias="POSTGRES_DB")

    database_url_override: str | None = Field(default=None, alias="DATABASE_URL")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
