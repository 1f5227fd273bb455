from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MYSQL_",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = "127.0.0.1"
    port: int = 3306
    user: str = "root"
    password: str = Field(default="", validation_alias=AliasChoices("MYSQL_PASS", "MYSQL_PASSWORD"))
    database: str = Field(default="", validation_alias=AliasChoices("MYSQL_DB", "MYSQL_DATABASE"))

    # pool
    connection_limit: int = Field(default=10, ge=1)
    pool_timeout: float = Field(default=30.0, gt=0)

    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "MYSQL_LOG_LEVEL"))
