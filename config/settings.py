from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from models.schema import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Credentials
    CHECKHIM_API_KEY: str = Field(default="")

    # Endpoint
    CHECKHIM_BASE_URL: str = Field(default=DEFAULT_BASE_URL)
    CHECKHIM_TIMEOUT_SECONDS: float = Field(default=DEFAULT_TIMEOUT_SECONDS)

    # Ops
    LOG_LEVEL: str = Field(default="INFO")


settings = Settings()
