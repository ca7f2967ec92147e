from __future__ import annotations
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings, read from environment variables or a local .env file.
    """
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./hierarchy.db"
    BACKEND_CORS_ORIGINS: Annotated[list[str], NoDecode] = []
    LOG_LEVEL: str = "INFO"

    # hard ceiling for hierarchy walks, the effective budget is min(employee count, this)
    HIERARCHY_MAX_DEPTH: int = Field(500, ge=1)
    LONGEST_SERVING_LIMIT: int = Field(10, ge=1)

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
