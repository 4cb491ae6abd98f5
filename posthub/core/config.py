from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Notes:
      - CORS_ORIGINS accepts a comma-separated list ("a,b,c") or "*".
      - Only APP_ENV=development discloses raw error messages and stack traces.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---- Runtime ----
    APP_ENV: Literal["development", "staging", "production"] = Field(default="production")
    LOG_LEVEL: str = Field(default="INFO")
    TRACE_ID_HEADER: str = Field(default="X-Request-ID")

    # ---- Storage ----
    STORAGE: Literal["memory", "sqlite"] = Field(default="memory")
    SQLITE_PATH: str = Field(default="./posthub.sqlite3")

    # ---- Security ----
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    TOKEN_TTL_MINUTES: int = Field(default=60, description="Access token lifetime")
    PASSWORD_HASH_ITERATIONS: int = Field(default=390_000, description="PBKDF2 iterations")

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @field_validator("APP_ENV", mode="before")
    @classmethod
    def _env_lower(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, v):
        if v is None or v == "":
            return ["*"]
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s == "*":
                return ["*"]
            return [o.strip() for o in s.split(",") if o.strip()]
        return ["*"]

    @field_validator("TOKEN_TTL_MINUTES", "PASSWORD_HASH_ITERATIONS")
    @classmethod
    def _ints_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be > 0")
        return int(v)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
