import json
from functools import lru_cache
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CORS = ["http://localhost:3000", "http://localhost:9002"]

# Coins granted per package id. Purchasing UIs read it through /v1/coins/packages.
DEFAULT_COIN_PACKAGES = {
    "basic": 40,
    "standard": 80,
    "premium": 120,
    "pro": 300,
}


def _parse_cors_origins(v: Any) -> List[str]:
    try:
        if v is None or v == "":
            return _DEFAULT_CORS.copy()
        if isinstance(v, list):
            return [x for x in v if isinstance(x, str) and x.strip()]
        s = str(v).strip()
        if not s:
            return _DEFAULT_CORS.copy()
        if s.startswith("["):
            out = json.loads(s)
            return [x for x in out if isinstance(x, str) and x.strip()] or _DEFAULT_CORS.copy()
        return [x.strip() for x in s.split(",") if x.strip()] or _DEFAULT_CORS.copy()
    except (ValueError, TypeError):
        return _DEFAULT_CORS.copy()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    env: str = Field(default="development", description="ENV")
    debug: bool = Field(default=False, description="DEBUG")

    # MongoDB
    mongodb_uri: str = Field(default="mongodb://localhost:27017", alias="MONGODB_URI")
    mongodb_db_name: str = Field(default="vortex", alias="MONGODB_DB_NAME")

    # WhatsApp webhook (?secret=... on the callback URL)
    whatsapp_webhook_secret: str | None = Field(default=None, alias="WHATSAPP_WEBHOOK_SECRET")

    # Sentry
    sentry_dsn: str | None = Field(default=None, alias="SENTRY_DSN")

    # CORS: env as string, exposed as list
    cors_origins_raw: str = Field(
        default="http://localhost:3000,http://localhost:9002",
        alias="CORS_ORIGINS",
        description="Comma-separated or JSON list",
    )

    # Coin catalog: JSON object {"package_id": coins}
    coin_packages: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_COIN_PACKAGES),
        alias="COIN_PACKAGES",
    )

    @field_validator("coin_packages")
    @classmethod
    def _positive_coins(cls, v: dict[str, int]) -> dict[str, int]:
        bad = [k for k, coins in v.items() if coins <= 0]
        if bad:
            raise ValueError(f"Coin packages must grant a positive amount: {', '.join(bad)}")
        return v

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors_origins(getattr(self, "cors_origins_raw", None))

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")


@lru_cache
def get_settings() -> Settings:
    return Settings()
