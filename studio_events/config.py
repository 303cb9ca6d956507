import os
from functools import lru_cache
from typing import Literal
from urllib.parse import quote

from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

DEFAULT_CONF_FILE = "./config.dev.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    # Fallback values for every setting below, read after env vars
    CONF_FILE: str = DEFAULT_CONF_FILE
    # Search index name; nothing queries it yet
    REDIS_INDEX: str = "ibm:search:index:ibm:wstudio"
    REDIS_EVENTS_PREFIX: str = "ibm"
    RESOURCE_PREFIX: str = "watson-studio"
    REDIS_HOST: str | None = None
    REDIS_PORT: int = 6379
    REDIS_DB_NUMBER: int = 0
    REDIS_PASSWORD: str | None = None
    PORT: int = 8086
    LOG_JSON: bool = True
    # Backend adapter selection: "memory" or "redis"
    STORE_ADAPTER: Literal["memory", "redis"] = "redis"
    # Answer store failures with 500 instead of a 200 null body
    STRICT_ERRORS: bool = False
    CORS_ORIGINS: str = "*"  # Comma-separated list of origins

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        conf_file = (
            init_settings.init_kwargs.get("CONF_FILE")
            or os.environ.get("CONF_FILE")
            or DEFAULT_CONF_FILE
        )
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=conf_file),
            file_secret_settings,
        )

    @property
    def redis_url(self) -> str | None:
        """Store URL, or None when no Redis host is configured."""
        if not self.REDIS_HOST:
            return None
        auth = ""
        if self.REDIS_PASSWORD:
            auth = f"default:{quote(self.REDIS_PASSWORD, safe='')}@"
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB_NUMBER}"

    @property
    def masked_redis_url(self) -> str | None:
        if not self.REDIS_HOST:
            return None
        auth = "default:***@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB_NUMBER}"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
