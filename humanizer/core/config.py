from functools import lru_cache
import json
from urllib.parse import urlsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _normalize_async_database_url(url: str) -> str:
    if url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return url
    if url.startswith("postgres://"):
        return f"postgresql+asyncpg://{url[len('postgres://'):]}"
    if url.startswith("postgresql://"):
        return f"postgresql+asyncpg://{url[len('postgresql://'):]}"
    if url.startswith("sqlite://"):
        return f"sqlite+aiosqlite://{url[len('sqlite://'):]}"
    return url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="Humanizer API", alias="APP_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    api_prefix: str = Field(default="/v1", alias="API_PREFIX")

    database_url: str = Field(default="sqlite+aiosqlite:///./humanizer.db", alias="DATABASE_URL")
    redis_url: str = Field(default="", alias="REDIS_URL")

    cache_backend: str = Field(default="memory", alias="CACHE_BACKEND")
    cache_max_entries: int = Field(default=1024, ge=1, alias="CACHE_MAX_ENTRIES")
    cache_ttl_seconds: int = Field(default=600, ge=0, alias="CACHE_TTL_SECONDS")

    generation_model_path: str = Field(default="models/phi-3-mini-humanizer", alias="GENERATION_MODEL_PATH")
    generation_device: str = Field(default="cpu", alias="GENERATION_DEVICE")
    generation_autoload: bool = Field(default=True, alias="GENERATION_AUTOLOAD")

    detector_model_path: str = Field(default="models/heuristic-detector", alias="DETECTOR_MODEL_PATH")
    detector_model_kind: str = Field(default="statistical", alias="DETECTOR_MODEL_KIND")

    random_seed: int | None = Field(default=None, alias="RANDOM_SEED")

    cors_allowed_origins: str = Field(default="http://localhost:3000", alias="CORS_ALLOWED_ORIGINS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    sentry_dsn: str = Field(default="", alias="SENTRY_DSN")

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, value: object) -> object:
        if isinstance(value, str):
            return _normalize_async_database_url(value)
        return value

    @field_validator("cache_backend", mode="before")
    @classmethod
    def normalize_cache_backend(cls, value: object) -> object:
        if not isinstance(value, str):
            return "memory"
        normalized = value.strip().lower()
        if normalized in {"memory", "redis"}:
            return normalized
        return "memory"

    @field_validator("detector_model_kind", mode="before")
    @classmethod
    def normalize_detector_kind(cls, value: object) -> object:
        if not isinstance(value, str):
            return "statistical"
        normalized = value.strip().lower()
        if normalized in {"statistical", "neural", "hybrid"}:
            return normalized
        return "statistical"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @staticmethod
    def _normalize_origin(origin: str) -> str:
        candidate = origin.strip().strip("'\"")
        if not candidate:
            return ""

        if "://" not in candidate:
            candidate = f"https://{candidate}"

        parsed = urlsplit(candidate)
        if not parsed.scheme or not parsed.netloc:
            return ""

        # CORS matching is exact on scheme+host+port; paths must be removed.
        return f"{parsed.scheme}://{parsed.netloc}".rstrip("/")

    @property
    def cors_origins(self) -> list[str]:
        raw = self.cors_allowed_origins.strip()
        if not raw:
            return []

        values: list[str]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
                values = [str(item) for item in parsed] if isinstance(parsed, list) else [raw]
            except json.JSONDecodeError:
                values = [raw]
        else:
            values = raw.split(",")

        normalized = [self._normalize_origin(value) for value in values]
        return [origin for origin in normalized if origin]

    @property
    def use_redis_cache(self) -> bool:
        return self.cache_backend == "redis" and bool(self.redis_url.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
