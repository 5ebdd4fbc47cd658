from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HOST = "https://api.umami.is/v1"
# 2024-01-01T00:00:00Z, first day of tracked history.
HISTORY_START_MS = 1704067200000
METRICS_LIMIT = 100000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env", ".env.local"), env_prefix="UMAMI_", extra="ignore")

    host: str = Field(default=DEFAULT_HOST)
    website_id: str = Field(default="")
    token: str = Field(default="")
    log_level: str = Field(default="INFO")
    timeout: float = Field(default=20)
    post_prefix: str = Field(default="/post/")


@lru_cache
def get_settings() -> Settings:
    return Settings()


class ConnectionConfig(BaseModel):
    """Where and how to reach the Umami API. Frozen once built."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = ""
    site_id: str = ""
    token: str = ""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ConnectionConfig":
        settings = settings or get_settings()
        return cls(endpoint=settings.host.rstrip("/"), site_id=settings.website_id, token=settings.token)

    @property
    def is_complete(self) -> bool:
        return bool(self.endpoint and self.site_id and self.token)

    @property
    def uses_api_key(self) -> bool:
        # Umami Cloud wants its own API key header, self-hosted instances a bearer token.
        return self.endpoint == DEFAULT_HOST
