from __future__ import annotations

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENDATASOFT_SEARCH_URL = "https://public.opendatasoft.com/api/records/1.0/search/"
GEONAMES_DATASET = "geonames-all-cities-with-a-population-1000"
OPENWEATHER_API_URL = "https://api.openweathermap.org/data/2.5"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO", min_length=1, max_length=16)

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    cities_api_url: AnyHttpUrl = Field(default=OPENDATASOFT_SEARCH_URL)
    cities_dataset: str = Field(default=GEONAMES_DATASET, min_length=1, max_length=128)

    weather_api_url: AnyHttpUrl = Field(default=OPENWEATHER_API_URL)
    weather_api_key: str = Field(default="", max_length=128)

    # None disables the client timeout entirely.
    http_timeout_seconds: float | None = Field(default=None, gt=0, le=120.0)

    page_size: int = Field(default=20, ge=1, le=100)
    suggestion_limit: int = Field(default=5, ge=1, le=20)
    search_debounce_seconds: float = Field(default=0.3, ge=0.0, le=5.0)
    hourly_samples: int = Field(default=8, ge=0, le=40)

    summary_store_path: str = Field(default="weather_summaries.json", min_length=1)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
