from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Google Maps API configuration
    google_maps_api_key: str = ""
    places_search_url: str = "https://places.googleapis.com/v1/places:searchNearby"
    place_details_url: str = "https://places.googleapis.com/v1/places"
    provider_timeout_s: float = Field(default=10.0, gt=0)

    # API configuration
    api_version: str = "1.0"

    # API call limits
    max_api_calls_per_day: int = Field(default=1000, ge=0)

    # Geo query cache
    cache_ttl_s: float = Field(default=300.0, gt=0)
    min_query_interval_s: float = Field(default=60.0, ge=0)
    min_movement_threshold_m: float = Field(default=500.0, ge=0)
    wide_search_radius_m: float = Field(default=1000.0, gt=0)
    cache_max_entries: int = Field(default=64, ge=1)
    cache_key_precision: int = Field(default=3, ge=0)
    provider_init_timeout_s: float = Field(default=10.0, gt=0)

    # Logging
    log_level: int = 20
    log_directory: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
