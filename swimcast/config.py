"""Backend configuration."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API settings
    api_title: str = "Swimcast API"
    api_version: str = "1.0.0"
    cors_origins: list = ["http://localhost:5173", "http://localhost:3000"]
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Upstream providers
    openweather_api_key: str = ""
    openweather_onecall_url: str = "https://api.openweathermap.org/data/3.0/onecall"
    openweather_current_url: str = "https://api.openweathermap.org/data/2.5/weather"
    marine_api_url: str = "https://marine-api.open-meteo.com/v1/marine"
    weather_timeout_seconds: float = 10.0
    marine_timeout_seconds: float = 10.0

    # Caching (sea conditions change slower than the atmosphere)
    weather_cache_ttl_seconds: int = 600
    marine_cache_ttl_seconds: int = 1800
    cache_max_entries: int = 256
    coordinate_precision: int = 2

    # Default request values
    default_experience: str = "intermediate"
    default_min_score: int = 55
    default_min_duration_minutes: int = 60
    default_max_windows: int = 3
    marine_forecast_hours: int = 12

    # Civil twilight
    daylight_depression_angle: float = 6.0

    class Config:
        env_prefix = "SWIMCAST_"


settings = Settings()
