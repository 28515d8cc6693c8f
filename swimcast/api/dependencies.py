"""FastAPI dependencies for dependency injection."""
from functools import lru_cache

from swimcast.data.marine_client import MarineClient
from swimcast.data.weather_client import WeatherClient
from swimcast.services.reading_assembler import ReadingAssembler
from swimcast.services.swimming_service import SwimmingService


@lru_cache()
def get_weather_client() -> WeatherClient:
    """Get cached weather client (holds the 10-minute cache)."""
    return WeatherClient()


@lru_cache()
def get_marine_client() -> MarineClient:
    """Get cached marine client (holds the 30-minute cache)."""
    return MarineClient()


@lru_cache()
def get_swimming_service() -> SwimmingService:
    """Get cached swimming service instance."""
    return SwimmingService(
        assembler=ReadingAssembler(
            weather_client=get_weather_client(),
            marine_client=get_marine_client(),
        ),
    )
