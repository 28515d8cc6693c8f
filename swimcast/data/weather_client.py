"""Client for atmospheric conditions from OpenWeather."""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import httpx
from attrs import field, frozen
from cachetools import TTLCache

from swimcast.config import settings
from swimcast.data.payload import PROVIDER_ERRORS, as_dict, as_float, as_list, as_text
from swimcast.models.reading import SOURCE_UNAVAILABLE, SOURCE_WEATHER, HourlyReading

logger = logging.getLogger(__name__)

MS_TO_KMH = 3.6


@frozen
class CurrentWeather:
    """Current atmospheric conditions; wind already in km/h."""

    temp: Optional[float] = None
    feels_like: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_deg: Optional[float] = None
    precip_probability: Optional[float] = None
    description: Optional[str] = None


@frozen
class WeatherData:
    """Atmospheric provider result.

    ``hourly`` is None when only current conditions could be fetched; this is
    a normal state, not an error.
    """

    current: CurrentWeather = field(factory=CurrentWeather)
    hourly: Optional[List[HourlyReading]] = None
    source: str = SOURCE_WEATHER

    @property
    def available(self) -> bool:
        return self.source != SOURCE_UNAVAILABLE


def _kmh(speed_ms: Optional[float]) -> Optional[float]:
    return speed_ms * MS_TO_KMH if speed_ms is not None else None


def _description(payload: dict) -> Optional[str]:
    weather = as_list(payload.get("weather"), "weather")
    if not weather:
        return None
    return as_text(as_dict(weather[0], "weather[0]").get("description"), "description")


class WeatherClient:
    """
    Client for current and hourly weather.

    The One Call endpoint is tried first. If it fails, the limited current
    weather endpoint supplies current conditions only. If both fail, an
    empty result tagged ``unavailable`` is returned. Nothing is raised.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient = None,
        api_key: str = None,
        cache: TTLCache = None,
    ):
        """Initialize client with an HTTP session and a coordinate cache."""
        self.http_client = http_client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds
        )
        self.api_key = api_key if api_key is not None else settings.openweather_api_key
        self.cache = cache if cache is not None else TTLCache(
            maxsize=settings.cache_max_entries,
            ttl=settings.weather_cache_ttl_seconds,
        )

    @staticmethod
    def cache_key(latitude: float, longitude: float) -> Tuple[float, float]:
        """Cache key with coordinates rounded to the configured precision."""
        precision = settings.coordinate_precision
        return (round(latitude, precision), round(longitude, precision))

    async def get_weather(self, latitude: float, longitude: float) -> WeatherData:
        """Fetch current conditions and, when possible, the hourly forecast."""
        key = self.cache_key(latitude, longitude)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Weather cache hit for %s", key)
            return cached

        try:
            data = await self._fetch_onecall(latitude, longitude)
        except PROVIDER_ERRORS as e:
            logger.info("One Call request failed (%s), falling back to current weather", e)
        else:
            self.cache[key] = data
            return data

        try:
            return await self._fetch_current(latitude, longitude)
        except PROVIDER_ERRORS as e:
            logger.warning("Weather unavailable for %s: %s", key, e)
            return WeatherData(source=SOURCE_UNAVAILABLE)

    async def _get_json(self, url: str, latitude: float, longitude: float, **params) -> dict:
        response = await self.http_client.get(
            url,
            params={
                "lat": latitude,
                "lon": longitude,
                "appid": self.api_key,
                "units": "metric",
                **params,
            },
        )
        response.raise_for_status()
        return as_dict(response.json(), "response")

    @staticmethod
    def _parse_hour(hour: dict) -> HourlyReading:
        hour = as_dict(hour, "hourly[]")
        pop = as_float(hour.get("pop"), "pop")
        return HourlyReading(
            time=datetime.fromtimestamp(as_float(hour["dt"], "dt"), tz=timezone.utc),
            air_temp=as_float(hour.get("temp"), "temp"),
            feels_like=as_float(hour.get("feels_like"), "feels_like"),
            wind_speed=_kmh(as_float(hour.get("wind_speed"), "wind_speed")),
            precip_probability=pop * 100 if pop is not None else None,
            humidity=as_float(hour.get("humidity"), "humidity"),
        )

    async def _fetch_onecall(self, latitude: float, longitude: float) -> WeatherData:
        payload = await self._get_json(
            settings.openweather_onecall_url, latitude, longitude, exclude="minutely"
        )
        current = as_dict(payload["current"], "current")
        hourly = [self._parse_hour(hour) for hour in as_list(payload.get("hourly"), "hourly")]
        first_pop = hourly[0].precip_probability if hourly else None

        return WeatherData(
            current=CurrentWeather(
                temp=as_float(current["temp"], "temp"),
                feels_like=as_float(current.get("feels_like"), "feels_like"),
                humidity=as_float(current.get("humidity"), "humidity"),
                wind_speed=_kmh(as_float(current.get("wind_speed"), "wind_speed")),
                wind_deg=as_float(current.get("wind_deg"), "wind_deg"),
                precip_probability=first_pop or 0.0,
                description=_description(current),
            ),
            hourly=hourly,
        )

    async def _fetch_current(self, latitude: float, longitude: float) -> WeatherData:
        payload = await self._get_json(settings.openweather_current_url, latitude, longitude)
        main = as_dict(payload["main"], "main")
        wind = as_dict(payload.get("wind"), "wind")

        return WeatherData(
            current=CurrentWeather(
                temp=as_float(main["temp"], "temp"),
                feels_like=as_float(main.get("feels_like"), "feels_like"),
                humidity=as_float(main.get("humidity"), "humidity"),
                wind_speed=_kmh(as_float(wind.get("speed"), "wind.speed")),
                wind_deg=as_float(wind.get("deg"), "wind.deg"),
                precip_probability=0.0,
                description=_description(payload),
            ),
            hourly=None,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
