"""Client for sea temperature and wave data from the Open-Meteo Marine API."""
import logging
from typing import List, Optional, Tuple

import httpx
import pandas as pd
from attrs import field, frozen
from cachetools import TTLCache

from swimcast.config import settings
from swimcast.data.payload import PROVIDER_ERRORS, as_dict, as_float, as_list
from swimcast.models.reading import SOURCE_MARINE, SOURCE_UNAVAILABLE

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = ["sea_surface_temperature", "wave_height", "swell_wave_height"]
HOURLY_COLUMNS = ["time", "sea_temp", "wave_height", "swell_height"]

# MarineConditions field -> provider variable
CURRENT_FIELDS = {
    "sea_temp": "sea_surface_temperature",
    "wave_height": "wave_height",
    "wave_direction": "wave_direction",
    "wave_period": "wave_period",
    "swell_height": "swell_wave_height",
    "swell_period": "swell_wave_period",
}
CURRENT_VARIABLES = list(CURRENT_FIELDS.values())
FORECAST_DAYS = 2


@frozen
class MarineConditions:
    """Current sea conditions; every field may be missing."""

    sea_temp: Optional[float] = None
    wave_height: Optional[float] = None
    wave_direction: Optional[float] = None
    wave_period: Optional[float] = None
    swell_height: Optional[float] = None
    swell_period: Optional[float] = None


def _empty_hourly() -> pd.DataFrame:
    return pd.DataFrame(columns=HOURLY_COLUMNS)


def _hourly_values(hourly: dict, variable: str, length: int) -> List[Optional[float]]:
    """One hourly series, validated against the length of the time axis."""
    values = as_list(hourly.get(variable), variable)
    if not values:
        return [None] * length
    if len(values) != length:
        raise ValueError(f"{variable} has {len(values)} values for {length} hours")
    return [as_float(value, variable) for value in values]


@frozen
class MarineData:
    """Marine provider result; ``hourly`` has one row per UTC hour."""

    current: MarineConditions = field(factory=MarineConditions)
    hourly: pd.DataFrame = field(factory=_empty_hourly, eq=False)
    source: str = SOURCE_MARINE
    error: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.source != SOURCE_UNAVAILABLE


class MarineClient:
    """Client for the Open-Meteo Marine API with a 30-minute coordinate cache."""

    def __init__(
        self,
        http_client: httpx.AsyncClient = None,
        cache: TTLCache = None,
    ):
        """Initialize client with an HTTP session and a coordinate cache."""
        self.http_client = http_client or httpx.AsyncClient()
        self.cache = cache if cache is not None else TTLCache(
            maxsize=settings.cache_max_entries,
            ttl=settings.marine_cache_ttl_seconds,
        )

    @staticmethod
    def cache_key(latitude: float, longitude: float) -> Tuple[float, float]:
        """Cache key with coordinates rounded to the configured precision."""
        precision = settings.coordinate_precision
        return (round(latitude, precision), round(longitude, precision))

    async def get_marine_data(self, latitude: float, longitude: float) -> MarineData:
        """
        Fetch current and hourly marine conditions.

        Failures never raise: they return null conditions tagged
        ``unavailable`` so callers can fall back to estimates.
        """
        key = self.cache_key(latitude, longitude)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Marine cache hit for %s", key)
            return cached

        try:
            response = await self.http_client.get(
                settings.marine_api_url,
                params={
                    "latitude": latitude,
                    "longitude": longitude,
                    "current": ",".join(CURRENT_VARIABLES),
                    "hourly": ",".join(HOURLY_VARIABLES),
                    "timezone": "GMT",
                    "forecast_days": FORECAST_DAYS,
                },
                timeout=settings.marine_timeout_seconds,
            )
            response.raise_for_status()
            data = self._parse(response.json())
        except PROVIDER_ERRORS as e:
            logger.warning("Failed to fetch marine data for %s: %s", key, e)
            return MarineData(source=SOURCE_UNAVAILABLE, error=str(e))

        self.cache[key] = data
        return data

    @staticmethod
    def _parse(payload: dict) -> MarineData:
        payload = as_dict(payload, "response")
        current = as_dict(payload.get("current"), "current")
        hourly = as_dict(payload.get("hourly"), "hourly")

        times = as_list(hourly.get("time"), "hourly.time")
        if times:
            frame = pd.DataFrame({
                "time": pd.to_datetime(times, utc=True),
                "sea_temp": _hourly_values(hourly, "sea_surface_temperature", len(times)),
                "wave_height": _hourly_values(hourly, "wave_height", len(times)),
                "swell_height": _hourly_values(hourly, "swell_wave_height", len(times)),
            })
            frame[HOURLY_COLUMNS[1:]] = frame[HOURLY_COLUMNS[1:]].astype("float64")
        else:
            frame = _empty_hourly()

        return MarineData(
            current=MarineConditions(**{
                name: as_float(current.get(variable), variable)
                for name, variable in CURRENT_FIELDS.items()
            }),
            hourly=frame,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
