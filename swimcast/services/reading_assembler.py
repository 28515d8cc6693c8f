"""Service assembling a scoreable reading from several upstream sources."""
import asyncio
import logging
from datetime import datetime
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd
from attrs import evolve, frozen

from swimcast.data.marine_client import MarineClient, MarineData
from swimcast.data.weather_client import WeatherClient, WeatherData
from swimcast.models.reading import (
    SOURCE_MARINE,
    SOURCE_SEASONAL,
    SOURCE_UNAVAILABLE,
    SOURCE_USER,
    SOURCE_WIND,
    HourlyReading,
    Reading,
    Sourced,
    SourceAttribution,
)
from swimcast.services.daylight_service import DaylightService
from swimcast.services.estimates import estimate_wave_from_wind, estimate_water_temp
from swimcast.services.fallback import FallbackChain

logger = logging.getLogger(__name__)

UTC_NS = "datetime64[ns, UTC]"


@frozen
class AssembledConditions:
    """Everything the scoring pipeline needs for one location."""

    reading: Reading
    attribution: SourceAttribution
    # None when the atmospheric provider could not supply a forecast
    hourly: Optional[List[HourlyReading]]
    water_temp_forecast: Union[List[Optional[float]], float]
    weather: WeatherData
    marine: MarineData


def _optional(value) -> Optional[float]:
    """Convert NaN/None cells to None."""
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return None
    return float(value)


class ReadingAssembler:
    """
    Service fusing atmospheric and marine data into a Reading.

    Both providers are queried concurrently; each degrades on its own. Water
    temperature and wave height are resolved independently through ordered
    fallback chains, and the tier that supplied each value is recorded.
    """

    def __init__(
        self,
        weather_client: WeatherClient = None,
        marine_client: MarineClient = None,
        daylight_service: DaylightService = None,
    ):
        """Initialize service with provider clients."""
        self.weather_client = weather_client or WeatherClient()
        self.marine_client = marine_client or MarineClient()
        self.daylight_service = daylight_service or DaylightService()

    async def assemble(
        self,
        latitude: float,
        longitude: float,
        water_temp_override: Optional[float] = None,
        has_wetsuit: bool = False,
        now: Optional[datetime] = None,
    ) -> AssembledConditions:
        """
        Fetch both providers and build the current reading and hourly forecast.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            water_temp_override: Water temperature supplied by the swimmer
            has_wetsuit: Whether the swimmer wears a wetsuit
            now: Clock used for the seasonal water temperature estimate

        Returns:
            AssembledConditions with reading, attribution and hourly forecast
        """
        weather, marine = await asyncio.gather(
            self.weather_client.get_weather(latitude, longitude),
            self.marine_client.get_marine_data(latitude, longitude),
            return_exceptions=True,
        )
        # A provider that raises degrades the same way as one that reported failure
        if isinstance(weather, Exception):
            logger.warning("Weather provider raised for (%s, %s): %r", latitude, longitude, weather)
            weather = WeatherData(source=SOURCE_UNAVAILABLE)
        if isinstance(marine, Exception):
            logger.warning("Marine provider raised for (%s, %s): %r", latitude, longitude, marine)
            marine = MarineData(source=SOURCE_UNAVAILABLE, error=str(marine))

        water_temp = self.resolve_water_temp(
            latitude, longitude, marine, water_temp_override, now
        )
        waves = self.resolve_wave_height(marine, weather.current.wind_speed)
        if waves.value is None:
            logger.info("No wave data for (%s, %s), scoring with defaults", latitude, longitude)

        current = weather.current
        reading = Reading(
            water_temp=water_temp.value,
            air_temp=current.temp,
            feels_like=current.feels_like,
            wind_speed=current.wind_speed,
            precip_probability=current.precip_probability,
            wave_height=waves.value,
            has_wetsuit=has_wetsuit,
            humidity=current.humidity,
        )

        attribution = SourceAttribution(
            weather=weather.source,
            marine=marine.source,
            water_temp=water_temp.source,
            waves=waves.source,
        )

        hourly = None
        water_temp_forecast: Union[List[Optional[float]], float] = water_temp.value
        if weather.hourly is not None:
            hourly, sea_temps = self.align_hourly(weather.hourly, marine.hourly, waves.value)
            hourly = self.daylight_service.flag_hours(latitude, longitude, hourly)
            if water_temp.source != SOURCE_USER and any(t is not None for t in sea_temps):
                water_temp_forecast = sea_temps

        return AssembledConditions(
            reading=reading,
            attribution=attribution,
            hourly=hourly,
            water_temp_forecast=water_temp_forecast,
            weather=weather,
            marine=marine,
        )

    @staticmethod
    def resolve_water_temp(
        latitude: float,
        longitude: float,
        marine: MarineData,
        override: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> Sourced:
        """Override, then marine observation, then seasonal estimate."""
        return (
            FallbackChain()
            .then(SOURCE_USER, lambda: override)
            .then(SOURCE_MARINE, lambda: marine.current.sea_temp)
            .then(SOURCE_SEASONAL, lambda: estimate_water_temp(latitude, longitude, now))
            .resolve()
        )

    @staticmethod
    def resolve_wave_height(marine: MarineData, wind_speed: Optional[float]) -> Sourced:
        """Marine wave height, then swell height, then a wind-based estimate."""
        return (
            FallbackChain()
            .then(SOURCE_MARINE, lambda: marine.current.wave_height)
            .then(SOURCE_MARINE, lambda: marine.current.swell_height)
            .then(SOURCE_WIND, lambda: estimate_wave_from_wind(wind_speed))
            .resolve()
        )

    @staticmethod
    def align_hourly(
        hours: List[HourlyReading],
        marine_hourly: pd.DataFrame,
        fallback_wave_height: Optional[float] = None,
    ) -> Tuple[List[HourlyReading], List[Optional[float]]]:
        """
        Attach marine hourly values to forecast hours by timestamp.

        Returns the forecast hours with per-hour wave heights and the matching
        sea temperature series (None where the marine forecast has no row).
        """
        if not hours:
            return [], []

        frame = pd.DataFrame({"time": pd.to_datetime([h.time for h in hours], utc=True)})
        if marine_hourly.empty:
            merged = frame.assign(sea_temp=np.nan, wave_height=np.nan, swell_height=np.nan)
        else:
            marine_hourly = marine_hourly.drop_duplicates("time").astype({"time": UTC_NS})
            merged = frame.astype({"time": UTC_NS}).merge(marine_hourly, on="time", how="left")

        aligned = []
        sea_temps = []
        for hour, row in zip(hours, merged.itertuples(index=False)):
            wave = _optional(row.wave_height)
            if wave is None:
                wave = _optional(row.swell_height)
            if wave is None:
                wave = fallback_wave_height
            aligned.append(evolve(hour, wave_height=wave))
            sea_temps.append(_optional(row.sea_temp))

        return aligned, sea_temps
