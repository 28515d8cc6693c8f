"""Environmental readings and the provenance of their fused values."""
from datetime import datetime
from typing import Optional

from attrs import define, field, frozen
from attrs.converters import default_if_none

# Closed vocabulary of provenance tags
SOURCE_USER = "user-provided"
SOURCE_MARINE = "open-meteo-marine"
SOURCE_SEASONAL = "seasonal-estimate"
SOURCE_WIND = "wind-estimate"
SOURCE_UNAVAILABLE = "unavailable"
SOURCE_WEATHER = "openweather"


@frozen
class Reading:
    """A point-in-time snapshot of swimming conditions.

    Every field may be passed as ``None``; missing values are replaced with
    moderate defaults here so the scoring engine can work on any subset.
    ``wave_height`` stays optional: the engine derives it from ``sea_state``.
    """

    water_temp: float = field(default=14.0, converter=default_if_none(14.0))
    air_temp: float = field(default=15.0, converter=default_if_none(15.0))
    feels_like: float = field(default=15.0, converter=default_if_none(15.0))
    wind_speed: float = field(default=10.0, converter=default_if_none(10.0))  # km/h
    precip_probability: float = field(default=0.0, converter=default_if_none(0.0))
    wave_height: Optional[float] = None  # meters
    sea_state: Optional[str] = None
    has_wetsuit: bool = field(default=False, converter=default_if_none(False))
    humidity: float = field(default=50.0, converter=default_if_none(50.0))


@frozen
class HourlyReading:
    """One forecast hour, before the water temperature is attached."""

    time: datetime
    air_temp: Optional[float] = None
    feels_like: Optional[float] = None
    wind_speed: Optional[float] = None  # km/h
    precip_probability: Optional[float] = None
    humidity: Optional[float] = None
    wave_height: Optional[float] = None
    is_daylight: bool = True

    def to_reading(self, water_temp: Optional[float], has_wetsuit: bool = False) -> Reading:
        """Build a scoreable reading for this hour."""
        return Reading(
            water_temp=water_temp,
            air_temp=self.air_temp,
            feels_like=self.feels_like if self.feels_like is not None else self.air_temp,
            wind_speed=self.wind_speed,
            precip_probability=self.precip_probability,
            wave_height=self.wave_height,
            has_wetsuit=has_wetsuit,
            humidity=self.humidity,
        )


@frozen
class Sourced:
    """A fused value together with the fallback tier that supplied it."""

    value: Optional[float]
    source: str = SOURCE_UNAVAILABLE


@define
class SourceAttribution:
    """Which provider or heuristic supplied each fused field."""

    weather: str = SOURCE_WEATHER
    marine: str = SOURCE_MARINE
    water_temp: str = SOURCE_UNAVAILABLE
    waves: str = SOURCE_UNAVAILABLE

    def to_dict(self) -> dict:
        """Convert to serializable dictionary."""
        return {
            "weather": self.weather,
            "marine": self.marine,
            "water_temp": self.water_temp,
            "waves": self.waves,
        }
