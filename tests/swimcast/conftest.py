"""Shared fixtures for swimcast tests."""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pandas as pd
import pytest

from swimcast.data.marine_client import MarineConditions, MarineData
from swimcast.data.weather_client import CurrentWeather, WeatherData
from swimcast.models.reading import SOURCE_UNAVAILABLE, HourlyReading

START = datetime(2024, 6, 21, 8, 0, tzinfo=timezone.utc)


def make_hours(rows: List[dict], start: datetime = START) -> List[HourlyReading]:
    """Build consecutive forecast hours from per-hour field dicts."""
    return [
        HourlyReading(time=start + timedelta(hours=i), **row)
        for i, row in enumerate(rows)
    ]


class FakeWeatherClient:
    """Weather client returning a fixed result."""

    def __init__(self, data: WeatherData):
        self.data = data
        self.calls = 0

    async def get_weather(self, latitude: float, longitude: float) -> WeatherData:
        self.calls += 1
        return self.data

    async def aclose(self) -> None:
        pass


class FakeMarineClient:
    """Marine client returning a fixed result."""

    def __init__(self, data: MarineData):
        self.data = data
        self.calls = 0

    async def get_marine_data(self, latitude: float, longitude: float) -> MarineData:
        self.calls += 1
        return self.data

    async def aclose(self) -> None:
        pass


def make_marine_hourly(
    start: datetime = START,
    sea_temps: Optional[List[float]] = None,
    wave_heights: Optional[List[float]] = None,
) -> pd.DataFrame:
    """Marine hourly frame with one row per hour from ``start``."""
    sea_temps = sea_temps or []
    wave_heights = wave_heights or [None] * len(sea_temps)
    return pd.DataFrame({
        "time": pd.to_datetime(
            [start + timedelta(hours=i) for i in range(len(sea_temps))], utc=True
        ),
        "sea_temp": pd.Series(sea_temps, dtype="float64"),
        "wave_height": pd.Series(wave_heights, dtype="float64"),
        "swell_height": pd.Series([None] * len(sea_temps), dtype="float64"),
    })


@pytest.fixture
def good_weather() -> WeatherData:
    """Warm, calm weather with a six hour forecast."""
    return WeatherData(
        current=CurrentWeather(
            temp=20.0,
            feels_like=19.0,
            humidity=60,
            wind_speed=8.0,
            wind_deg=180,
            precip_probability=0.0,
            description="clear sky",
        ),
        hourly=make_hours([
            {"air_temp": 20.0, "wind_speed": 8.0, "precip_probability": 0.0}
            for _ in range(6)
        ]),
    )


@pytest.fixture
def good_marine() -> MarineData:
    """Observed warm, calm sea with a matching hourly forecast."""
    return MarineData(
        current=MarineConditions(sea_temp=19.0, wave_height=0.2, swell_height=0.1),
        hourly=make_marine_hourly(
            sea_temps=[19.0, 19.0, 19.1, 19.1, 19.2, 19.2],
            wave_heights=[0.2, 0.2, 0.3, 0.3, 0.2, 0.2],
        ),
    )


@pytest.fixture
def marine_unavailable() -> MarineData:
    """Marine provider failure."""
    return MarineData(source=SOURCE_UNAVAILABLE, error="timed out")
