"""Service for flagging forecast hours that fall in daylight."""
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from astral import Observer
from astral.sun import sun
from attrs import evolve

from swimcast.config import settings
from swimcast.models.reading import HourlyReading


class DaylightService:
    """
    Service for calculating dawn/dusk and flagging hours by daylight.

    Uses the astral library to compute solar position. Forecast hours are in
    UTC, so dawn and dusk are also computed in UTC.
    """

    def __init__(self, depression_angle: float = None):
        """
        Initialize the daylight service.

        Args:
            depression_angle: Sun depression angle for twilight definition.
                             0 = geometric sunrise/sunset
                             6 = civil twilight (enough light to swim safely)
        """
        self.depression_angle = (
            settings.daylight_depression_angle
            if depression_angle is None else depression_angle
        )
        # (lat, lon, date) -> (dawn_utc, dusk_utc)
        self._cache: Dict[Tuple[float, float, date], Tuple[Optional[datetime], Optional[datetime]]] = {}

    def get_dawn_dusk_utc(
        self,
        latitude: float,
        longitude: float,
        day: date,
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        """
        Dawn and dusk in UTC for a location and date.

        Returns (None, None) during polar night and the full day span during
        polar day.
        """
        cache_key = (round(latitude, 2), round(longitude, 2), day)
        if cache_key in self._cache:
            return self._cache[cache_key]

        observer = Observer(latitude=latitude, longitude=longitude)
        try:
            sun_times = sun(
                observer,
                date=day,
                tzinfo=timezone.utc,
                dawn_dusk_depression=self.depression_angle,
            )
            if self.depression_angle > 0:
                result = (sun_times["dawn"], sun_times["dusk"])
            else:
                result = (sun_times["sunrise"], sun_times["sunset"])
        except ValueError:
            # Polar day or polar night
            day_of_year = day.timetuple().tm_yday
            is_northern_summer = 80 < day_of_year < 265
            is_polar_day = (
                (latitude > 60 and is_northern_summer)
                or (latitude < -60 and not is_northern_summer)
            )
            if is_polar_day:
                result = (
                    datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc),
                    datetime.combine(
                        day, datetime.max.time().replace(microsecond=0), tzinfo=timezone.utc
                    ),
                )
            else:
                result = (None, None)

        self._cache[cache_key] = result
        return result

    def is_daylight(self, latitude: float, longitude: float, timestamp_utc: datetime) -> bool:
        """Check if a UTC timestamp falls between dawn and dusk at the location."""
        if timestamp_utc.tzinfo is None:
            timestamp_utc = timestamp_utc.replace(tzinfo=timezone.utc)
        timestamp_utc = timestamp_utc.astimezone(timezone.utc)

        dawn, dusk = self.get_dawn_dusk_utc(latitude, longitude, timestamp_utc.date())
        if dawn is None or dusk is None:
            return False

        if dawn <= dusk:
            return dawn <= timestamp_utc <= dusk
        # Daylight spans UTC midnight
        return timestamp_utc >= dawn or timestamp_utc <= dusk

    def flag_hours(
        self,
        latitude: float,
        longitude: float,
        hours: Sequence[HourlyReading],
    ) -> List[HourlyReading]:
        """Return copies of the hours with ``is_daylight`` set."""
        return [
            evolve(hour, is_daylight=self.is_daylight(latitude, longitude, hour.time))
            for hour in hours
        ]
