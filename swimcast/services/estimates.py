"""Heuristic estimates used when no provider supplies a value."""
from datetime import datetime, timezone
from typing import Optional

# Irish Sea surface temperature climatology by month (degrees C)
MONTHLY_SEA_TEMPS = {
    1: 9, 2: 8, 3: 8, 4: 9, 5: 11, 6: 13,
    7: 15, 8: 16, 9: 15, 10: 14, 11: 12, 12: 10,
}

# Upper wind speed bound (km/h) -> assumed wave height (m)
WIND_WAVE_STEPS = (
    (12, 0.2),
    (20, 0.5),
    (30, 1.0),
    (40, 1.5),
    (50, 2.5),
)
STORM_WAVE_HEIGHT = 4.0


def estimate_water_temp(
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None,
) -> float:
    """
    Estimate sea temperature from the month and location.

    Starts from monthly climatology, colder north of 54N, slightly warmer
    south of 52N and on Atlantic-facing coasts west of 8W.
    """
    now = now or datetime.now(timezone.utc)
    base = float(MONTHLY_SEA_TEMPS.get(now.month, 12))

    if latitude > 54:
        base -= 1
    elif latitude < 52:
        base += 0.5

    if longitude < -8:
        base += 0.5

    return round(base, 1)


def estimate_wave_from_wind(wind_speed_kmh: Optional[float]) -> Optional[float]:
    """Assumed wave height for a wind speed, or None without wind data."""
    if wind_speed_kmh is None:
        return None
    for bound, height in WIND_WAVE_STEPS:
        if wind_speed_kmh < bound:
            return height
    return STORM_WAVE_HEIGHT
