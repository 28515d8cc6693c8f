"""Static scoring tables: condition profiles, experience tiers and sea states."""
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from attrs import frozen

# Bands compare upward ("value <= bound") or downward ("value >= bound")
UPPER = "upper"
LOWER = "lower"


@frozen
class ConditionProfile:
    """Weighted penalty table for one scoring factor.

    ``bands`` is an ordered tuple of ``(bound, penalty)`` pairs. With
    ``direction=UPPER`` the first band whose bound is >= value wins; with
    ``direction=LOWER`` (bounds descending) the first bound <= value wins.
    Values falling outside every band get the full penalty.
    """

    name: str
    weight: int
    bands: Tuple[Tuple[float, float], ...]
    direction: str = UPPER

    def penalty(self, value: float) -> float:
        """Penalty fraction in [0, 1] for a value."""
        for bound, penalty in self.bands:
            if self.direction == UPPER and value <= bound:
                return penalty
            if self.direction == LOWER and value >= bound:
                return penalty
        return 1.0


@frozen
class ExperienceProfile:
    """Tolerances for one swimmer skill tier."""

    key: str
    name: str
    min_water_temp: float
    max_wave_height: float
    cold_water_multiplier: float
    recommended_duration: str
    description: str = ""


# Wetsuit comfort is approximated as a fixed shift of the water temperature lookup
WETSUIT_OFFSET_C = 5.0

WATER_TEMP = ConditionProfile(
    name="water_temp",
    weight=35,
    bands=((20, 0.0), (18, 0.15), (15, 0.35), (12, 0.55), (10, 0.75), (8, 0.9)),
    direction=LOWER,
)

AIR_TEMP = ConditionProfile(
    name="air_temp",
    weight=20,
    bands=((20, 0.0), (16, 0.2), (12, 0.4), (8, 0.65), (5, 0.85)),
    direction=LOWER,
)

# km/h
WIND = ConditionProfile(
    name="wind",
    weight=20,
    bands=((10, 0.0), (15, 0.2), (20, 0.4), (30, 0.65), (40, 0.85), (100, 1.0)),
)

# Wave height in meters
SEA_CONDITIONS = ConditionProfile(
    name="sea_conditions",
    weight=15,
    bands=((0.3, 0.0), (0.5, 0.15), (1.0, 0.35), (1.5, 0.6), (2.0, 0.85), (10, 1.0)),
)

# Precipitation probability, percent
RAIN = ConditionProfile(
    name="rain",
    weight=10,
    bands=((10, 0.0), (30, 0.2), (50, 0.4), (70, 0.6), (100, 0.8)),
)

CONDITION_PROFILES: Mapping[str, ConditionProfile] = MappingProxyType({
    profile.name: profile
    for profile in (WATER_TEMP, AIR_TEMP, WIND, SEA_CONDITIONS, RAIN)
})

DEFAULT_EXPERIENCE = "intermediate"

EXPERIENCE_PROFILES: Mapping[str, ExperienceProfile] = MappingProxyType({
    "beginner": ExperienceProfile(
        key="beginner",
        name="Beginner",
        min_water_temp=16,
        max_wave_height=0.5,
        cold_water_multiplier=1.5,
        recommended_duration="10-15 min",
        description="New to open water swimming. Prefer warmer water and calm conditions.",
    ),
    "intermediate": ExperienceProfile(
        key="intermediate",
        name="Intermediate",
        min_water_temp=12,
        max_wave_height=1.0,
        cold_water_multiplier=1.0,
        recommended_duration="15-30 min",
        description="Comfortable in open water. Can handle cooler temps and moderate conditions.",
    ),
    "experienced": ExperienceProfile(
        key="experienced",
        name="Experienced",
        min_water_temp=8,
        max_wave_height=1.5,
        cold_water_multiplier=0.7,
        recommended_duration="20-45 min",
        description="Regular open water swimmer. Comfortable in cold water and varied conditions.",
    ),
    "cold_water_swimmer": ExperienceProfile(
        key="cold_water_swimmer",
        name="Cold Water Swimmer",
        min_water_temp=4,
        max_wave_height=1.0,
        cold_water_multiplier=0.4,
        recommended_duration="5-20 min",
        description="Dedicated cold water swimmer. Acclimatized to very cold temperatures.",
    ),
})

# Named sea states -> assumed wave height in meters
SEA_STATE_WAVE_HEIGHTS: Mapping[str, float] = MappingProxyType({
    "calm": 0.2,
    "smooth": 0.3,
    "slight": 0.5,
    "moderate": 1.0,
    "rough": 1.5,
    "very rough": 2.5,
    "high": 3.5,
})
DEFAULT_WAVE_HEIGHT = 0.5


def is_valid_experience(key: Optional[str]) -> bool:
    """Whether a key names one of the four experience tiers."""
    return key in EXPERIENCE_PROFILES


def get_experience_profile(key: Optional[str]) -> ExperienceProfile:
    """Look up an experience tier, falling back to intermediate."""
    return EXPERIENCE_PROFILES.get(key) or EXPERIENCE_PROFILES[DEFAULT_EXPERIENCE]


def wave_height_for_sea_state(sea_state: Optional[str]) -> float:
    """Assumed wave height for a sea-state label (0.5 m when unknown)."""
    if not sea_state:
        return DEFAULT_WAVE_HEIGHT
    return SEA_STATE_WAVE_HEIGHTS.get(sea_state.strip().lower(), DEFAULT_WAVE_HEIGHT)
