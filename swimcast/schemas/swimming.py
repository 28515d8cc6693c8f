"""Pydantic schemas for swimming score responses."""
from datetime import datetime
from pydantic import BaseModel
from typing import Dict, List, Optional


class Location(BaseModel):
    """Requested coordinates."""

    lat: float
    lon: float


class FactorResponse(BaseModel):
    """Contribution of one factor to the score."""

    value: float
    category: str
    points: int  # points deducted
    max_points: int
    has_wetsuit: Optional[bool] = None
    feels_like: Optional[float] = None
    wind_chill_wet: Optional[float] = None
    measured: Optional[bool] = None


class CurrentScore(BaseModel):
    """Score for the current conditions."""

    score: int
    rating: str
    factors: Dict[str, FactorResponse]
    reasons: List[str]
    recommendation: str
    swim_duration: str


class WaveCheck(BaseModel):
    """Wave height checked against the experience tier's limit."""

    safe: bool
    reason: Optional[str] = None


class Safety(BaseModel):
    """Safety classification derived from warnings."""

    level: str  # safe / caution / dangerous
    warnings: List[str]
    wave_check: WaveCheck


class WaterTempCondition(BaseModel):
    """Water temperature and where it came from."""

    value: float
    unit: str = "°C"
    source: str
    category: str


class SeaCondition(BaseModel):
    """Sea state used for scoring."""

    wave_height: Optional[float] = None
    wave_height_unit: str = "m"
    wave_direction: Optional[float] = None
    wave_period: Optional[float] = None
    swell_height: Optional[float] = None
    state: str
    source: str


class Conditions(BaseModel):
    """Fused environmental conditions."""

    water_temp: WaterTempCondition
    air_temp: Optional[int] = None
    feels_like: Optional[int] = None
    wind_speed: Optional[int] = None  # km/h
    wind_chill_wet: Optional[float] = None
    sea: SeaCondition
    weather: Optional[str] = None


class Gear(BaseModel):
    """Wetsuit advice."""

    wetsuit_recommended: bool
    wetsuit_required: bool
    has_wetsuit: bool


class Tides(BaseModel):
    """Pointer to external tide tables; tides are not modelled."""

    note: str
    recommendation: str
    suggested_sources: List[str]


class DataSources(BaseModel):
    """Provenance of each fused field."""

    weather: str
    marine: str
    water_temp: str
    waves: str


class MarineHour(BaseModel):
    """One hour of the marine outlook."""

    time: datetime
    sea_temp: Optional[float] = None
    wave_height: Optional[float] = None
    sea_state: str


class WindowResponse(BaseModel):
    """A contiguous run of good swimming hours."""

    start: datetime
    end: datetime
    peak_score: int
    peak_time: datetime
    avg_score: int
    water_temp: float
    avg_air_temp: int
    duration_minutes: int


class NarrativeWindow(BaseModel):
    """Best window in display form."""

    start: str  # "HH:MM" UTC
    end: str
    water_temp: str
    air_temp: str


class NarrativeSummary(BaseModel):
    """Compact decision summary for narrative generation."""

    decision: str  # yes / maybe / no
    confidence: str  # high / medium / low
    location: Dict[str, str]
    rating: str
    conditions: Dict[str, str]
    window: Optional[NarrativeWindow] = None
    swim_duration: str
    reasons: List[str]
    warnings: Optional[List[str]] = None
    recommendation: str


class SwimmingScoreResponse(BaseModel):
    """Response schema for a swimming score request."""

    location: Location
    timestamp: datetime
    experience: str
    current: CurrentScore
    safety: Safety
    conditions: Conditions
    gear: Gear
    data_sources: DataSources
    tides: Tides
    warnings: Optional[List[str]] = None
    marine_forecast: Optional[List[MarineHour]] = None
    forecast_available: bool
    windows: Optional[List[WindowResponse]] = None
    best_window: Optional[WindowResponse] = None
    ai_data: Optional[NarrativeSummary] = None


class ExperienceLevel(BaseModel):
    """One swimmer experience tier."""

    id: str
    name: str
    min_water_temp: float
    max_wave_height: float
    recommended_duration: str
    description: str


class ExperienceLevelsResponse(BaseModel):
    """Response schema for the experience level listing."""

    levels: List[ExperienceLevel]
