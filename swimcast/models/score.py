"""Score, factor breakdown and forecast window data structures."""
from datetime import datetime
from typing import Dict, List, Optional

from attrs import field, frozen

SAFE = "safe"
CAUTION = "caution"
DANGEROUS = "dangerous"


@frozen
class FactorBreakdown:
    """Contribution of one factor to the final score."""

    value: float
    category: str
    points: int  # points deducted
    max_points: int
    # Factor-specific extras (feels-like, wind chill when wet, wetsuit flag...)
    details: Dict[str, object] = field(factory=dict)

    def to_dict(self) -> dict:
        """Convert to serializable dictionary."""
        return {
            "value": self.value,
            "category": self.category,
            "points": self.points,
            "max_points": self.max_points,
            **self.details,
        }


@frozen
class ScoreResult:
    """Outcome of scoring one reading for one experience tier."""

    score: int
    rating: str
    experience: str
    factors: Dict[str, FactorBreakdown]
    reasons: List[str]
    # None when nothing was flagged, never an empty list
    warnings: Optional[List[str]]
    safety: str
    recommendation: str
    swim_duration: str

    @property
    def is_dangerous(self) -> bool:
        """Whether any warning marks the conditions as dangerous."""
        return self.safety == DANGEROUS


@frozen
class WindowOptions:
    """Options controlling forecast window detection."""

    min_score: int = 55
    min_duration_minutes: int = 60
    max_windows: int = 3
    daylight_only: bool = False


@frozen
class ForecastWindow:
    """A finalized run of consecutive acceptable forecast hours."""

    start: datetime
    end: datetime
    peak_score: int
    peak_time: datetime
    avg_score: int
    water_temp: float  # average, 0.1 degree resolution
    avg_air_temp: int
    duration_minutes: int

    def to_dict(self) -> dict:
        """Convert to serializable dictionary."""
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "peak_score": self.peak_score,
            "peak_time": self.peak_time.isoformat(),
            "avg_score": self.avg_score,
            "water_temp": self.water_temp,
            "avg_air_temp": self.avg_air_temp,
            "duration_minutes": self.duration_minutes,
        }
