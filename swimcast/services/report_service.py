"""Service shaping scores and windows into API responses."""
from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd

from swimcast.config import settings
from swimcast.models.profiles import EXPERIENCE_PROFILES, ExperienceProfile
from swimcast.models.score import ForecastWindow, ScoreResult
from swimcast.schemas.swimming import (
    Conditions,
    CurrentScore,
    DataSources,
    ExperienceLevel,
    ExperienceLevelsResponse,
    FactorResponse,
    Gear,
    Location,
    MarineHour,
    NarrativeSummary,
    NarrativeWindow,
    Safety,
    SeaCondition,
    SwimmingScoreResponse,
    Tides,
    WaterTempCondition,
    WaveCheck,
    WindowResponse,
)
from swimcast.services.reading_assembler import AssembledConditions
from swimcast.services.scoring_service import round_half_up

# Descriptive sea scale: (upper bound exclusive in m, label)
SEA_STATE_SCALE = (
    (0.1, "Calm (glassy)"),
    (0.3, "Calm (rippled)"),
    (0.5, "Smooth"),
    (1.0, "Slight"),
    (1.5, "Moderate"),
    (2.5, "Rough"),
    (4.0, "Very Rough"),
    (6.0, "High"),
)

WETSUIT_RECOMMENDED_BELOW = 15
WETSUIT_REQUIRED_BELOW = 12

TIDE_SOURCES = ["admiralty.co.uk", "worldtides.info"]


def describe_sea_state(wave_height: Optional[float]) -> str:
    """Descriptive sea-state label for a wave height."""
    if wave_height is None or pd.isna(wave_height):
        return "Unknown"
    for bound, label in SEA_STATE_SCALE:
        if wave_height < bound:
            return label
    return "Very High"


def check_wave_safety(wave_height: Optional[float], profile: ExperienceProfile) -> WaveCheck:
    """Check a wave height against the tier's maximum."""
    if wave_height is None:
        return WaveCheck(safe=True, reason="Wave data unavailable - check conditions locally")
    if wave_height > profile.max_wave_height:
        return WaveCheck(
            safe=False,
            reason=(
                f"Waves ({wave_height}m) exceed safe level "
                f"({profile.max_wave_height}m) for {profile.key} swimmers"
            ),
        )
    if wave_height > 2.0:
        return WaveCheck(safe=False, reason="Dangerous sea conditions")
    return WaveCheck(safe=True)


def decide(score: int) -> str:
    """Yes / maybe / no decision for a score."""
    if score >= 65:
        return "yes"
    if score >= 45:
        return "maybe"
    return "no"


def confidence_for(score: int) -> str:
    """Confidence tier for a score."""
    if score >= 75:
        return "high"
    if score >= 55:
        return "medium"
    return "low"


def _round_or_none(value: Optional[float]) -> Optional[int]:
    return round_half_up(value) if value is not None else None


def tide_reference() -> Tides:
    """Static tide note; check local tide tables before swimming."""
    return Tides(
        note="Tide data is not included in this forecast",
        recommendation="Check local tide tables before swimming",
        suggested_sources=list(TIDE_SOURCES),
    )


def window_response(window: ForecastWindow) -> WindowResponse:
    """Convert a finalized forecast window to its response schema."""
    return WindowResponse(**window.to_dict())


class ReportService:
    """Service for formatting score results for API consumers."""

    def build_score_response(
        self,
        latitude: float,
        longitude: float,
        profile: ExperienceProfile,
        conditions: AssembledConditions,
        result: ScoreResult,
        windows: Optional[List[ForecastWindow]] = None,
        include_ai_data: bool = False,
        now: Optional[datetime] = None,
    ) -> SwimmingScoreResponse:
        """
        Build the swimming score response.

        Args:
            latitude: Requested latitude
            longitude: Requested longitude
            profile: Experience tier used for scoring
            conditions: Assembled reading, attribution and provider data
            result: Score for the current reading
            windows: Ranked windows, or None when no forecast was analysed
            include_ai_data: Whether to attach the narrative summary
            now: Response timestamp

        Returns:
            SwimmingScoreResponse
        """
        reading = conditions.reading
        attribution = conditions.attribution
        weather = conditions.weather.current
        marine = conditions.marine.current

        wave_check = check_wave_safety(reading.wave_height, profile)
        warnings = list(result.warnings or [])
        if not wave_check.safe:
            warnings.append(wave_check.reason)

        window_responses = [window_response(w) for w in windows] if windows else None

        response = SwimmingScoreResponse(
            location=Location(lat=latitude, lon=longitude),
            timestamp=now or datetime.now(timezone.utc),
            experience=result.experience,
            current=CurrentScore(
                score=result.score,
                rating=result.rating,
                factors={
                    name: FactorResponse(**factor.to_dict())
                    for name, factor in result.factors.items()
                },
                reasons=result.reasons,
                recommendation=result.recommendation,
                swim_duration=result.swim_duration,
            ),
            safety=Safety(
                level=result.safety,
                warnings=list(result.warnings or []),
                wave_check=wave_check,
            ),
            conditions=Conditions(
                water_temp=WaterTempCondition(
                    value=reading.water_temp,
                    source=attribution.water_temp,
                    category=result.factors["water_temp"].category,
                ),
                air_temp=_round_or_none(weather.temp),
                feels_like=_round_or_none(weather.feels_like),
                wind_speed=_round_or_none(weather.wind_speed),
                wind_chill_wet=result.factors["wind"].details.get("wind_chill_wet"),
                sea=SeaCondition(
                    wave_height=reading.wave_height,
                    wave_direction=marine.wave_direction,
                    wave_period=marine.wave_period,
                    swell_height=marine.swell_height,
                    state=describe_sea_state(reading.wave_height),
                    source=attribution.waves,
                ),
                weather=weather.description,
            ),
            gear=Gear(
                wetsuit_recommended=reading.water_temp < WETSUIT_RECOMMENDED_BELOW,
                wetsuit_required=reading.water_temp < WETSUIT_REQUIRED_BELOW,
                has_wetsuit=reading.has_wetsuit,
            ),
            data_sources=DataSources(**attribution.to_dict()),
            tides=tide_reference(),
            warnings=warnings or None,
            marine_forecast=self.marine_outlook(conditions),
            forecast_available=conditions.hourly is not None,
            windows=window_responses,
            best_window=window_responses[0] if window_responses else None,
        )

        if include_ai_data:
            best = windows[0] if windows else None
            response.ai_data = self.summarize(result, best)

        return response

    @staticmethod
    def marine_outlook(conditions: AssembledConditions) -> Optional[List[MarineHour]]:
        """First hours of the marine forecast, or None without marine data."""
        hourly = conditions.marine.hourly
        if hourly.empty:
            return None
        head = hourly.head(settings.marine_forecast_hours)
        return [
            MarineHour(
                time=row.time.to_pydatetime(),
                sea_temp=None if pd.isna(row.sea_temp) else float(row.sea_temp),
                wave_height=None if pd.isna(row.wave_height) else float(row.wave_height),
                sea_state=describe_sea_state(row.wave_height),
            )
            for row in head.itertuples(index=False)
        ]

    @staticmethod
    def summarize(
        result: ScoreResult,
        window: Optional[ForecastWindow],
        location_name: str = "Location",
    ) -> NarrativeSummary:
        """Compact decision summary for narrative generation."""
        factors = result.factors
        water = factors["water_temp"]
        return NarrativeSummary(
            decision=decide(result.score),
            confidence=confidence_for(result.score),
            location={"name": location_name},
            rating=result.rating,
            conditions={
                "water_temp": f"{water.value:g}°C ({water.category})",
                "air_temp": f"{round_half_up(factors['air_temp'].value)}°C",
                "wind": f"{round_half_up(factors['wind'].value)} km/h",
                "sea": factors["sea_conditions"].category,
            },
            window=NarrativeWindow(
                start=window.start.strftime("%H:%M"),
                end=window.end.strftime("%H:%M"),
                water_temp=f"{window.water_temp:g}°C",
                air_temp=f"{window.avg_air_temp}°C",
            ) if window else None,
            swim_duration=result.swim_duration,
            reasons=result.reasons,
            warnings=result.warnings,
            recommendation=result.recommendation,
        )

    @staticmethod
    def experience_levels() -> ExperienceLevelsResponse:
        """List the four experience tiers."""
        return ExperienceLevelsResponse(
            levels=[
                ExperienceLevel(
                    id=profile.key,
                    name=profile.name,
                    min_water_temp=profile.min_water_temp,
                    max_wave_height=profile.max_wave_height,
                    recommended_duration=profile.recommended_duration,
                    description=profile.description,
                )
                for profile in EXPERIENCE_PROFILES.values()
            ]
        )
