"""Service for scoring sea swimming conditions."""
import math
from typing import Dict, List, Optional

from swimcast.models.profiles import (
    AIR_TEMP,
    RAIN,
    SEA_CONDITIONS,
    WATER_TEMP,
    WETSUIT_OFFSET_C,
    WIND,
    ExperienceProfile,
    get_experience_profile,
    wave_height_for_sea_state,
)
from swimcast.models.reading import Reading
from swimcast.models.score import (
    CAUTION,
    DANGEROUS,
    SAFE,
    FactorBreakdown,
    ScoreResult,
)

MAX_REASONS = 4

# Safety gates cap the score rather than deducting from it
COLD_WATER_CAP = 35
DANGEROUS_WAVE_HEIGHT = 2.0
DANGEROUS_WAVE_CAP = 20
EXTREME_WIND_SPEED = 50
EXTREME_WIND_CAP = 25

DANGER_MARKERS = ("dangerous", "extreme")

RATING_BREAKPOINTS = (
    (85, "Excellent"),
    (70, "Good"),
    (55, "Fair"),
    (40, "Poor"),
)
LOWEST_RATING = "Not Recommended"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Format a number without a trailing '.0'."""
    return f"{value:g}"


def deduction(weight: int, penalty: float) -> int:
    """Points deducted for a penalty fraction."""
    return round_half_up(weight * penalty)


def get_rating(score: int) -> str:
    """Five-tier rating label for a score."""
    for threshold, label in RATING_BREAKPOINTS:
        if score >= threshold:
            return label
    return LOWEST_RATING


def categorize_water_temp(temp: float) -> str:
    """Comfort category for a water temperature."""
    if temp >= 22:
        return "Warm"
    if temp >= 18:
        return "Comfortable"
    if temp >= 15:
        return "Cool"
    if temp >= 12:
        return "Cold"
    if temp >= 8:
        return "Very Cold"
    return "Dangerous"


def categorize_air_temp(temp: float) -> str:
    """Comfort category for the air temperature when getting out."""
    if temp >= 18:
        return "Warm"
    if temp >= 12:
        return "Cool"
    return "Cold"


def categorize_wind(speed: float) -> str:
    """Category for a wind speed in km/h."""
    if speed <= 10:
        return "Calm"
    if speed <= 20:
        return "Light breeze"
    if speed <= 30:
        return "Breezy"
    if speed <= EXTREME_WIND_SPEED:
        return "Strong"
    return "Extreme"


def categorize_rain(probability: float) -> str:
    """Category for a precipitation probability."""
    if probability <= 10:
        return "Dry"
    if probability <= 30:
        return "Light chance"
    if probability <= 50:
        return "Possible"
    if probability <= 70:
        return "Likely"
    return "Raining"


def estimate_sea_state(wave_height: float) -> str:
    """Coarse sea-state label for a wave height."""
    if wave_height <= 0.3:
        return "Calm"
    if wave_height <= 0.6:
        return "Slight"
    if wave_height <= 1.2:
        return "Moderate"
    if wave_height <= 2.0:
        return "Rough"
    return "Very Rough"


def wind_chill_wet(air_temp: float, wind_speed: float) -> float:
    """
    Approximate felt temperature for a wet swimmer.

    Uses the wind chill index on m/s wind, with an extra 0.15 degrees per km/h
    above 15 km/h for evaporative cooling.
    """
    if wind_speed < 5:
        return air_temp
    wind_ms = wind_speed / 3.6
    factor = wind_ms ** 0.16
    chill = 13.12 + 0.6215 * air_temp - 11.37 * factor + 0.3965 * air_temp * factor
    wet_penalty = (wind_speed - 15) * 0.15 if wind_speed > 15 else 0.0
    return round_half_up((chill - wet_penalty) * 10) / 10


def effective_wave_height(reading: Reading) -> float:
    """Measured wave height, or one derived from the sea-state label."""
    if reading.wave_height is not None:
        return reading.wave_height
    return wave_height_for_sea_state(reading.sea_state)


def classify_safety(warnings: List[str]) -> str:
    """Safety level derived from warning text."""
    if not warnings:
        return SAFE
    lowered = [w.lower() for w in warnings]
    if any(marker in w for w in lowered for marker in DANGER_MARKERS):
        return DANGEROUS
    return CAUTION


def recommend_duration(
    water_temp: float,
    air_temp: float,
    wind_speed: float,
    profile: ExperienceProfile,
) -> str:
    """Recommended time in the water, independent of the score."""
    if water_temp < 12:
        return "5-10 min max" if water_temp < 8 else "10-15 min"
    if wind_speed > 25 or air_temp < 10:
        return "10-20 min"
    return profile.recommended_duration


class ScoringService:
    """Service turning a reading into a 0-100 swimming score.

    Five weighted factors (water temperature, air temperature, wind, sea
    conditions, rain) are deducted from 100, then hard safety gates cap the
    result. The computation is pure: the same reading always yields an
    identical result.
    """

    def compute_score(
        self,
        reading: Reading,
        experience: Optional[str] = None,
    ) -> ScoreResult:
        """
        Score a reading for an experience tier.

        Args:
            reading: Conditions to score
            experience: Experience tier key; unknown keys fall back to intermediate

        Returns:
            ScoreResult with breakdown, reasons, warnings and safety level
        """
        profile = get_experience_profile(experience)
        reasons: List[str] = []
        warnings: List[str] = []
        factors: Dict[str, FactorBreakdown] = {}

        score = 100
        for name, score_factor in (
            ("water_temp", self._score_water),
            ("air_temp", self._score_air),
            ("wind", self._score_wind),
            ("sea_conditions", self._score_sea),
            ("rain", self._score_rain),
        ):
            factor = score_factor(reading, profile, reasons, warnings)
            factors[name] = factor
            score -= factor.points

        score = self._apply_safety_gates(score, reading, profile, warnings)
        score = max(0, min(100, score))

        safety = classify_safety(warnings)
        return ScoreResult(
            score=score,
            rating=get_rating(score),
            experience=profile.name,
            factors=factors,
            reasons=reasons[:MAX_REASONS],
            warnings=warnings or None,
            safety=safety,
            recommendation=self._recommend(score, factors, safety, profile),
            swim_duration=recommend_duration(
                reading.water_temp, reading.air_temp, reading.wind_speed, profile
            ),
        )

    def _score_water(
        self,
        reading: Reading,
        profile: ExperienceProfile,
        reasons: List[str],
        warnings: List[str],
    ) -> FactorBreakdown:
        temp = reading.water_temp
        lookup_temp = temp + WETSUIT_OFFSET_C if reading.has_wetsuit else temp
        penalty = WATER_TEMP.penalty(lookup_temp) * profile.cold_water_multiplier
        penalty = max(0.0, min(1.0, penalty))

        label = format_number(temp)
        if temp >= 18:
            reasons.append(f"Comfortable water ({label}°C)")
        elif temp >= 14:
            reasons.append(f"Cool water ({label}°C) - refreshing!")
        elif temp >= 10:
            reasons.append(f"Cold water ({label}°C) - limit swim time")
            if not reading.has_wetsuit:
                warnings.append("Consider a wetsuit")
        else:
            reasons.append(f"Very cold water ({label}°C)")
            warnings.append("Cold water risk - experienced swimmers only")
            if not reading.has_wetsuit:
                warnings.append("Wetsuit strongly recommended")

        return FactorBreakdown(
            value=temp,
            category=categorize_water_temp(temp),
            points=deduction(WATER_TEMP.weight, penalty),
            max_points=WATER_TEMP.weight,
            details={"has_wetsuit": reading.has_wetsuit},
        )

    def _score_air(
        self,
        reading: Reading,
        profile: ExperienceProfile,
        reasons: List[str],
        warnings: List[str],
    ) -> FactorBreakdown:
        temp = reading.air_temp
        rounded = round_half_up(temp)
        if temp >= 18:
            reasons.append(f"Warm air ({rounded}°C) - comfortable exit")
        elif temp >= 12:
            reasons.append(f"Cool air ({rounded}°C) - have warm clothes ready")
        else:
            reasons.append(f"Cold air ({rounded}°C) - warm up quickly after")
            warnings.append("Bring warm dry clothes and hot drink")

        return FactorBreakdown(
            value=temp,
            category=categorize_air_temp(temp),
            points=deduction(AIR_TEMP.weight, AIR_TEMP.penalty(temp)),
            max_points=AIR_TEMP.weight,
            details={"feels_like": reading.feels_like},
        )

    def _score_wind(
        self,
        reading: Reading,
        profile: ExperienceProfile,
        reasons: List[str],
        warnings: List[str],
    ) -> FactorBreakdown:
        speed = reading.wind_speed
        rounded = round_half_up(speed)
        if speed <= 10:
            reasons.append("Calm winds - ideal")
        elif speed <= 20:
            reasons.append(f"Light breeze ({rounded} km/h)")
        elif speed <= 30:
            reasons.append(f"Breezy ({rounded} km/h) - wind chill when wet")
        else:
            warnings.append(f"Strong wind ({rounded} km/h) - significant wind chill")

        return FactorBreakdown(
            value=speed,
            category=categorize_wind(speed),
            points=deduction(WIND.weight, WIND.penalty(speed)),
            max_points=WIND.weight,
            details={"wind_chill_wet": wind_chill_wet(reading.air_temp, speed)},
        )

    def _score_sea(
        self,
        reading: Reading,
        profile: ExperienceProfile,
        reasons: List[str],
        warnings: List[str],
    ) -> FactorBreakdown:
        height = effective_wave_height(reading)
        if height <= 0.3:
            reasons.append("Calm sea")
        elif height <= 0.7:
            reasons.append("Slight waves")
        elif height <= 1.2:
            reasons.append("Moderate waves - swim with caution")
        else:
            warnings.append("Rough sea - dangerous conditions")

        if height > profile.max_wave_height:
            warnings.append(
                f"Waves exceed safe level for {profile.name.lower()} swimmers"
            )

        return FactorBreakdown(
            value=height,
            category=reading.sea_state or estimate_sea_state(height),
            points=deduction(SEA_CONDITIONS.weight, SEA_CONDITIONS.penalty(height)),
            max_points=SEA_CONDITIONS.weight,
            details={"measured": reading.wave_height is not None},
        )

    def _score_rain(
        self,
        reading: Reading,
        profile: ExperienceProfile,
        reasons: List[str],
        warnings: List[str],
    ) -> FactorBreakdown:
        probability = reading.precip_probability
        # Swimmers get wet anyway, so rain never warns
        if probability > 60:
            reasons.append("Rain likely - you'll be wet anyway!")

        return FactorBreakdown(
            value=probability,
            category=categorize_rain(probability),
            points=deduction(RAIN.weight, RAIN.penalty(probability)),
            max_points=RAIN.weight,
        )

    def _apply_safety_gates(
        self,
        score: int,
        reading: Reading,
        profile: ExperienceProfile,
        warnings: List[str],
    ) -> int:
        """Cap the score for conditions that are unsafe regardless of comfort."""
        if reading.water_temp < profile.min_water_temp and not reading.has_wetsuit:
            score = min(score, COLD_WATER_CAP)
            warnings.append(
                f"Water too cold for {profile.name.lower()} without wetsuit"
            )

        if effective_wave_height(reading) > DANGEROUS_WAVE_HEIGHT:
            score = min(score, DANGEROUS_WAVE_CAP)
            warnings.append("Sea conditions dangerous - do not swim")

        if reading.wind_speed > EXTREME_WIND_SPEED:
            score = min(score, EXTREME_WIND_CAP)
            warnings.append("Extreme wind - not safe for swimming")

        return score

    def _recommend(
        self,
        score: int,
        factors: Dict[str, FactorBreakdown],
        safety: str,
        profile: ExperienceProfile,
    ) -> str:
        """One-line advice for the swimmer."""
        if safety == DANGEROUS:
            return "Dangerous conditions - do not swim today."

        if score >= 80:
            return "Excellent swimming conditions! Enjoy the water."

        water_temp = factors["water_temp"].value
        if score >= 65:
            if water_temp < 14:
                return "Good conditions for a swim. Water is cool - consider a shorter swim."
            return "Good conditions for a swim."

        if score >= 50:
            if water_temp < 12:
                return "Cold water - only for experienced cold water swimmers."
            if factors["wind"].value > 25:
                return "Windy conditions - wind chill significant when wet."
            return "Fair conditions - swim with caution."

        if score >= 35:
            return (
                f"Conditions are poor for {profile.name.lower()} swimmers. "
                "Consider postponing."
            )

        return "Not recommended for swimming today."

