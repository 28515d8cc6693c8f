"""Tests for the scoring service."""
import itertools

import pytest

from swimcast.models.profiles import (
    CONDITION_PROFILES,
    EXPERIENCE_PROFILES,
    get_experience_profile,
    wave_height_for_sea_state,
)
from swimcast.models.reading import Reading
from swimcast.models.score import CAUTION, DANGEROUS, SAFE
from swimcast.services.scoring_service import (
    ScoringService,
    classify_safety,
    get_rating,
    recommend_duration,
    round_half_up,
    wind_chill_wet,
)


@pytest.fixture
def service() -> ScoringService:
    return ScoringService()


class TestConditionProfiles:
    """Tests for the static penalty tables."""

    def test_weights_total_one_hundred(self):
        """Test factor weights add up to the full score."""
        assert sum(p.weight for p in CONDITION_PROFILES.values()) == 100

    def test_upper_bound_table(self):
        """Test bucket lookup on upper bounds."""
        wind = CONDITION_PROFILES["wind"]
        assert wind.penalty(10) == 0.0
        assert wind.penalty(10.1) == 0.2
        assert wind.penalty(40) == 0.85
        assert wind.penalty(150) == 1.0

    def test_lower_bound_table(self):
        """Test bucket lookup on lower bounds (temperatures)."""
        water = CONDITION_PROFILES["water_temp"]
        assert water.penalty(25) == 0.0
        assert water.penalty(18) == 0.15
        assert water.penalty(17.9) == 0.35
        assert water.penalty(7.9) == 1.0

    def test_registries_are_read_only(self):
        """Test the profile registries cannot be modified."""
        with pytest.raises(TypeError):
            EXPERIENCE_PROFILES["expert"] = EXPERIENCE_PROFILES["beginner"]

    def test_unknown_experience_defaults_to_intermediate(self):
        """Test unknown tier keys fall back to intermediate."""
        assert get_experience_profile("olympian").key == "intermediate"
        assert get_experience_profile(None).key == "intermediate"

    def test_sea_state_lookup(self):
        """Test named sea states map to wave heights, unknown labels to 0.5 m."""
        assert wave_height_for_sea_state("rough") == 1.5
        assert wave_height_for_sea_state("Very Rough") == 2.5
        assert wave_height_for_sea_state("tsunami") == 0.5
        assert wave_height_for_sea_state(None) == 0.5


class TestScoringService:
    """Tests for ScoringService.compute_score."""

    def test_pleasant_conditions_score_good(self, service):
        """Test mild water and calm weather rate good with no warnings."""
        reading = Reading(
            water_temp=16, air_temp=18, wind_speed=10,
            wave_height=0.3, precip_probability=0,
        )

        result = service.compute_score(reading, "intermediate")

        # 100 - 12 (water) - 4 (air)
        assert result.score == 84
        assert result.rating == "Good"
        assert result.warnings is None
        assert result.safety == SAFE

    def test_hostile_conditions_are_dangerous(self, service):
        """Test cold water, big waves and storm wind trip every gate."""
        reading = Reading(water_temp=6, wave_height=2.5, wind_speed=55)

        result = service.compute_score(reading, "beginner")

        assert result.score <= 25
        assert result.score == 20
        assert result.safety == DANGEROUS
        assert "Water too cold for beginner without wetsuit" in result.warnings
        assert "Sea conditions dangerous - do not swim" in result.warnings
        assert "Extreme wind - not safe for swimming" in result.warnings
        assert result.recommendation == "Dangerous conditions - do not swim today."

    def test_sea_state_label_matches_measured_waves(self, service):
        """Test a 'rough' label scores the same as a measured 1.5 m sea."""
        from_label = service.compute_score(Reading(sea_state="rough"))
        measured = service.compute_score(Reading(wave_height=1.5))

        assert from_label.factors["sea_conditions"].value == 1.5
        assert from_label.score == measured.score
        assert from_label.factors["sea_conditions"].points == 9

    def test_wind_gate_caps_favourable_score(self, service):
        """Test the wind gate caps rather than deducts."""
        reading = Reading(
            water_temp=22, air_temp=22, wind_speed=55, wave_height=0.2,
        )

        result = service.compute_score(reading)

        # Weighted result would be 80
        assert result.score == 25

    def test_wave_gate_caps_favourable_score(self, service):
        """Test the wave gate caps an otherwise excellent reading."""
        reading = Reading(water_temp=22, air_temp=22, wind_speed=5, wave_height=2.1)

        result = service.compute_score(reading)

        assert result.score == 20

    def test_cold_water_gate_caps_score(self, service):
        """Test water below the tier minimum caps the score at 35."""
        reading = Reading(water_temp=15, air_temp=22, wind_speed=5, wave_height=0.2)

        result = service.compute_score(reading, "beginner")

        # 100 - 18 (water, x1.5 multiplier) = 82 before the gate
        assert result.score == 35
        assert result.safety == CAUTION

    def test_wetsuit_lifts_gate_and_shifts_lookup(self, service):
        """Test a wetsuit shifts the lookup by 5 degrees and skips the cold gate."""
        bare = service.compute_score(Reading(water_temp=15), "beginner")
        suited = service.compute_score(Reading(water_temp=15, has_wetsuit=True), "beginner")

        assert suited.factors["water_temp"].points == 0
        assert suited.score > bare.score
        assert not any("without wetsuit" in w for w in suited.warnings or [])

    def test_cold_water_multiplier_is_clamped(self, service):
        """Test amplified penalties never exceed the factor weight."""
        beginner = service.compute_score(Reading(water_temp=5), "beginner")
        specialist = service.compute_score(Reading(water_temp=5), "cold_water_swimmer")

        assert beginner.factors["water_temp"].points == 35
        assert specialist.factors["water_temp"].points == 14

    def test_score_always_within_bounds(self, service):
        """Test the score is clamped to 0-100 across extreme readings."""
        values = itertools.product(
            [-5, 4, 12, 30],       # water
            [-20, 10, 35],         # air
            [0, 30, 120],          # wind
            [0.0, 1.2, 9.0],       # waves
            [0, 100],              # rain
        )
        for water, air, wind, wave, rain in values:
            reading = Reading(
                water_temp=water, air_temp=air, wind_speed=wind,
                wave_height=wave, precip_probability=rain,
            )
            for experience in EXPERIENCE_PROFILES:
                result = service.compute_score(reading, experience)
                assert 0 <= result.score <= 100
                assert result.rating == get_rating(result.score)

    def test_scoring_is_deterministic(self, service):
        """Test the same reading scores identically twice."""
        reading = Reading(water_temp=13.5, air_temp=11, wind_speed=22, sea_state="slight")

        assert service.compute_score(reading, "experienced") == service.compute_score(
            reading, "experienced"
        )

    def test_empty_reading_uses_defaults(self, service):
        """Test a reading with every field missing still scores."""
        reading = Reading(
            water_temp=None, air_temp=None, feels_like=None, wind_speed=None,
            precip_probability=None, has_wetsuit=None, humidity=None,
        )

        result = service.compute_score(reading)

        assert reading.water_temp == 14.0
        assert reading.wind_speed == 10.0
        assert result.factors["sea_conditions"].value == 0.5
        assert 0 <= result.score <= 100

    def test_reasons_are_truncated(self, service):
        """Test only the first four reasons are kept."""
        result = service.compute_score(Reading(precip_probability=80))

        assert len(result.reasons) == 4
        assert not any("Rain likely" in r for r in result.reasons)

    def test_reason_text_formats_numbers(self, service):
        """Test water temperature reasons drop a trailing .0."""
        result = service.compute_score(Reading(water_temp=19.0))

        assert result.reasons[0] == "Comfortable water (19°C)"

    def test_experience_name_reported(self, service):
        """Test the result carries the tier name used."""
        assert service.compute_score(Reading(), "cold_water_swimmer").experience == (
            "Cold Water Swimmer"
        )
        assert service.compute_score(Reading(), "unknown").experience == "Intermediate"

    def test_breakdown_records_factor_details(self, service):
        """Test per-factor extras are recorded."""
        result = service.compute_score(
            Reading(water_temp=20, air_temp=10, wind_speed=20, has_wetsuit=True)
        )

        assert result.factors["water_temp"].details["has_wetsuit"] is True
        assert result.factors["water_temp"].category == "Comfortable"
        assert result.factors["wind"].details["wind_chill_wet"] == wind_chill_wet(10, 20)
        assert result.factors["rain"].max_points == 10


class TestRating:
    """Tests for rating breakpoints."""

    @pytest.mark.parametrize("score,rating", [
        (100, "Excellent"), (85, "Excellent"), (84, "Good"), (70, "Good"),
        (69, "Fair"), (55, "Fair"), (54, "Poor"), (40, "Poor"),
        (39, "Not Recommended"), (0, "Not Recommended"),
    ])
    def test_rating_breakpoints(self, score, rating):
        """Test each rating boundary."""
        assert get_rating(score) == rating


class TestHelpers:
    """Tests for scoring helpers."""

    def test_round_half_up(self):
        """Test halves round upward."""
        assert round_half_up(10.5) == 11
        assert round_half_up(12.25) == 12
        assert round_half_up(2.5) == 3

    def test_safety_from_warning_text(self):
        """Test classification depends on warning content only."""
        assert classify_safety([]) == SAFE
        assert classify_safety(["Consider a wetsuit"]) == CAUTION
        assert classify_safety(["Rough sea - dangerous conditions"]) == DANGEROUS
        assert classify_safety(["Extreme wind - not safe for swimming"]) == DANGEROUS

    def test_duration_ignores_score(self):
        """Test duration comes from the decision table, not the score."""
        profile = get_experience_profile("experienced")
        assert recommend_duration(7, 20, 5, profile) == "5-10 min max"
        assert recommend_duration(11, 20, 5, profile) == "10-15 min"
        assert recommend_duration(16, 20, 30, profile) == "10-20 min"
        assert recommend_duration(16, 8, 5, profile) == "10-20 min"
        assert recommend_duration(16, 20, 5, profile) == "20-45 min"

    def test_good_score_with_cold_water_gets_short_duration(self):
        """Test a good score does not lengthen the cold-water duration."""
        result = ScoringService().compute_score(
            Reading(water_temp=11, air_temp=20, wind_speed=5, wave_height=0.2),
            "experienced",
        )

        assert result.rating == "Good"
        assert result.swim_duration == "10-15 min"

    def test_wind_chill_below_five_kmh(self):
        """Test calm air has no wind chill."""
        assert wind_chill_wet(12.0, 3) == 12.0
        assert wind_chill_wet(12.0, 30) < 12.0
