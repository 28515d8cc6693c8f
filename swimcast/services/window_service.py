"""Service for finding the best swimming windows in an hourly forecast."""
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from attrs import define, field

from swimcast.models.reading import HourlyReading
from swimcast.models.score import ForecastWindow, ScoreResult, WindowOptions
from swimcast.services.scoring_service import ScoringService, round_half_up

DEFAULT_WATER_TEMP = 14.0

WaterTemps = Union[Sequence[Optional[float]], float, None]


def _present(value: Optional[float]) -> bool:
    return value is not None and not np.isnan(value)


def water_temp_at(water_temps: WaterTemps, index: int) -> float:
    """
    Water temperature for a forecast hour.

    Water temperature changes slowly, so a series falls back to its first
    element and a constant applies to every hour.
    """
    if isinstance(water_temps, (int, float)):
        return float(water_temps)
    if water_temps is None or len(water_temps) == 0:
        return DEFAULT_WATER_TEMP
    if index < len(water_temps) and _present(water_temps[index]):
        return float(water_temps[index])
    if _present(water_temps[0]):
        return float(water_temps[0])
    return DEFAULT_WATER_TEMP


@define
class _OpenWindow:
    """Per-hour accumulators for a window that is still growing."""

    hours: List[HourlyReading] = field(factory=list)
    scores: List[int] = field(factory=list)
    water_temps: List[float] = field(factory=list)
    air_temps: List[float] = field(factory=list)

    def add(self, hour: HourlyReading, result: ScoreResult, water_temp: float) -> None:
        self.hours.append(hour)
        self.scores.append(result.score)
        self.water_temps.append(water_temp)
        self.air_temps.append(result.factors["air_temp"].value)

    def finalize(self) -> ForecastWindow:
        """Compute aggregates; the accumulators are discarded afterwards."""
        scores = np.array(self.scores, dtype=np.float64)
        peak_index = int(np.argmax(scores))
        return ForecastWindow(
            start=self.hours[0].time,
            end=self.hours[-1].time,
            peak_score=int(scores[peak_index]),
            peak_time=self.hours[peak_index].time,
            avg_score=round_half_up(float(scores.mean())),
            water_temp=round_half_up(float(np.mean(self.water_temps)) * 10) / 10,
            avg_air_temp=round_half_up(float(np.mean(self.air_temps))),
            duration_minutes=len(self.scores) * 60,
        )


class WindowService:
    """Service for grouping acceptable forecast hours into ranked windows."""

    def __init__(self, scoring_service: ScoringService = None):
        """Initialize service with a scoring service."""
        self.scoring_service = scoring_service or ScoringService()

    def score_hours(
        self,
        hours: Sequence[HourlyReading],
        water_temps: WaterTemps = None,
        experience: Optional[str] = None,
        has_wetsuit: bool = False,
    ) -> List[Tuple[HourlyReading, float, ScoreResult]]:
        """Score every forecast hour; returns (hour, water temp, result) triples."""
        scored = []
        for i, hour in enumerate(hours):
            water_temp = water_temp_at(water_temps, i)
            result = self.scoring_service.compute_score(
                hour.to_reading(water_temp, has_wetsuit), experience
            )
            scored.append((hour, water_temp, result))
        return scored

    def find_windows(
        self,
        hours: Sequence[HourlyReading],
        water_temps: WaterTemps = None,
        experience: Optional[str] = None,
        options: WindowOptions = None,
        has_wetsuit: bool = False,
    ) -> List[ForecastWindow]:
        """
        Find the best contiguous swimming windows.

        An hour is acceptable when it reaches ``min_score`` and is not
        classified dangerous (and, with ``daylight_only``, falls in daylight).
        Runs of acceptable hours are finalized when the run breaks or the
        forecast ends, then dropped if shorter than ``min_duration_minutes``.

        Args:
            hours: Chronological hourly forecast
            water_temps: Per-hour water temperature series, or a constant
            experience: Experience tier key
            options: Detection thresholds and result limit
            has_wetsuit: Whether the swimmer wears a wetsuit

        Returns:
            Up to ``max_windows`` windows, highest peak score first. Windows
            with equal peak scores keep chronological order.
        """
        options = options or WindowOptions()
        windows: List[ForecastWindow] = []
        current: Optional[_OpenWindow] = None

        def close(window: _OpenWindow) -> None:
            finalized = window.finalize()
            if finalized.duration_minutes >= options.min_duration_minutes:
                windows.append(finalized)

        for hour, water_temp, result in self.score_hours(
            hours, water_temps, experience, has_wetsuit
        ):
            if self._is_acceptable(hour, result, options):
                if current is None:
                    current = _OpenWindow()
                current.add(hour, result, water_temp)
            elif current is not None:
                close(current)
                current = None

        if current is not None:
            close(current)

        windows.sort(key=lambda w: w.peak_score, reverse=True)
        return windows[:options.max_windows]

    @staticmethod
    def _is_acceptable(
        hour: HourlyReading,
        result: ScoreResult,
        options: WindowOptions,
    ) -> bool:
        if options.daylight_only and not hour.is_daylight:
            return False
        return result.score >= options.min_score and not result.is_dangerous
