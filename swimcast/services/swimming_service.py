"""Service orchestrating a swimming score request."""
import logging
import math
from datetime import datetime
from typing import Optional

from swimcast.config import settings
from swimcast.errors import InvalidRequestError
from swimcast.models.profiles import (
    EXPERIENCE_PROFILES,
    get_experience_profile,
    is_valid_experience,
)
from swimcast.models.score import WindowOptions
from swimcast.schemas.swimming import ExperienceLevelsResponse, SwimmingScoreResponse
from swimcast.services.reading_assembler import ReadingAssembler
from swimcast.services.report_service import ReportService
from swimcast.services.scoring_service import ScoringService
from swimcast.services.window_service import WindowService

logger = logging.getLogger(__name__)


def validate_coordinates(latitude: Optional[float], longitude: Optional[float]) -> None:
    """Reject missing, non-finite or out-of-range coordinates."""
    for name, value, limit in (("lat", latitude, 90), ("lon", longitude, 180)):
        if value is None or not math.isfinite(value):
            raise InvalidRequestError("lat and lon parameters required")
        if abs(value) > limit:
            raise InvalidRequestError(f"{name} must be between -{limit} and {limit}")


def validate_experience(experience: str) -> None:
    """Reject experience keys outside the four known tiers."""
    if not is_valid_experience(experience):
        raise InvalidRequestError(
            "Invalid experience level", valid_levels=list(EXPERIENCE_PROFILES)
        )


class SwimmingService:
    """Service for swimming score requests.

    Validates the request, assembles conditions from the providers, scores
    the current reading and, when an hourly forecast is available, finds the
    best upcoming windows.
    """

    def __init__(
        self,
        assembler: ReadingAssembler = None,
        scoring_service: ScoringService = None,
        window_service: WindowService = None,
        report_service: ReportService = None,
    ):
        """Initialize service with its collaborators."""
        self.assembler = assembler or ReadingAssembler()
        self.scoring_service = scoring_service or ScoringService()
        self.window_service = window_service or WindowService(self.scoring_service)
        self.report_service = report_service or ReportService()

    async def get_swimming_score(
        self,
        latitude: float,
        longitude: float,
        experience: str = None,
        water_temp: Optional[float] = None,
        has_wetsuit: bool = False,
        include_windows: bool = True,
        include_ai_data: bool = False,
        window_options: WindowOptions = None,
        now: Optional[datetime] = None,
    ) -> SwimmingScoreResponse:
        """
        Compute the swimming score and windows for a location.

        Raises:
            InvalidRequestError: for bad coordinates or an unknown experience key
        """
        experience = experience or settings.default_experience
        validate_coordinates(latitude, longitude)
        validate_experience(experience)
        profile = get_experience_profile(experience)

        conditions = await self.assembler.assemble(
            latitude, longitude,
            water_temp_override=water_temp,
            has_wetsuit=has_wetsuit,
            now=now,
        )
        result = self.scoring_service.compute_score(conditions.reading, experience)

        windows = None
        if include_windows and conditions.hourly is not None:
            windows = self.window_service.find_windows(
                conditions.hourly,
                conditions.water_temp_forecast,
                experience,
                options=window_options or self.default_window_options(),
                has_wetsuit=has_wetsuit,
            )
        elif include_windows:
            logger.info("Hourly forecast unavailable, skipping window detection")

        return self.report_service.build_score_response(
            latitude, longitude, profile, conditions, result,
            windows=windows,
            include_ai_data=include_ai_data,
            now=now,
        )

    @staticmethod
    def default_window_options(daylight_only: bool = False) -> WindowOptions:
        """Window options from settings."""
        return WindowOptions(
            min_score=settings.default_min_score,
            min_duration_minutes=settings.default_min_duration_minutes,
            max_windows=settings.default_max_windows,
            daylight_only=daylight_only,
        )

    def get_experience_levels(self) -> ExperienceLevelsResponse:
        """List the available experience tiers."""
        return self.report_service.experience_levels()

    async def aclose(self) -> None:
        """Close provider HTTP sessions."""
        await self.assembler.weather_client.aclose()
        await self.assembler.marine_client.aclose()
