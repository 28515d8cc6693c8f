"""API routes for swimming conditions."""
from typing import Optional
from attrs import evolve
from fastapi import APIRouter, Depends, Query, HTTPException

from swimcast.errors import InvalidRequestError
from swimcast.schemas.swimming import ExperienceLevelsResponse, SwimmingScoreResponse
from swimcast.services.swimming_service import SwimmingService
from swimcast.api.dependencies import get_swimming_service

router = APIRouter(tags=["swimming"])


@router.get("/swimming-score", response_model=SwimmingScoreResponse, response_model_exclude_none=True)
async def get_swimming_score(
    lat: Optional[float] = Query(None, description="Latitude in degrees"),
    lon: Optional[float] = Query(None, description="Longitude in degrees"),
    experience: str = Query("intermediate", description="Swimmer experience level"),
    water_temp: Optional[float] = Query(None, description="Known water temperature (°C)"),
    wetsuit: bool = Query(False, description="Swimmer wears a wetsuit"),
    windows: bool = Query(True, description="Include forecast windows"),
    ai_data: bool = Query(False, description="Include narrative summary"),
    daylight_only: bool = Query(False, description="Only count daylight hours in windows"),
    min_score: Optional[int] = Query(None, ge=0, le=100, description="Minimum hourly score"),
    min_duration: Optional[int] = Query(None, ge=60, description="Minimum window length in minutes"),
    max_windows: Optional[int] = Query(None, ge=1, le=24, description="Maximum windows returned"),
    swimming_service: SwimmingService = Depends(get_swimming_service),
) -> SwimmingScoreResponse:
    """
    Get the swimming score for a location.

    Combines weather and marine data, scores current conditions for the
    experience level and finds the best upcoming swimming windows.
    """
    overrides = {
        "min_score": min_score,
        "min_duration_minutes": min_duration,
        "max_windows": max_windows,
    }
    options = evolve(
        swimming_service.default_window_options(daylight_only),
        **{k: v for k, v in overrides.items() if v is not None},
    )

    try:
        return await swimming_service.get_swimming_score(
            latitude=lat,
            longitude=lon,
            experience=experience,
            water_temp=water_temp,
            has_wetsuit=wetsuit,
            include_windows=windows,
            include_ai_data=ai_data,
            window_options=options,
        )
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())


@router.get("/swimming-levels", response_model=ExperienceLevelsResponse)
async def get_swimming_levels(
    swimming_service: SwimmingService = Depends(get_swimming_service),
) -> ExperienceLevelsResponse:
    """Get the available swimmer experience levels."""
    return swimming_service.get_experience_levels()
