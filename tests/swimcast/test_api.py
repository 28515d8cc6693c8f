"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient

from swimcast.api.dependencies import get_swimming_service
from swimcast.main import app
from swimcast.models.reading import SOURCE_MARINE, SOURCE_USER
from swimcast.services.reading_assembler import ReadingAssembler
from swimcast.services.swimming_service import SwimmingService

from conftest import FakeMarineClient, FakeWeatherClient

DUBLIN = {"lat": 53.3, "lon": -6.2}


@pytest.fixture
def client(good_weather, good_marine):
    service = SwimmingService(
        assembler=ReadingAssembler(FakeWeatherClient(good_weather), FakeMarineClient(good_marine))
    )
    app.dependency_overrides[get_swimming_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestSwimmingScoreEndpoint:
    """Tests for GET /swimming-score."""

    def test_score_for_location(self, client):
        """Test a complete response for a valid request."""
        response = client.get("/swimming-score", params=DUBLIN)

        assert response.status_code == 200
        body = response.json()
        assert body["location"] == {"lat": 53.3, "lon": -6.2}
        assert body["current"]["score"] == 95
        assert body["current"]["rating"] == "Excellent"
        assert body["data_sources"]["water_temp"] == SOURCE_MARINE
        assert body["safety"]["level"] == "safe"
        assert body["forecast_available"] is True
        assert body["best_window"] == body["windows"][0]
        assert "ai_data" not in body
        assert "warnings" not in body
        assert body["tides"]["suggested_sources"] == ["admiralty.co.uk", "worldtides.info"]

    def test_unknown_experience(self, client):
        """Test an unknown experience key is rejected with the valid keys."""
        response = client.get("/swimming-score", params={**DUBLIN, "experience": "olympian"})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "Invalid experience level"
        assert detail["valid_levels"] == [
            "beginner", "intermediate", "experienced", "cold_water_swimmer",
        ]

    def test_missing_coordinates(self, client):
        """Test a request without coordinates is rejected."""
        response = client.get("/swimming-score", params={"lat": 53.3})

        assert response.status_code == 400
        assert response.json()["detail"] == {"error": "lat and lon parameters required"}

    def test_out_of_range_latitude(self, client):
        """Test latitudes beyond the poles are rejected."""
        response = client.get("/swimming-score", params={"lat": 95, "lon": -6.2})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "lat must be between -90 and 90"

    def test_water_temp_override_and_wetsuit(self, client):
        """Test a supplied water temperature is used and attributed."""
        response = client.get(
            "/swimming-score",
            params={**DUBLIN, "water_temp": 13, "wetsuit": "true"},
        )

        body = response.json()
        assert body["conditions"]["water_temp"]["value"] == 13
        assert body["data_sources"]["water_temp"] == SOURCE_USER
        assert body["gear"]["has_wetsuit"] is True

    def test_windows_can_be_skipped(self, client):
        """Test windows are omitted when not requested."""
        body = client.get("/swimming-score", params={**DUBLIN, "windows": "false"}).json()

        assert "windows" not in body
        assert "best_window" not in body

    def test_window_options(self, client):
        """Test an unreachable minimum score yields no windows."""
        body = client.get("/swimming-score", params={**DUBLIN, "min_score": 99}).json()

        assert "windows" not in body
        assert body["forecast_available"] is True

    def test_minimum_duration_validated(self, client):
        """Test windows shorter than one hour cannot be requested."""
        response = client.get("/swimming-score", params={**DUBLIN, "min_duration": 30})

        assert response.status_code == 422

    def test_narrative_summary(self, client):
        """Test the summary is included on request."""
        body = client.get("/swimming-score", params={**DUBLIN, "ai_data": "true"}).json()

        assert body["ai_data"]["decision"] == "yes"
        assert body["ai_data"]["window"]["start"] == "08:00"


class TestOtherEndpoints:
    """Tests for the levels listing and service endpoints."""

    def test_swimming_levels(self, client):
        """Test the four experience tiers are listed."""
        response = client.get("/swimming-levels")

        assert response.status_code == 200
        assert len(response.json()["levels"]) == 4

    def test_health(self, client):
        """Test the health check."""
        assert client.get("/health").json() == {"status": "healthy"}

    def test_root_lists_endpoints(self, client):
        """Test the root describes the service."""
        body = client.get("/").json()

        assert body["name"] == "Swimcast API"
        assert "/swimming-score" in body["endpoints"]
