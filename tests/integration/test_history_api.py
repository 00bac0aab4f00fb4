"""
Integration tests for calculation history.
"""
import pytest
from sqlalchemy import select

from calchub.core.config import settings
from calchub.models.models import HistoryEntry


BMI_ENTRY = {
    "calculator_id": "bmi",
    "values": {"weight": 70, "height": 175},
    "units": {"weight": "kg", "height": "cm"},
}


@pytest.mark.integration
class TestHistory:
    """Test the history endpoints."""

    async def test_requires_auth(self, client):
        """Test history needs a bearer token."""
        response = await client.get("/api/history")
        assert response.status_code in (401, 403)

        response = await client.post("/api/history", json=BMI_ENTRY)
        assert response.status_code in (401, 403)

    async def test_save_entry(self, client, auth_headers):
        """Test results are recomputed and stored with the inputs."""
        response = await client.post("/api/history", json=BMI_ENTRY, headers=auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["calculator_id"] == "bmi"
        assert data["locale"] == "en"
        assert data["inputs"] == {"values": BMI_ENTRY["values"], "units": BMI_ENTRY["units"]}
        assert data["results"]["values"]["bmi"] == pytest.approx(22.9, abs=0.05)
        assert data["results"]["summary"]

    async def test_save_localized(self, client, auth_headers):
        """Test the stored locale is the one the result was formatted in."""
        response = await client.post(
            "/api/history", json={**BMI_ENTRY, "locale": "es-ES"}, headers=auth_headers
        )
        assert response.json()["locale"] == "es"

    async def test_save_invalid_inputs(self, client, auth_headers):
        """Test invalid calculations are not stored."""
        response = await client.post(
            "/api/history", json={"calculator_id": "bmi", "values": {"weight": 0}}, headers=auth_headers
        )
        assert response.status_code == 400

        response = await client.get("/api/history", headers=auth_headers)
        assert response.json() == []

    async def test_save_unknown_calculator(self, client, auth_headers):
        """Test unknown calculators give 404."""
        response = await client.post(
            "/api/history", json={"calculator_id": "nope", "values": {}}, headers=auth_headers
        )
        assert response.status_code == 404

    async def test_filter_by_calculator(self, client, auth_headers):
        """Test history can be filtered by calculator."""
        await client.post("/api/history", json=BMI_ENTRY, headers=auth_headers)
        await client.post(
            "/api/history",
            json={"calculator_id": "transfer-time", "values": {"file_size": 50, "speed": 200}},
            headers=auth_headers,
        )

        response = await client.get("/api/history", headers=auth_headers)
        assert len(response.json()) == 2

        response = await client.get("/api/history", params={"calculator_id": "transfer-time"}, headers=auth_headers)
        data = response.json()
        assert len(data) == 1
        assert data[0]["results"]["formatted"]["transfer_time"] == "37 minutes, 2 seconds"

    async def test_limit(self, client, auth_headers):
        """Test the page size can be limited."""
        for _ in range(3):
            await client.post("/api/history", json=BMI_ENTRY, headers=auth_headers)

        response = await client.get("/api/history", params={"limit": 2}, headers=auth_headers)
        assert len(response.json()) == 2

    async def test_invalid_limit(self, client, auth_headers):
        """Test the limit must be positive."""
        response = await client.get("/api/history", params={"limit": 0}, headers=auth_headers)
        assert response.status_code == 422

    async def test_history_is_per_user(self, client, auth_headers, other_auth_headers):
        """Test users only see their own history."""
        await client.post("/api/history", json=BMI_ENTRY, headers=auth_headers)

        response = await client.get("/api/history", headers=other_auth_headers)
        assert response.json() == []

    async def test_trimmed_to_max_entries(self, client, auth_headers, other_auth_headers, db_session, monkeypatch):
        """Test only the newest entries are kept per user."""
        monkeypatch.setattr(settings, "HISTORY_MAX_ENTRIES", 2)
        await client.post("/api/history", json=BMI_ENTRY, headers=other_auth_headers)
        for _ in range(4):
            response = await client.post("/api/history", json=BMI_ENTRY, headers=auth_headers)
            assert response.status_code == 201

        result = await db_session.execute(select(HistoryEntry).where(HistoryEntry.user_id == "test_user_123"))
        assert len(result.scalars().all()) == 2

        result = await db_session.execute(select(HistoryEntry).where(HistoryEntry.user_id == "other_user_456"))
        assert len(result.scalars().all()) == 1
