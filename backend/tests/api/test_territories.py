"""
Territories API Tests

Tests for /api/territories endpoints.
"""
from rightsdesk.services.territory_service import DEFAULT_TERRITORIES


class TestTerritories:
    """Tests for GET /api/territories"""

    def test_list(self, client, support_headers, territories):
        """Should return the whole catalog."""
        response = client.get("/api/territories", headers=support_headers)

        assert response.status_code == 200
        codes = {t["code"] for t in response.json()}
        assert len(codes) == len(DEFAULT_TERRITORIES)
        assert {"FR", "BE", "US"} <= codes

    def test_by_region(self, client, support_headers, territories):
        """Should group territories by region."""
        response = client.get("/api/territories/by-region", headers=support_headers)

        assert response.status_code == 200
        regions = response.json()["regions"]
        assert "Europe" in regions
        assert {t["code"] for t in regions["Middle East"]} == {"AE", "QA", "SA"}

    def test_requires_identity(self, client, territories):
        assert client.get("/api/territories").status_code == 401
