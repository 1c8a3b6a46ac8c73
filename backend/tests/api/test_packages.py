"""
Packages API Tests

Tests for /api/packages endpoints.
"""
from datetime import timedelta
from uuid import uuid4

from conftest import LEAGUE_LIGUE_1, SPORT_FOOTBALL


def package_body(broadcaster_id, event_date, **overrides):
    body = {
        "broadcasterId": str(broadcaster_id),
        "name": "Ligue 1 2025/26",
        "scopeType": "season",
        "sportId": str(SPORT_FOOTBALL),
        "leagueId": str(LEAGUE_LIGUE_1),
        "season": "2025/26",
        "startAt": (event_date - timedelta(days=30)).isoformat(),
        "endAt": (event_date + timedelta(days=300)).isoformat(),
        "territoriesDefault": ["fr", "BE"],
    }
    body.update(overrides)
    return body


class TestCreatePackage:
    """Tests for POST /api/packages"""

    def test_create_draft(self, client, admin_headers, sample_broadcaster, territories, event_date):
        """Should create a draft package with normalized territories."""
        response = client.post("/api/packages", json=package_body(sample_broadcaster.id, event_date),
                               headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "draft"
        assert data["territories_default"] == ["FR", "BE"]
        assert data["is_exclusive_default"] is False

    def test_inverted_window(self, client, admin_headers, sample_broadcaster, territories, event_date):
        """Should return 400 when start_at is after end_at."""
        body = package_body(
            sample_broadcaster.id, event_date,
            startAt=(event_date + timedelta(days=10)).isoformat(),
            endAt=event_date.isoformat(),
        )
        response = client.post("/api/packages", json=body, headers=admin_headers)
        assert response.status_code == 400

    def test_season_requires_league(self, client, admin_headers, sample_broadcaster, territories, event_date):
        """Should return 400 for a season package without a league."""
        body = package_body(sample_broadcaster.id, event_date, leagueId=None)
        response = client.post("/api/packages", json=body, headers=admin_headers)

        assert response.status_code == 400
        assert "league_id" in response.json()["detail"]

    def test_unknown_broadcaster(self, client, admin_headers, territories, event_date):
        response = client.post("/api/packages", json=package_body(uuid4(), event_date), headers=admin_headers)
        assert response.status_code == 404


class TestPackageLifecycle:
    """Tests for activate, expire and delete"""

    def test_activate_then_expire(self, client, admin_headers, sample_broadcaster, territories, event_date):
        """Should move draft -> active -> expired and refuse going back."""
        created = client.post("/api/packages", json=package_body(sample_broadcaster.id, event_date),
                              headers=admin_headers).json()

        response = client.post(f"/api/packages/{created['id']}/activate", headers=admin_headers)
        assert response.json()["status"] == "active"

        response = client.post(f"/api/packages/{created['id']}/expire", headers=admin_headers)
        assert response.json()["status"] == "expired"

        response = client.post(f"/api/packages/{created['id']}/activate", headers=admin_headers)
        assert response.status_code == 409

    def test_expired_cannot_be_edited(self, client, admin_headers, sample_package):
        client.post(f"/api/packages/{sample_package.id}/expire", headers=admin_headers)

        response = client.patch(f"/api/packages/{sample_package.id}", json={"name": "Renamed"},
                                headers=admin_headers)
        assert response.status_code == 400

    def test_delete_draft_only(self, client, admin_headers, sample_broadcaster, sample_package, event_date):
        """Should delete drafts and refuse active packages."""
        created = client.post("/api/packages", json=package_body(sample_broadcaster.id, event_date),
                              headers=admin_headers).json()

        assert client.delete(f"/api/packages/{created['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/packages/{created['id']}", headers=admin_headers).status_code == 404
        assert client.delete(f"/api/packages/{sample_package.id}", headers=admin_headers).status_code == 400


class TestListPackages:
    """Tests for GET /api/packages"""

    def test_filters(self, client, support_headers, sample_package, other_broadcaster):
        """Should filter by broadcaster, status and scope."""
        response = client.get(
            "/api/packages",
            params={"broadcasterId": str(sample_package.broadcaster_id), "status": "active", "scopeType": "season"},
            headers=support_headers,
        )
        assert response.json()["total"] == 1

        response = client.get("/api/packages", params={"broadcasterId": str(other_broadcaster.id)},
                              headers=support_headers)
        assert response.json()["total"] == 0
