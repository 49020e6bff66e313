"""Tests for dashboard, recent activity and report endpoints."""

import datetime

from httpx import AsyncClient

from factories import API, future, inmate_payload


class TestDashboardAPI:
    """Tests for dashboard endpoints"""

    async def test_stats(self, client: AsyncClient, warden_headers):
        today = datetime.date.today().isoformat()
        inmate = (
            await client.post(
                f"{API}/inmates",
                json=inmate_payload(admissionDate=today),
                headers=warden_headers,
            )
        ).json()["inmate"]
        await client.post(
            f"{API}/paroles",
            json={"inmate": inmate["id"], "hearingDate": future().isoformat()},
            headers=warden_headers,
        )
        await client.post(
            f"{API}/reports/inmate-info/{inmate['id']}", headers=warden_headers
        )

        response = await client.get(f"{API}/dashboard/stats", headers=warden_headers)

        assert response.status_code == 200
        assert response.json() == {
            "totalInmates": 1,
            "inRehabilitation": 0,
            "upcomingParole": 1,
            "recentReports": 1,
        }

    async def test_analytics(self, client: AsyncClient, warden_headers):
        today = datetime.date.today()
        await client.post(
            f"{API}/inmates",
            json=inmate_payload(admissionDate=today.isoformat()),
            headers=warden_headers,
        )
        released = (
            await client.post(
                f"{API}/inmates",
                json=inmate_payload(admissionDate=today.isoformat()),
                headers=warden_headers,
            )
        ).json()["inmate"]
        await client.delete(f"{API}/inmates/{released['id']}", headers=warden_headers)

        response = await client.get(
            f"{API}/dashboard/analytics", headers=warden_headers
        )

        data = response.json()
        assert len(data["monthlyInmateStats"]) == 6
        current = data["monthlyInmateStats"][-1]
        assert current["month"] == today.strftime("%Y-%m")
        assert current["admitted"] == 2
        assert current["released"] == 1
        assert data["inmateDistribution"] == {
            "incarceratedCount": 1,
            "releasedCount": 1,
            "paroleCount": 0,
        }

    async def test_recent_activities(self, client: AsyncClient, warden_headers):
        for _ in range(2):
            await client.post(
                f"{API}/inmates", json=inmate_payload(), headers=warden_headers
            )

        response = await client.get(f"{API}/recent-activities", headers=warden_headers)

        entries = response.json()
        assert len(entries) == 1
        assert entries[0]["activityType"] == "INMATE_ADDED"
        assert entries[0]["count"] == 2
        assert entries[0]["message"].startswith("2 inmates were added to the system (")


class TestReportsAPI:
    """Tests for /reports endpoints"""

    async def test_generate_and_list(self, client: AsyncClient, inmate, admin_headers):
        info = await client.post(
            f"{API}/reports/inmate-info/{inmate.id}", headers=admin_headers
        )
        assert info.status_code == 201
        assert info.json()["message"] == "Inmate Info Report Generated & Saved"
        assert "evaluation" not in info.json()["report"]["details"]

        rehab = await client.post(
            f"{API}/reports/rehab-status/{inmate.id}", headers=admin_headers
        )
        assert rehab.json()["message"] == (
            "Rehabilitation Status Report Generated & Saved"
        )
        report = rehab.json()["report"]
        assert report["type"] == "Rehabilitation Status"
        assert report["details"]["evaluation"]["score"] == 0.0

        listing = await client.get(f"{API}/reports", headers=admin_headers)
        assert len(listing.json()) == 2

    async def test_report_for_missing_inmate(self, client: AsyncClient, admin_headers):
        response = await client.post(
            f"{API}/reports/rehab-status/404", headers=admin_headers
        )
        assert response.status_code == 404
