"""Tests for inmate registry endpoints."""

from httpx import AsyncClient

from factories import API, future, inmate_payload


async def register(client: AsyncClient, headers: dict, **overrides) -> dict:
    response = await client.post(
        f"{API}/inmates", json=inmate_payload(**overrides), headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestInmatesAPI:
    """Tests for /inmates endpoints"""

    async def test_register(self, client: AsyncClient, warden_headers):
        data = await register(client, warden_headers)

        assert data["message"] == "Inmate registered successfully"
        assert data["inmate"]["inmateID"] == "INM001"
        assert data["inmate"]["status"] == "Incarcerated"
        assert data["inmate"]["releaseDate"] == "2026-01-15"
        assert data["nextInmateID"] == "INM002"

    async def test_register_rejects_missing_fields(
        self, client: AsyncClient, warden_headers
    ):
        payload = inmate_payload()
        del payload["crimeDetails"]

        response = await client.post(
            f"{API}/inmates", json=payload, headers=warden_headers
        )

        assert response.status_code == 400
        assert "crimeDetails" in response.json()["message"]

    async def test_register_rejects_bad_sentence(
        self, client: AsyncClient, warden_headers
    ):
        response = await client.post(
            f"{API}/inmates",
            json=inmate_payload(sentenceDuration=0),
            headers=warden_headers,
        )
        assert response.status_code == 400

    async def test_next_id(self, client: AsyncClient, warden_headers):
        response = await client.get(f"{API}/inmates/next-id", headers=warden_headers)
        assert response.json() == {"nextInmateID": "INM001"}

    async def test_list_paginates_by_five(self, client: AsyncClient, warden_headers):
        for index in range(7):
            await register(client, warden_headers, firstName=f"Inmate{index}")

        response = await client.get(f"{API}/inmates?page=2", headers=warden_headers)

        data = response.json()
        assert data["totalInmates"] == 7
        assert data["totalPages"] == 2
        assert data["currentPage"] == 2
        assert [item["inmateID"] for item in data["inmates"]] == ["INM006", "INM007"]

    async def test_get_missing(self, client: AsyncClient, warden_headers):
        response = await client.get(f"{API}/inmates/999", headers=warden_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Inmate not found."

    async def test_search(self, client: AsyncClient, warden_headers):
        await register(client, warden_headers)
        await register(client, warden_headers, firstName="Jane", lastName="Roe")

        response = await client.get(
            f"{API}/inmates/search?query=roe", headers=warden_headers
        )

        assert response.status_code == 200
        assert [item["inmateID"] for item in response.json()] == ["INM002"]

    async def test_search_requires_query(self, client: AsyncClient, warden_headers):
        response = await client.get(f"{API}/inmates/search", headers=warden_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required."

    async def test_search_without_results(self, client: AsyncClient, warden_headers):
        response = await client.get(
            f"{API}/inmates/search?query=nobody", headers=warden_headers
        )
        assert response.status_code == 404
        assert response.json()["message"] == "No inmates found."

    async def test_update(self, client: AsyncClient, warden_headers):
        inmate = (await register(client, warden_headers))["inmate"]

        response = await client.put(
            f"{API}/inmates/{inmate['id']}",
            json={"assignedCell": "D-4", "sentenceDuration": 36},
            headers=warden_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Inmate updated successfully"
        assert data["inmate"]["assignedCell"] == "D-4"
        assert data["inmate"]["releaseDate"] == "2027-01-15"

    async def test_update_to_parole_without_application(
        self, client: AsyncClient, warden_headers
    ):
        inmate = (await register(client, warden_headers))["inmate"]

        response = await client.put(
            f"{API}/inmates/{inmate['id']}",
            json={"status": "Parole"},
            headers=warden_headers,
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_update_already_paroled(self, client: AsyncClient, warden_headers):
        inmate = (await register(client, warden_headers))["inmate"]
        parole = (
            await client.post(
                f"{API}/paroles",
                json={"inmate": inmate["id"], "hearingDate": future().isoformat()},
                headers=warden_headers,
            )
        ).json()["parole"]
        await client.put(
            f"{API}/paroles/{parole['id']}",
            json={"status": "Approved"},
            headers=warden_headers,
        )

        response = await client.put(
            f"{API}/inmates/{inmate['id']}",
            json={"status": "Parole"},
            headers=warden_headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Inmate is already on parole."

    async def test_release(self, client: AsyncClient, warden_headers):
        inmate = (await register(client, warden_headers))["inmate"]

        response = await client.delete(
            f"{API}/inmates/{inmate['id']}", headers=warden_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Inmate released successfully"
        assert response.json()["inmate"]["status"] == "Released"

        again = await client.delete(
            f"{API}/inmates/{inmate['id']}", headers=warden_headers
        )
        assert again.status_code == 400

    async def test_report_json(self, client: AsyncClient, warden_headers):
        inmate = (await register(client, warden_headers))["inmate"]

        response = await client.get(
            f"{API}/inmates/report/{inmate['id']}", headers=warden_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["inmate"]["inmateID"] == "INM001"
        assert data["workPrograms"] == []
        assert data["evaluation"]["status"] == "Needs More Rehabilitation"

    async def test_report_pdf(self, client: AsyncClient, warden_headers):
        inmate = (await register(client, warden_headers))["inmate"]

        for pdf_type in ("information", "rehabilitation"):
            response = await client.get(
                f"{API}/inmates/report/{inmate['id']}/pdf/{pdf_type}",
                headers=warden_headers,
            )
            assert response.status_code == 200
            assert response.headers["content-type"] == "application/pdf"
            assert response.content.startswith(b"%PDF")
            assert f"INM001_{pdf_type}_report.pdf" in (
                response.headers["content-disposition"]
            )

    async def test_report_pdf_unknown_type(self, client: AsyncClient, warden_headers):
        inmate = (await register(client, warden_headers))["inmate"]
        response = await client.get(
            f"{API}/inmates/report/{inmate['id']}/pdf/summary", headers=warden_headers
        )
        assert response.status_code == 400

    async def test_repeated_parole_update_leaves_feed_alone(
        self, client: AsyncClient, warden_headers
    ):
        inmate = (await register(client, warden_headers))["inmate"]
        parole = (
            await client.post(
                f"{API}/paroles",
                json={"inmate": inmate["id"], "hearingDate": future().isoformat()},
                headers=warden_headers,
            )
        ).json()["parole"]
        await client.put(
            f"{API}/paroles/{parole['id']}",
            json={"status": "Approved"},
            headers=warden_headers,
        )

        for _ in range(3):
            response = await client.put(
                f"{API}/inmates/{inmate['id']}",
                json={"status": "Parole"},
                headers=warden_headers,
            )
            assert response.json()["message"] == "Inmate is already on parole."

        feed = (
            await client.get(f"{API}/recent-activities", headers=warden_headers)
        ).json()
        assert "INMATE_UPDATED" not in [entry["activityType"] for entry in feed]
