"""Tests for the proof photo preference endpoints."""


class TestProofPreferences:

    async def test_save_then_replace(self, client):
        body = {"propertyId": "p1", "jobType": "put_out", "parity": "odd", "photoPath": "a/first.jpg"}
        resp = await client.post("/v1/admin/proof-preferences", json=body)
        assert resp.status_code == 200
        first = resp.json()["preference"]
        assert first["photo_path"] == "a/first.jpg"

        resp = await client.post("/v1/admin/proof-preferences", json={**body, "photoPath": "a/second.jpg"})
        second = resp.json()["preference"]
        assert second["id"] == first["id"]
        assert second["photo_path"] == "a/second.jpg"

    async def test_property_required(self, client):
        resp = await client.post(
            "/v1/admin/proof-preferences",
            json={"jobType": "bring_in", "parity": "even", "photoPath": "x.jpg"},
        )
        assert resp.status_code == 400

    async def test_invalid_parity(self, client):
        resp = await client.post(
            "/v1/admin/proof-preferences",
            json={"propertyId": "p1", "jobType": "bring_in", "parity": "third", "photoPath": "x.jpg"},
        )
        assert resp.status_code == 400

    async def test_list_filtered(self, client):
        for property_id in ("p1", "p2"):
            await client.post(
                "/v1/admin/proof-preferences",
                json={"propertyId": property_id, "jobType": "put_out", "parity": "odd", "photoPath": "x.jpg"},
            )

        resp = await client.get("/v1/admin/proof-preferences")
        assert len(resp.json()) == 2

        resp = await client.get("/v1/admin/proof-preferences", params={"property_id": ["p2"]})
        assert [row["property_id"] for row in resp.json()] == ["p2"]

    async def test_requires_admin(self, client, login):
        login("staff")
        resp = await client.get("/v1/admin/proof-preferences")
        assert resp.status_code == 403
