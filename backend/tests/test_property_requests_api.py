"""Tests for property request submission and approval."""

import json
import uuid

import httpx
import pytest
from sqlalchemy import select

from app.main import app as fastapi_app
from app.models.client import ClientProperty
from app.models.property_request import PropertyRequest
from app.services.request_forwarder import RequestForwarder, get_request_forwarder

REQUEST_BODY = {
    "accountId": "acc-1",
    "accountName": "Smith Co",
    "requesterEmail": "jane@example.com",
    "addressLine1": "12 Main St",
    "addressLine2": "Unit 3",
    "suburb": "Richmond",
    "state": "VIC",
    "postalCode": "3121",
    "instructions": "Side gate",
}


@pytest.fixture
def forwarded():
    """Install a forwarder backed by a mock webhook; returns captured bodies."""
    captured = {"bodies": [], "status": 200}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["bodies"].append(json.loads(request.content))
        return httpx.Response(captured["status"])

    forwarder = RequestForwarder(url="https://hooks.test/requests", transport=httpx.MockTransport(handler))
    fastapi_app.dependency_overrides[get_request_forwarder] = lambda: forwarder
    return captured


class TestSubmit:

    async def test_submit_and_forward(self, client, login, db, forwarded):
        login("client", uid="client-1", email="owner@example.com")
        resp = await client.post("/v1/property-requests", json=REQUEST_BODY)

        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "pending"
        assert data["message"] == "Property request received."

        row = (await db.execute(select(PropertyRequest))).scalar_one()
        assert row.account_id == "acc-1"
        assert row.submitted_by_user_id == "client-1"
        assert row.submitted_by_email == "owner@example.com"
        assert row.requester_email == "jane@example.com"

        body = forwarded["bodies"][0]
        assert body["requestId"] == str(row.id)
        assert body["addressLine1"] == "12 Main St"
        assert "submittedAt" in body

    async def test_anonymous_submission(self, client, logout, db, forwarded):
        logout()
        body = {**REQUEST_BODY}
        body.pop("requesterEmail")
        resp = await client.post("/v1/property-requests", json=body)

        assert resp.status_code == 201
        row = (await db.execute(select(PropertyRequest))).scalar_one()
        assert row.submitted_by_user_id is None
        assert row.requester_email is None

    async def test_forward_failure_is_202(self, client, db, forwarded):
        forwarded["status"] = 503
        resp = await client.post("/v1/property-requests", json=REQUEST_BODY)

        assert resp.status_code == 202
        assert resp.json()["message"].startswith("Request captured")
        assert (await db.execute(select(PropertyRequest))).scalar_one().status == "pending"

    async def test_no_webhook_configured(self, client):
        fastapi_app.dependency_overrides[get_request_forwarder] = lambda: RequestForwarder(url=None)
        resp = await client.post("/v1/property-requests", json=REQUEST_BODY)
        assert resp.status_code == 201

    @pytest.mark.parametrize(
        "changes",
        [
            {"accountId": ""},
            {"addressLine1": ""},
            {"requesterEmail": "not-an-email"},
        ],
    )
    async def test_validation(self, client, forwarded, changes):
        resp = await client.post("/v1/property-requests", json={**REQUEST_BODY, **changes})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Please review the form and try again."
        assert forwarded["bodies"] == []


class TestApprove:

    async def _pending(self, db, **fields) -> PropertyRequest:
        values = dict(
            account_id="acc-1",
            account_name="Smith Co",
            requester_email="jane@example.com",
            address_line1=" 12 Main St ",
            address_line2="",
            suburb="Richmond",
            postal_code="3121",
            instructions="Side gate",
        )
        values.update(fields)
        request = PropertyRequest(**values)
        db.add(request)
        await db.commit()
        return request

    async def test_approve_creates_client(self, client, db):
        request = await self._pending(db)

        resp = await client.post(f"/v1/property-requests/{request.id}/approve")
        assert resp.status_code == 200
        data = resp.json()
        property_id = data["property_id"]
        assert data["request"]["status"] == "approved"
        assert data["request"]["approved_by"] == "admin-uid"
        assert data["request"]["client_property_id"] == property_id

        created = await db.get(ClientProperty, property_id)
        assert created.address == "12 Main St, Richmond, 3121"
        assert created.account_id == "acc-1"
        assert created.client_name == "Smith Co"
        assert created.notes == "Side gate"
        assert created.email == "jane@example.com"

    async def test_property_id_from_body(self, client, db):
        request = await self._pending(db)
        resp = await client.post(
            f"/v1/property-requests/{request.id}/approve",
            json={"propertyId": "custom-id"},
        )
        assert resp.json()["property_id"] == "custom-id"

    async def test_reuses_linked_property_id(self, client, db):
        request = await self._pending(db, client_property_id="linked-1")
        resp = await client.post(f"/v1/property-requests/{request.id}/approve")
        assert resp.json()["property_id"] == "linked-1"

    async def test_client_name_falls_back_to_account(self, client, db):
        request = await self._pending(db, account_name=None)
        resp = await client.post(f"/v1/property-requests/{request.id}/approve")
        created = await db.get(ClientProperty, resp.json()["property_id"])
        assert created.client_name == "acc-1"

    async def test_already_processed(self, client, db):
        request = await self._pending(db, status="approved")
        resp = await client.post(f"/v1/property-requests/{request.id}/approve")
        assert resp.status_code == 409

    async def test_missing_account(self, client, db):
        request = await self._pending(db, account_id=None)
        resp = await client.post(f"/v1/property-requests/{request.id}/approve")
        assert resp.status_code == 400

    async def test_not_found(self, client):
        resp = await client.post(f"/v1/property-requests/{uuid.uuid4()}/approve")
        assert resp.status_code == 404

    async def test_requires_admin(self, client, login, db):
        request = await self._pending(db)
        login("staff")
        resp = await client.post(f"/v1/property-requests/{request.id}/approve")
        assert resp.status_code == 403


class TestList:

    async def test_list_and_filter(self, client, db):
        db.add_all([
            PropertyRequest(account_id="a", address_line1="1 St"),
            PropertyRequest(account_id="b", address_line1="2 St", status="approved"),
        ])
        await db.commit()

        resp = await client.get("/v1/admin/property-requests")
        assert len(resp.json()) == 2

        resp = await client.get("/v1/admin/property-requests", params={"status": "pending"})
        assert [row["account_id"] for row in resp.json()] == ["a"]
