"""
Tests for the jobs endpoints.

Generation is pinned to Wednesday so results do not depend on the
current date.
"""

from datetime import date

import pytest
from sqlalchemy import select

from app.models.client import ClientProperty
from app.models.job import Job
from app.services.days import get_job_generation_day_info


@pytest.fixture
async def properties(db, operating_day):
    operating_day("Wednesday")
    db.add_all([
        ClientProperty(
            property_id="p1",
            account_id="acc-1",
            client_name="Jane Smith",
            address="1 Main St",
            put_bins_out="Wed",
            collection_day="Thu",
            assigned_to="staff-a",
            lat_lng="-37.8,144.9",
            red_freq="Weekly",
        ),
        ClientProperty(
            property_id="p2",
            account_id="acc-2",
            client_name="Bob",
            address="2 High St",
            put_bins_out="Tuesday",
            collection_day="Wednesday",
            assigned_to="staff-b",
            green_freq="Weekly",
        ),
    ])
    await db.commit()


class TestCreateJobs:

    async def test_create_for_property(self, client, properties):
        resp = await client.post("/v1/admin/jobs/create", json={"propertyId": "p1"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["day_of_week"] == "Wednesday"
        assert data["created"] == 1

    async def test_rerun_replaces(self, client, db, properties):
        await client.post("/v1/admin/jobs/create", json={"propertyId": "p1"})
        resp = await client.post("/v1/admin/jobs/create", json={"propertyId": "p1"})
        assert resp.json()["removed"] == 1

        rows = (await db.execute(select(Job).where(Job.property_id == "p1"))).scalars().all()
        assert len(rows) == 1

    async def test_unknown_property(self, client, properties):
        resp = await client.post("/v1/admin/jobs/create", json={"propertyId": "missing"})
        assert resp.status_code == 404

    async def test_missing_property_id_is_400(self, client, properties):
        resp = await client.post("/v1/admin/jobs/create", json={})
        assert resp.status_code == 400
        assert "errors" in resp.json()

    async def test_staff_cannot_generate(self, client, login, properties):
        login("staff")
        resp = await client.post("/v1/admin/jobs/create", json={"propertyId": "p1"})
        assert resp.status_code == 403

    async def test_signed_out(self, client, logout, properties):
        logout()
        resp = await client.post("/v1/admin/jobs/generate")
        assert resp.status_code == 401


class TestGenerateAll:

    async def test_generate_all(self, client, properties):
        resp = await client.post("/v1/admin/jobs/generate")
        assert resp.status_code == 200
        data = resp.json()
        assert data["created"] == 2
        assert data["day_of_week"] == "Wednesday"


class TestTodaysJobs:

    async def test_run_sheet(self, client, login, properties):
        await client.post("/v1/admin/jobs/generate")
        login("staff")

        resp = await client.get("/v1/jobs/today")
        assert resp.status_code == 200
        jobs = resp.json()
        assert {(job["property_id"], job["job_type"]) for job in jobs} == {
            ("p1", "put_out"),
            ("p2", "bring_in"),
        }
        p1 = next(job for job in jobs if job["property_id"] == "p1")
        assert p1["bins"] == "Red"
        assert p1["bin_labels"] == ["Garbage"]
        assert p1["lat"] == -37.8
        assert p1["status"] == "scheduled"

    async def test_filter_by_assignee(self, client, properties):
        await client.post("/v1/admin/jobs/generate")
        resp = await client.get("/v1/jobs/today", params={"assigned_to": "staff-b"})
        assert [job["property_id"] for job in resp.json()] == ["p2"]

    async def test_clients_cannot_see_run_sheet(self, client, login, properties):
        login("client")
        resp = await client.get("/v1/jobs/today")
        assert resp.status_code == 403

    async def test_earlier_completions_are_hidden(self, client, db, properties):
        db.add(Job(
            property_id="p1",
            address="1 Main St",
            job_type="put_out",
            day_of_week="Wednesday",
            last_completed_on=date(2020, 1, 1),
            assigned_to="staff-a",
        ))
        await db.commit()
        await client.post("/v1/admin/jobs/generate")

        resp = await client.get("/v1/jobs/today", params={"assigned_to": "staff-a"})
        jobs = resp.json()
        assert len(jobs) == 1
        assert jobs[0]["status"] == "scheduled"
        assert jobs[0]["last_completed_on"] is None

    async def test_completed_today_stays_visible(self, client, db, properties):
        today = get_job_generation_day_info().date
        db.add(Job(
            property_id="p9",
            address="9 Done St",
            job_type="bring_in",
            day_of_week="Wednesday",
            last_completed_on=today,
        ))
        await db.commit()

        jobs = (await client.get("/v1/jobs/today")).json()
        assert [(job["property_id"], job["status"]) for job in jobs] == [("p9", "completed")]

    async def test_weekday_match_ignores_case(self, client, db, properties):
        db.add(Job(property_id="p3", address="3 Low St", job_type="put_out", day_of_week=" wednesday "))
        await db.commit()

        jobs = (await client.get("/v1/jobs/today")).json()
        assert [job["property_id"] for job in jobs] == ["p3"]


class TestJobStatus:

    async def test_update_status(self, client, login, db, properties):
        await client.post("/v1/admin/jobs/generate")
        login("staff")
        jobs = (await client.get("/v1/jobs/today")).json()

        resp = await client.post(
            "/v1/jobs/status",
            json={"jobIds": [job["id"] for job in jobs], "status": "arrived"},
        )
        assert resp.status_code == 200
        assert resp.json() == {"status": "on_site", "updated": 2}

        rows = (await db.execute(select(Job))).scalars().all()
        assert all(row.status == "on_site" and row.arrived_at is not None for row in rows)

    async def test_unknown_status(self, client, properties):
        resp = await client.post("/v1/jobs/status", json={"jobIds": ["x"], "status": "teleported"})
        assert resp.status_code == 400

    async def test_empty_ids(self, client, properties):
        resp = await client.post("/v1/jobs/status", json={"jobIds": [], "status": "done"})
        assert resp.status_code == 400


class TestWeeklyJobs:

    async def test_grouped_by_weekday(self, client, login, db):
        db.add_all([
            Job(property_id="p1", address="1 Main St", job_type="put_out", day_of_week="Tuesday", assigned_to="crew-1"),
            Job(property_id="p1", address="1 Main St", job_type="bring_in", day_of_week="wed", assigned_to="crew-1",
                last_completed_on=date(2025, 3, 5)),
            Job(property_id="p2", address="2 High St", job_type="put_out", day_of_week="Fortnight", assigned_to="crew-1"),
            Job(property_id="p3", address="3 Side St", job_type="put_out", day_of_week=None, assigned_to="crew-1"),
            Job(property_id="p4", address="4 Far Rd", job_type="put_out", day_of_week="Tuesday", assigned_to="crew-2"),
        ])
        await db.commit()
        login("staff", uid="crew-1")

        resp = await client.get("/v1/jobs/week")
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 4
        assert data["remaining"] == 3

        days = {bucket["label"]: bucket["jobs"] for bucket in data["days"]}
        assert [bucket["label"] for bucket in data["days"]] == [
            "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
            "Fortnight", "Unscheduled",
        ]
        assert [job["property_id"] for job in days["Tuesday"]] == ["p1"]
        assert [job["job_type"] for job in days["Wednesday"]] == ["bring_in"]
        assert [job["property_id"] for job in days["Fortnight"]] == ["p2"]
        assert [job["property_id"] for job in days["Unscheduled"]] == ["p3"]

    async def test_clients_cannot_see_week(self, client, login):
        login("client")
        resp = await client.get("/v1/jobs/week")
        assert resp.status_code == 403
