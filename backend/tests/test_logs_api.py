"""Tests for job completion logs and admin log maintenance."""

import uuid
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import func, select

from app.models.job import Job
from app.models.log import JobLog
from app.routers import logs as logs_module
from app.services.storage import ProofStorageService, StorageProviderInterface


class FakeStorageProvider(StorageProviderInterface):
    """Records signing requests instead of calling a bucket."""

    def __init__(self):
        self.uploads = []
        self.downloads = []

    async def generate_presigned_upload_url(self, object_path, mime_type, ttl_seconds):
        self.uploads.append((object_path, mime_type, ttl_seconds))
        return f"https://signed.test/put/{object_path}", datetime.utcnow() + timedelta(seconds=ttl_seconds)

    async def generate_presigned_download_url(self, object_path, ttl_seconds):
        self.downloads.append(object_path)
        return f"https://signed.test/get/{object_path}"


@pytest.fixture
def storage(monkeypatch):
    provider = FakeStorageProvider()
    monkeypatch.setattr(logs_module, "get_storage_service", lambda: ProofStorageService(provider))
    return provider


@pytest.fixture
async def job(db):
    row = Job(
        property_id="p1",
        address="1 Main St",
        client_name="Jane Smith",
        job_type="bring_in",
        bins="Red, Yellow",
        day_of_week="Tuesday",
    )
    db.add(row)
    await db.commit()
    return row


class TestCreateLog:

    async def test_completes_job(self, client, login, db, job):
        login("staff")
        resp = await client.post(
            "/v1/logs",
            json={
                "jobId": str(job.id),
                "notes": "Gate was locked",
                "doneOn": "2025-03-04",
                "gpsLat": -37.81,
                "gpsLng": 144.96,
                "gpsAcc": 8.5,
            },
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["task_type"] == "bring_in"
        assert data["bins"] == "Red, Yellow"
        assert data["week_label"] == "Week-10"
        assert data["parity"] == "even"
        assert data["photo_path"] == "jane-smith/1-main-st/2025/Week-10/Bring In.jpg"
        assert data["proof_path"] == data["photo_path"]

        refreshed = await db.get(Job, job.id, populate_existing=True)
        assert refreshed.last_completed_on == date(2025, 3, 4)
        assert refreshed.status == "completed"
        assert refreshed.completed_at is not None

    async def test_keeps_uploaded_photo_path(self, client, job):
        resp = await client.post(
            "/v1/logs",
            json={"jobId": str(job.id), "photoPath": "custom/photo.png", "doneOn": "2025-03-04"},
        )
        assert resp.json()["photo_path"] == "custom/photo.png"

    async def test_unknown_job(self, client):
        resp = await client.post("/v1/logs", json={"jobId": str(uuid.uuid4())})
        assert resp.status_code == 404

    async def test_invalid_gps(self, client, job):
        resp = await client.post("/v1/logs", json={"jobId": str(job.id), "gpsLat": 123})
        assert resp.status_code == 400

    async def test_clients_cannot_log(self, client, login, job):
        login("client")
        resp = await client.post("/v1/logs", json={"jobId": str(job.id)})
        assert resp.status_code == 403


class TestProofUpload:

    async def test_presigned_upload(self, client, storage, job):
        resp = await client.post(
            "/v1/logs/proof-upload",
            json={"jobId": str(job.id), "mimeType": "image/jpeg", "fileSizeBytes": 1024},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["object_path"].startswith("jane-smith/1-main-st/")
        assert data["object_path"].endswith("/Bring In.jpg")
        assert data["upload_url"] == f"https://signed.test/put/{data['object_path']}"
        assert storage.uploads[0][1] == "image/jpeg"

    async def test_rejects_non_images(self, client, storage, job):
        resp = await client.post(
            "/v1/logs/proof-upload",
            json={"jobId": str(job.id), "mimeType": "application/pdf", "fileSizeBytes": 1024},
        )
        assert resp.status_code == 400
        assert storage.uploads == []

    async def test_rejects_large_files(self, client, storage, job):
        resp = await client.post(
            "/v1/logs/proof-upload",
            json={"jobId": str(job.id), "fileSizeBytes": 50 * 1024 * 1024},
        )
        assert resp.status_code == 400


class TestAdminLogs:

    async def _add_log(self, db, **fields):
        log = JobLog(client_name="Jane", address="1 Main St", task_type="put_out", **fields)
        db.add(log)
        await db.commit()
        return log

    async def test_list_logs(self, client, db):
        await self._add_log(db, done_on=date(2025, 3, 4))
        await self._add_log(db, done_on=date(2025, 3, 10))

        resp = await client.get("/v1/admin/logs")
        assert resp.status_code == 200
        labels = {log["week_label"] for log in resp.json()}
        assert labels == {"Week-10", "Week-11"}

    async def test_list_requires_admin(self, client, login):
        login("staff")
        resp = await client.get("/v1/admin/logs")
        assert resp.status_code == 403

    async def test_photo_url(self, client, db, storage):
        log = await self._add_log(db, done_on=date(2025, 3, 4))
        resp = await client.get(f"/v1/admin/logs/{log.id}/photo")
        assert resp.status_code == 200
        assert resp.json()["object_path"] == "jane/1-main-st/2025/Week-10/Put Out.jpg"
        assert storage.downloads == ["jane/1-main-st/2025/Week-10/Put Out.jpg"]

    async def test_photo_missing_log(self, client, storage):
        resp = await client.get("/v1/admin/logs/999/photo")
        assert resp.status_code == 404

    async def test_purge_old(self, client, db):
        await self._add_log(db, created_at=datetime.utcnow() - timedelta(weeks=7))
        await self._add_log(db, created_at=datetime.utcnow() - timedelta(weeks=5))

        resp = await client.post("/v1/admin/logs/purge-old")
        assert resp.status_code == 200
        assert resp.json() == {"success": True, "removed": 1}
        assert await db.scalar(select(func.count()).select_from(JobLog)) == 1

    async def test_reset_today(self, client, db):
        await self._add_log(db, created_at=datetime.utcnow() - timedelta(days=2))
        await self._add_log(db)
        await self._add_log(db)

        resp = await client.post("/v1/admin/logs/reset-today")
        assert resp.json() == {"removed": 2}

    async def test_undo_latest(self, client, db):
        await self._add_log(db)
        latest = await self._add_log(db)

        resp = await client.post("/v1/admin/logs/undo-latest")
        data = resp.json()
        assert data["removed"] is True
        assert data["removed_id"] == latest.id
        assert await db.scalar(select(func.count()).select_from(JobLog)) == 1

    async def test_undo_with_nothing_today(self, client, db):
        await self._add_log(db, created_at=datetime.utcnow() - timedelta(days=2))
        resp = await client.post("/v1/admin/logs/undo-latest")
        assert resp.json()["removed"] is False
        assert resp.json()["message"] == "No changes recorded today to undo."
