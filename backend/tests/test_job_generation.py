"""Tests for daily job generation."""

from datetime import date, timedelta

import pytest
from sqlalchemy import select

from app.models.client import ClientProperty
from app.models.job import Job
from app.services.bin_schedule import REFERENCE_START, WEEK
from app.services.days import OperationalDay
from app.services.job_generation import (
    JobGenerationService,
    PropertyNotFoundError,
    build_bins_summary,
    build_jobs_for_property,
    derive_account_id,
    derive_client_name,
    parse_lat_lng,
)

TUESDAY = OperationalDay(date=date(2025, 3, 4), day_index=2, day_name="Tuesday")
WEDNESDAY = OperationalDay(date=date(2025, 3, 5), day_index=3, day_name="Wednesday")
ODD_WEEK = REFERENCE_START + WEEK + timedelta(days=1)


def make_client(**overrides) -> ClientProperty:
    fields = dict(
        property_id="p1",
        account_id="acc-1",
        client_name="Jane Smith",
        company="Smith Holdings",
        address="1 Main St",
        put_bins_out="Tuesday",
        collection_day="Wed",
        lat_lng="-37.81, 144.96",
        red_freq="Weekly",
        yellow_freq="Fortnightly",
        yellow_flip="No",
    )
    fields.update(overrides)
    return ClientProperty(**fields)


class TestHelpers:

    def test_parse_lat_lng(self):
        assert parse_lat_lng("-37.81, 144.96") == (-37.81, 144.96)
        assert parse_lat_lng("-37.81") == (-37.81, None)
        assert parse_lat_lng("abc,144.9") == (None, 144.9)
        assert parse_lat_lng("nan,inf") == (None, None)
        assert parse_lat_lng("-37.81 S, 144.96 E") == (-37.81, 144.96)
        assert parse_lat_lng("1e999,.5") == (None, 0.5)
        assert parse_lat_lng(None) == (None, None)

    def test_derive_account_id(self):
        assert derive_account_id(make_client(account_id="  acc-2 ")) == "acc-2"
        assert derive_account_id(make_client(account_id="  ")) is None
        assert derive_account_id(make_client(account_id=None)) is None

    def test_derive_client_name(self):
        assert derive_client_name(make_client()) == "Jane Smith"
        assert derive_client_name(make_client(client_name=" ")) == "Smith Holdings"
        assert derive_client_name(make_client(client_name=None, company=None)) == "Client"

    def test_bins_summary(self):
        assert build_bins_summary(make_client(), ODD_WEEK) == "Red, Yellow"
        assert build_bins_summary(make_client(), ODD_WEEK + WEEK) == "Red"
        assert build_bins_summary(make_client(red_freq=None, yellow_freq=None), ODD_WEEK) is None


class TestBuildJobs:

    def test_put_out_day(self):
        jobs = build_jobs_for_property(make_client(), TUESDAY, ODD_WEEK)
        assert len(jobs) == 1
        job = jobs[0]
        assert job["job_type"] == "put_out"
        assert job["day_of_week"] == "Tuesday"
        assert job["lat"] == -37.81
        assert job["bins"] == "Red, Yellow"
        assert job["client_name"] == "Jane Smith"
        assert job["last_completed_on"] is None

    def test_collection_day(self):
        jobs = build_jobs_for_property(make_client(), WEDNESDAY)
        assert [job["job_type"] for job in jobs] == ["bring_in"]

    def test_both_on_same_day_put_out_first(self):
        client = make_client(put_bins_out="Tue", collection_day="tues")
        jobs = build_jobs_for_property(client, TUESDAY)
        assert [job["job_type"] for job in jobs] == ["put_out", "bring_in"]

    def test_no_matching_day(self):
        assert build_jobs_for_property(make_client(), OperationalDay(date(2025, 3, 7), 5, "Friday")) == []


class TestJobGenerationService:

    async def test_unknown_property(self, db):
        service = JobGenerationService(db, day=TUESDAY)
        with pytest.raises(PropertyNotFoundError):
            await service.generate_for_property("missing")

    async def test_generate_for_property_replaces_open_jobs(self, db):
        db.add(make_client())
        db.add(Job(property_id="p1", address="old", job_type="put_out", day_of_week="Tuesday"))
        db.add(Job(
            property_id="p1",
            address="done",
            job_type="put_out",
            day_of_week="Tuesday",
            last_completed_on=date(2025, 2, 25),
        ))
        await db.commit()

        result = await JobGenerationService(db, day=TUESDAY).generate_for_property("p1")
        await db.commit()

        assert result.created == 1
        assert result.removed == 1
        jobs = (await db.execute(select(Job).order_by(Job.address))).scalars().all()
        assert sorted(job.address for job in jobs) == ["1 Main St", "done"]

    async def test_nothing_scheduled_leaves_rows_alone(self, db):
        db.add(make_client())
        db.add(Job(property_id="p1", address="old", job_type="put_out", day_of_week="Friday"))
        await db.commit()

        friday = OperationalDay(date(2025, 3, 7), 5, "Friday")
        result = await JobGenerationService(db, day=friday).generate_for_property("p1")
        await db.commit()

        assert result.created == 0
        jobs = (await db.execute(select(Job))).scalars().all()
        assert [job.address for job in jobs] == ["old"]

    async def test_generate_all(self, db):
        db.add_all([
            make_client(property_id="p1"),
            make_client(property_id="p2", address="2 Main St", put_bins_out="Mon", collection_day="Tue"),
            make_client(property_id="p3", address="3 Main St", put_bins_out="Fri", collection_day="Sat"),
        ])
        db.add(Job(property_id="p9", address="stale", job_type="bring_in", day_of_week="Tuesday"))
        db.add(Job(property_id="p9", address="monday", job_type="bring_in", day_of_week="Monday"))
        await db.commit()

        result = await JobGenerationService(db, day=TUESDAY).generate_all()
        await db.commit()

        assert result.day_name == "Tuesday"
        assert result.created == 2
        assert result.removed == 1

        jobs = (await db.execute(select(Job).where(Job.day_of_week == "Tuesday"))).scalars().all()
        assert {(job.property_id, job.job_type) for job in jobs} == {("p1", "put_out"), ("p2", "bring_in")}
        other = (await db.execute(select(Job).where(Job.day_of_week == "Monday"))).scalars().all()
        assert len(other) == 1

    async def test_defaults_to_generation_day(self, db, operating_day):
        operating_day("Saturday")
        service = JobGenerationService(db)
        assert service.day.day_name == "Saturday"
