"""Daily job generation.

Every property lists the weekday its bins go out (`put_bins_out`) and the
weekday they are collected (`collection_day`). On each operational day a
`put_out` and/or `bring_in` job row is materialised for matching
properties. Regeneration is a destructive replace: open (not completed)
jobs for the day are deleted and re-inserted, so edits to a property
take effect on the next run.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import ClientProperty
from app.models.enums import JobType
from app.models.job import Job
from app.services.bin_schedule import get_bin_schedule
from app.services.days import OperationalDay, get_job_generation_day_info, matches_day

logger = logging.getLogger(__name__)

# Leading decimal number of a coordinate, e.g. "-37.81" in "-37.81 S"
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

BIN_FIELDS = (
    "red_freq",
    "red_flip",
    "yellow_freq",
    "yellow_flip",
    "green_freq",
    "green_flip",
)


class PropertyNotFoundError(LookupError):
    """Raised when generating jobs for an unknown property id."""


@dataclass
class GenerationResult:
    day_name: str
    created: int
    removed: int = 0


def parse_lat_lng(value: Optional[str]) -> tuple[Optional[float], Optional[float]]:
    """Parse a "lat,lng" string; each part keeps its leading number, else None."""
    if not value:
        return None, None

    parts = [part.strip() for part in value.split(",")]

    def _to_float(raw: Optional[str]) -> Optional[float]:
        if not raw:
            return None
        match = _LEADING_NUMBER.match(raw)
        if not match:
            return None
        parsed = float(match.group())
        return parsed if math.isfinite(parsed) else None

    lat = _to_float(parts[0]) if len(parts) > 0 else None
    lng = _to_float(parts[1]) if len(parts) > 1 else None
    return lat, lng


def derive_account_id(row: ClientProperty) -> Optional[str]:
    explicit = (row.account_id or "").strip()
    return explicit or None


def derive_client_name(row: ClientProperty) -> str:
    return (row.client_name or "").strip() or (row.company or "").strip() or "Client"


def build_bins_summary(row: ClientProperty, now: Optional[datetime] = None) -> Optional[str]:
    """Comma-separated colours due this week, e.g. "Red, Yellow"."""
    selection = {name: getattr(row, name) for name in BIN_FIELDS}
    schedule = get_bin_schedule(selection, now)
    if not schedule.active_colors:
        return None
    return ", ".join(schedule.active_colors)


def build_jobs_for_property(
    row: ClientProperty,
    day: OperationalDay,
    now: Optional[datetime] = None,
) -> list[dict[str, Any]]:
    """Job rows for `row` on `day`: put-out first, then bring-in."""
    wanted: list[JobType] = []
    if matches_day(row.put_bins_out, day.day_index):
        wanted.append(JobType.PUT_OUT)
    if matches_day(row.collection_day, day.day_index):
        wanted.append(JobType.BRING_IN)

    if not wanted:
        return []

    lat, lng = parse_lat_lng(row.lat_lng)
    base = {
        "account_id": derive_account_id(row),
        "property_id": row.property_id,
        "address": (row.address or "").strip(),
        "lat": lat,
        "lng": lng,
        "bins": build_bins_summary(row, now),
        "notes": row.notes,
        "client_name": derive_client_name(row),
        "photo_path": row.photo_path,
        "assigned_to": row.assigned_to,
        "day_of_week": day.day_name,
        "last_completed_on": None,
    }
    return [{**base, "job_type": job_type.value} for job_type in wanted]


class JobGenerationService:
    """Materialises the day's jobs from `client_list`."""

    def __init__(self, db: AsyncSession, day: Optional[OperationalDay] = None):
        self.db = db
        self.day = day or get_job_generation_day_info()

    async def generate_for_property(self, property_id: str) -> GenerationResult:
        """Replace one property's open jobs for the day.

        When nothing is scheduled for the day the existing rows are left alone.

        Raises:
            PropertyNotFoundError: no `client_list` row for `property_id`
        """
        result = await self.db.execute(
            select(ClientProperty).where(ClientProperty.property_id == property_id)
        )
        client = result.scalar_one_or_none()
        if client is None:
            raise PropertyNotFoundError(property_id)

        rows = build_jobs_for_property(client, self.day)
        if not rows:
            return GenerationResult(day_name=self.day.day_name, created=0)

        deleted = await self.db.execute(
            delete(Job).where(
                Job.property_id == property_id,
                Job.day_of_week == self.day.day_name,
                Job.last_completed_on.is_(None),
            )
        )
        self.db.add_all([Job(**row) for row in rows])
        await self.db.flush()

        logger.info(
            f"[JOBS] Regenerated {len(rows)} job(s) for property {property_id} on {self.day.day_name}"
        )
        return GenerationResult(
            day_name=self.day.day_name,
            created=len(rows),
            removed=deleted.rowcount or 0,
        )

    async def generate_all(self) -> GenerationResult:
        """Replace every open job for the day across all properties."""
        result = await self.db.execute(select(ClientProperty).order_by(ClientProperty.property_id))
        clients = result.scalars().all()

        rows: list[dict[str, Any]] = []
        for client in clients:
            rows.extend(build_jobs_for_property(client, self.day))

        deleted = await self.db.execute(
            delete(Job).where(
                Job.day_of_week == self.day.day_name,
                Job.last_completed_on.is_(None),
            )
        )
        if rows:
            self.db.add_all([Job(**row) for row in rows])
        await self.db.flush()

        logger.info(
            f"[JOBS] Generated {len(rows)} job(s) from {len(clients)} properties for {self.day.day_name}"
        )
        return GenerationResult(
            day_name=self.day.day_name,
            created=len(rows),
            removed=deleted.rowcount or 0,
        )
