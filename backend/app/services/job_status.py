"""Job normalisation and run progress updates."""

import logging
import math
import re
import uuid
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import JobProgressStatus, JobType
from app.models.job import Job
from app.services.days import DAY_NAMES, OperationalDay

logger = logging.getLogger(__name__)

STATUS_NORMALISATION: dict[str, JobProgressStatus] = {
    "scheduled": JobProgressStatus.SCHEDULED,
    "pending": JobProgressStatus.SCHEDULED,
    "queued": JobProgressStatus.SCHEDULED,
    "unstarted": JobProgressStatus.SCHEDULED,
    "en_route": JobProgressStatus.EN_ROUTE,
    "enroute": JobProgressStatus.EN_ROUTE,
    "travelling": JobProgressStatus.EN_ROUTE,
    "transit": JobProgressStatus.EN_ROUTE,
    "in_transit": JobProgressStatus.EN_ROUTE,
    "inprogress": JobProgressStatus.EN_ROUTE,
    "in-progress": JobProgressStatus.EN_ROUTE,
    "in_progress": JobProgressStatus.EN_ROUTE,
    "started": JobProgressStatus.EN_ROUTE,
    "driving": JobProgressStatus.EN_ROUTE,
    "on_site": JobProgressStatus.ON_SITE,
    "onsite": JobProgressStatus.ON_SITE,
    "arrived": JobProgressStatus.ON_SITE,
    "arrived_on_site": JobProgressStatus.ON_SITE,
    "at_location": JobProgressStatus.ON_SITE,
    "completed": JobProgressStatus.COMPLETED,
    "done": JobProgressStatus.COMPLETED,
    "finished": JobProgressStatus.COMPLETED,
    "wrapped": JobProgressStatus.COMPLETED,
    "skipped": JobProgressStatus.SKIPPED,
    "cancelled": JobProgressStatus.SKIPPED,
}

# Timestamp column stamped when a job enters the status
STATUS_TIMESTAMPS = {
    JobProgressStatus.EN_ROUTE: "started_at",
    JobProgressStatus.ON_SITE: "arrived_at",
    JobProgressStatus.COMPLETED: "completed_at",
}

_ISO_DATE = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def parse_job_progress_status(
    value: Any,
    completed: bool = False,
    skipped: bool = False,
) -> JobProgressStatus:
    """Map a loose status string to a JobProgressStatus.

    Explicit skipped/completed flags win over the string.
    """
    if skipped:
        return JobProgressStatus.SKIPPED
    if completed:
        return JobProgressStatus.COMPLETED
    if isinstance(value, str):
        key = re.sub(r"\s+", "_", value.strip().lower())
        if key in STATUS_NORMALISATION:
            return STATUS_NORMALISATION[key]
    return JobProgressStatus.SCHEDULED


def normalize_string(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float):
        return str(value) if math.isfinite(value) else ""
    if isinstance(value, int):
        return str(value)
    if not value:
        return ""
    return str(value).strip()


def normalize_optional_string(value: Any) -> Optional[str]:
    return normalize_string(value) or None


def normalize_number(value: Any) -> float:
    """Finite float, or 0 for anything unparsable."""
    try:
        parsed = float(value if value is not None else 0)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def normalize_date(value: Any) -> Optional[str]:
    """Trim to YYYY-MM-DD where possible."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        match = _ISO_DATE.match(trimmed)
        return match.group(1) if match else trimmed
    return None


def normalize_job_type(value: Any) -> JobType:
    raw = normalize_string(value).lower()
    if not raw:
        return JobType.PUT_OUT

    cleaned = re.sub(r"[-\s]", "_", raw)
    if cleaned in ("bring_in", "bringin", "bring", "in") or cleaned.endswith("_in"):
        return JobType.BRING_IN
    return JobType.PUT_OUT


def _get(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def normalize_job(record: Any) -> dict[str, Any]:
    """Clean a job row (ORM object or mapping) into a predictable dict."""
    day_of_week = _get(record, "day_of_week")
    return {
        "id": normalize_string(_get(record, "id")),
        "property_id": normalize_optional_string(_get(record, "property_id")),
        "address": normalize_string(_get(record, "address")),
        "lat": normalize_number(_get(record, "lat")),
        "lng": normalize_number(_get(record, "lng")),
        "job_type": normalize_job_type(_get(record, "job_type")),
        "bins": normalize_optional_string(_get(record, "bins")),
        "notes": normalize_optional_string(_get(record, "notes")),
        "client_name": normalize_optional_string(_get(record, "client_name")),
        "photo_path": normalize_optional_string(_get(record, "photo_path")),
        "last_completed_on": normalize_date(_get(record, "last_completed_on")),
        "assigned_to": normalize_optional_string(_get(record, "assigned_to")),
        "day_of_week": str(day_of_week).strip() if day_of_week else None,
        "status": parse_job_progress_status(
            _get(record, "status"),
            completed=bool(_get(record, "last_completed_on")),
        ),
    }


def normalize_jobs(records: Optional[Iterable[Any]]) -> list[dict[str, Any]]:
    if not records:
        return []
    return [normalize_job(record) for record in records]


def jobs_for_day(day: OperationalDay) -> Select:
    """Jobs filed under the weekday that are still open or were completed on `day.date`.

    Completed rows are kept by generation, so earlier weeks' completions
    share the weekday name and must be excluded.
    """
    return select(Job).where(
        func.lower(func.trim(Job.day_of_week)) == day.day_name.lower(),
        or_(Job.last_completed_on.is_(None), Job.last_completed_on == day.date),
    )


def group_jobs_by_weekday(jobs: Iterable[Mapping[str, Any]]) -> list[tuple[str, list[Mapping[str, Any]]]]:
    """Bucket normalised jobs Sunday to Saturday.

    Unrecognised day labels get their own buckets (sorted), and jobs with no
    day go last under "Unscheduled".
    """
    buckets: dict[str, list[Mapping[str, Any]]] = {name: [] for name in DAY_NAMES}
    extras: dict[str, list[Mapping[str, Any]]] = {}
    unscheduled: list[Mapping[str, Any]] = []

    for job in jobs:
        raw_day = normalize_string(job.get("day_of_week"))
        if not raw_day:
            unscheduled.append(job)
            continue

        canonical = next((name for name in DAY_NAMES if name.lower() == raw_day.lower()), None)
        if canonical is None:
            canonical = next((name for name in DAY_NAMES if name[:3].lower() == raw_day[:3].lower()), None)

        if canonical:
            buckets[canonical].append(job)
        else:
            extras.setdefault(raw_day, []).append(job)

    grouped = list(buckets.items())
    grouped.extend(sorted(extras.items()))
    if unscheduled:
        grouped.append(("Unscheduled", unscheduled))
    return grouped


class JobProgressService:
    """Service for moving jobs through a run."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def update_status(
        self,
        job_ids: Iterable[Any],
        status: JobProgressStatus,
        extra_updates: Optional[dict[str, Any]] = None,
    ) -> int:
        """Set `status` on the given jobs and stamp the matching timestamp.

        Returns the number of rows updated. Blank and duplicate ids are ignored.
        """
        unique_ids: list[uuid.UUID] = []
        for value in job_ids:
            raw = normalize_string(value)
            if not raw:
                continue
            try:
                job_id = uuid.UUID(raw)
            except ValueError:
                logger.warning(f"[JOBS] Ignoring malformed job id: {raw}")
                continue
            if job_id not in unique_ids:
                unique_ids.append(job_id)

        if not unique_ids:
            return 0

        updates: dict[str, Any] = {"status": status.value, **(extra_updates or {})}
        stamp_column = STATUS_TIMESTAMPS.get(status)
        if stamp_column and stamp_column not in updates:
            updates[stamp_column] = datetime.utcnow()

        result = await self.db.execute(
            update(Job).where(Job.id.in_(unique_ids)).values(**updates)
        )
        return result.rowcount or 0
