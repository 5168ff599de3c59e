"""Proof photo paths and per-property photo preferences."""

import re
from datetime import date, datetime
from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import JobType, WeekParity
from app.models.proof_preference import ProofPhotoPreference
from app.services.weeks import get_custom_week

PUBLIC_PROOFS_PREFIX = re.compile(r"https?://[^/]+/storage/v1/object/public/proofs/", re.IGNORECASE)
_FILE_EXTENSION = re.compile(r"\.[a-z0-9]+$", re.IGNORECASE)


def to_kebab(value: Optional[str], fallback: str) -> str:
    if not value or not isinstance(value, str):
        return fallback
    kebab = value.lower()
    kebab = re.sub(r",\s*", "-", kebab)
    kebab = re.sub(r"[^a-z0-9-]+", "-", kebab)
    return kebab.strip("-") or fallback


def normalise_proof_file_path(path: Optional[str]) -> Optional[str]:
    """Bucket-relative object path, or None if it does not name a file."""
    if not path or not isinstance(path, str):
        return None
    trimmed = path.strip()
    if not trimmed:
        return None

    cleaned = PUBLIC_PROOFS_PREFIX.sub("", trimmed)
    cleaned = re.sub(r"^proofs/", "", cleaned, flags=re.IGNORECASE)
    cleaned = cleaned.lstrip("/")

    if not cleaned or not _FILE_EXTENSION.search(cleaned):
        return None
    return cleaned


def normalise_task_type(value: Optional[str]) -> JobType:
    if value and "bring" in re.sub(r"[^a-z]", " ", value.lower()):
        return JobType.BRING_IN
    return JobType.PUT_OUT


def _parse_log_date(done_on: Any, created_at: Any) -> Optional[date]:
    candidate = done_on or created_at
    if not candidate:
        return None
    if isinstance(candidate, datetime):
        return candidate.date()
    if isinstance(candidate, date):
        return candidate
    try:
        return datetime.fromisoformat(str(candidate).strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def build_proof_path(
    client_name: Optional[str],
    address: Optional[str],
    completed_on: date,
    task_type: Optional[str],
) -> str:
    """`{client}/{address}/{year}/Week-N/{Put Out|Bring In}.jpg`."""
    safe_client = to_kebab(client_name, "unknown-client")
    safe_address = to_kebab(address, "unknown-address")
    year, week = get_custom_week(completed_on)
    file_name = "Bring In.jpg" if normalise_task_type(task_type) == JobType.BRING_IN else "Put Out.jpg"
    return f"{safe_client}/{safe_address}/{year}/{week}/{file_name}"


def _field(log: Any, key: str) -> Any:
    if isinstance(log, Mapping):
        return log.get(key)
    return getattr(log, key, None)


def derive_proof_path_from_log(log: Any) -> Optional[str]:
    """Stored photo path if valid, else the conventional path for the log."""
    existing = normalise_proof_file_path(_field(log, "photo_path"))
    if existing:
        return existing

    completed_on = _parse_log_date(_field(log, "done_on"), _field(log, "created_at"))
    if not completed_on:
        return None

    return build_proof_path(
        _field(log, "client_name"),
        _field(log, "address"),
        completed_on,
        _field(log, "task_type") or _field(log, "job_type"),
    )


def normalize_proof_preference(raw: Mapping[str, Any]) -> Optional[dict[str, Any]]:
    """Validate a loose preference payload; None if job type, parity or path is missing."""
    property_id = raw.get("property_id")
    property_id = property_id.strip() if isinstance(property_id, str) and property_id.strip() else None

    job_type = raw.get("job_type")
    job_type = job_type if job_type in (JobType.PUT_OUT.value, JobType.BRING_IN.value) else None

    parity = raw.get("parity")
    parity = parity if parity in (WeekParity.ODD.value, WeekParity.EVEN.value) else None

    photo_path = raw.get("photo_path")
    photo_path = photo_path.strip() if isinstance(photo_path, str) else ""

    if not job_type or not parity or not photo_path:
        return None

    return {
        "id": raw.get("id"),
        "property_id": property_id,
        "job_type": job_type,
        "parity": parity,
        "photo_path": photo_path,
        "created_at": raw.get("created_at"),
    }


def group_preferences_by_property(preferences: list[Mapping[str, Any]]) -> dict[str, list[Mapping[str, Any]]]:
    grouped: dict[str, list[Mapping[str, Any]]] = {}
    for preference in preferences:
        property_id = preference.get("property_id")
        if not property_id:
            continue
        grouped.setdefault(property_id, []).append(preference)
    return grouped


def find_preference(
    grouped: Mapping[str, list[Mapping[str, Any]]],
    property_id: Optional[str],
    job_type: str,
    parity: str,
) -> Optional[Mapping[str, Any]]:
    """Exact parity match first, then any preference for the job type."""
    if not property_id:
        return None
    candidates = grouped.get(property_id, [])
    for pref in candidates:
        if pref.get("job_type") == job_type and pref.get("parity") == parity:
            return pref
    for pref in candidates:
        if pref.get("job_type") == job_type:
            return pref
    return None


class ProofPreferenceService:
    """Service for storing proof photo preferences."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert(
        self,
        property_id: str,
        job_type: str,
        parity: str,
        photo_path: str,
    ) -> ProofPhotoPreference:
        """Insert or replace the preference for (property, job type, parity)."""
        result = await self.db.execute(
            select(ProofPhotoPreference).where(
                ProofPhotoPreference.property_id == property_id,
                ProofPhotoPreference.job_type == job_type,
                ProofPhotoPreference.parity == parity,
            )
        )
        preference = result.scalar_one_or_none()

        if preference:
            preference.photo_path = photo_path
        else:
            preference = ProofPhotoPreference(
                property_id=property_id,
                job_type=job_type,
                parity=parity,
                photo_path=photo_path,
            )
            self.db.add(preference)

        await self.db.flush()
        return preference

    async def list_for_properties(self, property_ids: Optional[list[str]] = None) -> list[ProofPhotoPreference]:
        query = select(ProofPhotoPreference).order_by(ProofPhotoPreference.created_at.desc())
        if property_ids is not None:
            query = query.where(ProofPhotoPreference.property_id.in_(property_ids))
        result = await self.db.execute(query)
        return list(result.scalars().all())
