"""Proof photo preference schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field

from app.models.enums import JobType, WeekParity
from app.schemas.base import BaseSchema, CreatedAtMixin


class ProofPreferenceUpsert(BaseSchema):
    property_id: Optional[str] = Field(None, alias="propertyId")
    job_type: JobType = Field(..., alias="jobType")
    parity: WeekParity
    photo_path: str = Field(..., min_length=1, alias="photoPath")


class ProofPreferenceResponse(BaseSchema, CreatedAtMixin):
    id: UUID
    property_id: str
    job_type: JobType
    parity: WeekParity
    photo_path: str


class ProofPreferenceSaved(BaseSchema):
    preference: ProofPreferenceResponse
