"""Completion log schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from app.schemas.base import BaseSchema, CreatedAtMixin


class LogCreate(BaseSchema):
    """Staff completion of a job."""

    job_id: UUID = Field(..., alias="jobId")
    photo_path: Optional[str] = Field(None, alias="photoPath")
    notes: Optional[str] = None
    done_on: Optional[date] = Field(None, alias="doneOn")
    gps_lat: Optional[float] = Field(None, ge=-90, le=90, alias="gpsLat")
    gps_lng: Optional[float] = Field(None, ge=-180, le=180, alias="gpsLng")
    gps_acc: Optional[float] = Field(None, ge=0, alias="gpsAcc")
    gps_time: Optional[datetime] = Field(None, alias="gpsTime")


class LogResponse(BaseSchema, CreatedAtMixin):
    """Log row plus derived week information and proof path."""

    id: int
    job_id: Optional[UUID] = None
    client_name: Optional[str] = None
    address: Optional[str] = None
    task_type: Optional[str] = None
    bins: Optional[str] = None
    notes: Optional[str] = None
    photo_path: Optional[str] = None
    done_on: Optional[date] = None
    gps_lat: Optional[float] = None
    gps_lng: Optional[float] = None
    gps_acc: Optional[float] = None
    gps_time: Optional[datetime] = None

    # Derived
    week_label: Optional[str] = None
    week_year: Optional[int] = None
    parity: Optional[str] = None
    proof_path: Optional[str] = None


class ProofUploadRequest(BaseSchema):
    """Ask for a presigned upload URL for a job's proof photo."""

    job_id: UUID = Field(..., alias="jobId")
    mime_type: str = Field("image/jpeg", alias="mimeType")
    file_size_bytes: int = Field(..., gt=0, alias="fileSizeBytes")


class ProofUploadResponse(BaseSchema):
    upload_url: str
    object_path: str
    expires_at: datetime


class PhotoUrlResponse(BaseSchema):
    url: str
    object_path: str


class PurgeLogsResponse(BaseSchema):
    success: bool = True
    removed: int = 0


class ResetTodayResponse(BaseSchema):
    removed: int


class UndoLatestResponse(BaseSchema):
    removed: bool
    removed_id: Optional[int] = None
    message: Optional[str] = None
