"""Job schemas."""

from typing import Optional

from pydantic import Field

from app.models.enums import JobProgressStatus, JobType
from app.schemas.base import BaseSchema


class CreateJobsRequest(BaseSchema):
    """Generate today's jobs for one property."""

    property_id: str = Field(..., min_length=1, alias="propertyId")


class JobGenerationResponse(BaseSchema):
    status: str = "success"
    message: str
    day_of_week: str
    created: int = 0
    removed: int = 0


class JobResponse(BaseSchema):
    """Normalised job as shown on run sheets and the client tracker."""

    id: str
    property_id: Optional[str] = None
    address: str
    lat: float
    lng: float
    job_type: JobType
    bins: Optional[str] = None
    bin_labels: list[str] = []
    notes: Optional[str] = None
    client_name: Optional[str] = None
    photo_path: Optional[str] = None
    last_completed_on: Optional[str] = None
    assigned_to: Optional[str] = None
    day_of_week: Optional[str] = None
    status: JobProgressStatus = JobProgressStatus.SCHEDULED


class JobStatusUpdate(BaseSchema):
    """Move one or more jobs to a new progress status."""

    job_ids: list[str] = Field(..., min_length=1, alias="jobIds")
    status: str = Field(..., min_length=1)


class JobStatusUpdateResponse(BaseSchema):
    status: JobProgressStatus
    updated: int


class WeekDayJobs(BaseSchema):
    label: str
    jobs: list[JobResponse] = []


class WeeklyJobsResponse(BaseSchema):
    """A crew member's assigned jobs grouped by weekday."""

    total: int
    remaining: int
    days: list[WeekDayJobs] = []
