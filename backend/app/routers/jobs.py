"""Jobs router - daily generation and run sheets."""

import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_admin, require_staff
from app.models.enums import JobProgressStatus
from app.models.job import Job
from app.schemas.job import (
    CreateJobsRequest,
    JobGenerationResponse,
    JobResponse,
    JobStatusUpdate,
    JobStatusUpdateResponse,
    WeekDayJobs,
    WeeklyJobsResponse,
)
from app.services.bin_schedule import normalise_bin_list
from app.services.days import get_job_generation_day_info
from app.services.job_generation import JobGenerationService, PropertyNotFoundError
from app.services.job_status import (
    STATUS_NORMALISATION,
    JobProgressService,
    group_jobs_by_weekday,
    jobs_for_day,
    normalize_job,
    normalize_jobs,
    parse_job_progress_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["jobs"])


@router.post("/admin/jobs/create", response_model=JobGenerationResponse)
async def create_jobs_for_property(
    data: CreateJobsRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Regenerate today's jobs for a single property."""
    service = JobGenerationService(db)
    try:
        result = await service.generate_for_property(data.property_id)
        await db.commit()
    except PropertyNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[JOBS] Failed to create jobs for {data.property_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create jobs",
        )

    if result.created == 0:
        message = f"No jobs scheduled for {result.day_name}"
    else:
        message = f"Jobs created for {result.day_name}"

    return JobGenerationResponse(
        message=message,
        day_of_week=result.day_name,
        created=result.created,
        removed=result.removed,
    )


@router.post("/admin/jobs/generate", response_model=JobGenerationResponse)
async def generate_jobs(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Regenerate today's jobs across every property."""
    service = JobGenerationService(db)
    try:
        result = await service.generate_all()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[JOBS] Failed to generate jobs: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate jobs",
        )

    return JobGenerationResponse(
        message=f"Jobs generated for {result.day_name}",
        day_of_week=result.day_name,
        created=result.created,
        removed=result.removed,
    )


@router.get("/jobs/today", response_model=List[JobResponse])
async def list_todays_jobs(
    assigned_to: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_staff),
):
    """Run sheet for the operational day."""
    day = get_job_generation_day_info()

    query = jobs_for_day(day)
    if assigned_to:
        query = query.where(Job.assigned_to == assigned_to.strip())
    query = query.order_by(Job.address, Job.job_type)

    result = await db.execute(query)
    jobs = []
    for row in result.scalars().all():
        job = normalize_job(row)
        jobs.append(JobResponse(**job, bin_labels=normalise_bin_list(job["bins"])))
    return jobs


@router.get("/jobs/week", response_model=WeeklyJobsResponse)
async def list_weekly_jobs(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_staff),
):
    """Jobs assigned to the signed-in crew member, grouped by weekday."""
    result = await db.execute(
        select(Job)
        .where(Job.assigned_to == current_user.uid)
        .order_by(Job.address, Job.job_type)
    )
    jobs = normalize_jobs(result.scalars().all())

    days = [
        WeekDayJobs(
            label=label,
            jobs=[JobResponse(**job, bin_labels=normalise_bin_list(job["bins"])) for job in bucket],
        )
        for label, bucket in group_jobs_by_weekday(jobs)
    ]
    return WeeklyJobsResponse(
        total=len(jobs),
        remaining=sum(1 for job in jobs if not job["last_completed_on"]),
        days=days,
    )


@router.post("/jobs/status", response_model=JobStatusUpdateResponse)
async def update_job_status(
    data: JobStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_staff),
):
    """Move jobs to a new progress status."""
    key = re.sub(r"\s+", "_", data.status.strip().lower())
    if key not in STATUS_NORMALISATION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown job status: {data.status}",
        )
    new_status: JobProgressStatus = parse_job_progress_status(data.status)

    service = JobProgressService(db)
    try:
        updated = await service.update_status(data.job_ids, new_status)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[JOBS] Failed to update job status: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update job status",
        )

    logger.info(f"[JOBS] {current_user.uid} set {updated} job(s) to {new_status.value}")
    return JobStatusUpdateResponse(status=new_status, updated=updated)
