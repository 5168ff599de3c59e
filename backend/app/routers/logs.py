"""Logs router - job completion, proof photos and admin log maintenance."""

import logging
from datetime import datetime, timedelta
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_admin, require_staff
from app.models.enums import JobProgressStatus
from app.models.job import Job
from app.models.log import JobLog
from app.schemas.log import (
    LogCreate,
    LogResponse,
    PhotoUrlResponse,
    ProofUploadRequest,
    ProofUploadResponse,
    PurgeLogsResponse,
    ResetTodayResponse,
    UndoLatestResponse,
)
from app.services.days import get_operational_date
from app.services.proof_photos import build_proof_path, derive_proof_path_from_log
from app.services.storage import get_storage_service
from app.services.weeks import get_week_info_from_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["logs"])


def start_of_utc_day(now: datetime | None = None) -> datetime:
    now = now or datetime.utcnow()
    return datetime(now.year, now.month, now.day)


def to_log_response(log: JobLog) -> LogResponse:
    week = get_week_info_from_iso(log.done_on or log.created_at)
    return LogResponse(
        id=log.id,
        job_id=log.job_id,
        client_name=log.client_name,
        address=log.address,
        task_type=log.task_type,
        bins=log.bins,
        notes=log.notes,
        photo_path=log.photo_path,
        done_on=log.done_on,
        gps_lat=log.gps_lat,
        gps_lng=log.gps_lng,
        gps_acc=log.gps_acc,
        gps_time=log.gps_time,
        created_at=log.created_at,
        week_label=week.label,
        week_year=week.year,
        parity=week.parity,
        proof_path=derive_proof_path_from_log(log),
    )


async def get_job_or_404(db: AsyncSession, job_id: UUID) -> Job:
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job not found",
        )
    return job


@router.post("/logs", response_model=LogResponse, status_code=status.HTTP_201_CREATED)
async def create_log(
    data: LogCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_staff),
):
    """Record a job completion and mark the job done."""
    job = await get_job_or_404(db, data.job_id)

    done_on = data.done_on or get_operational_date()
    photo_path = data.photo_path or build_proof_path(
        job.client_name, job.address, done_on, job.job_type
    )

    log = JobLog(
        job_id=job.id,
        client_name=job.client_name,
        address=job.address,
        task_type=job.job_type,
        bins=job.bins,
        notes=data.notes,
        photo_path=photo_path,
        done_on=done_on,
        gps_lat=data.gps_lat,
        gps_lng=data.gps_lng,
        gps_acc=data.gps_acc,
        gps_time=data.gps_time,
    )
    db.add(log)

    job.last_completed_on = done_on
    job.status = JobProgressStatus.COMPLETED.value
    job.completed_at = datetime.utcnow()

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[LOGS] Failed to record completion for job {job.id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to record job completion.",
        )
    await db.refresh(log)

    logger.info(f"[LOGS] Job {job.id} completed by {current_user.uid}")
    return to_log_response(log)


@router.post("/logs/proof-upload", response_model=ProofUploadResponse)
async def create_proof_upload(
    data: ProofUploadRequest,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_staff),
):
    """Presigned upload URL for the job's proof photo.

    The object path follows the rotation-week convention so the admin log
    view can find the photo without storing it first.
    """
    job = await get_job_or_404(db, data.job_id)
    storage = get_storage_service()

    try:
        upload_url, object_path, expires_at = await storage.create_presigned_upload(
            client_name=job.client_name,
            address=job.address,
            completed_on=get_operational_date(),
            task_type=job.job_type,
            mime_type=data.mime_type,
            file_size_bytes=data.file_size_bytes,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return ProofUploadResponse(
        upload_url=upload_url,
        object_path=object_path,
        expires_at=expires_at,
    )


@router.get("/admin/logs", response_model=List[LogResponse])
async def list_logs(
    limit: int = Query(100, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Most recent completion logs."""
    result = await db.execute(
        select(JobLog)
        .order_by(JobLog.created_at.desc(), JobLog.id.desc())
        .limit(limit)
    )
    return [to_log_response(log) for log in result.scalars().all()]


@router.get("/admin/logs/{log_id}/photo", response_model=PhotoUrlResponse)
async def get_log_photo(
    log_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Signed download URL for a log's proof photo."""
    result = await db.execute(select(JobLog).where(JobLog.id == log_id))
    log = result.scalar_one_or_none()
    if not log:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Log not found",
        )

    object_path = derive_proof_path_from_log(log)
    if not object_path:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No proof photo for this log",
        )

    storage = get_storage_service()
    try:
        url = await storage.get_download_url(object_path)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No proof photo for this log",
        )

    return PhotoUrlResponse(url=url, object_path=object_path)


@router.post("/admin/logs/purge-old", response_model=PurgeLogsResponse)
async def purge_old_logs(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete logs older than the retention window."""
    settings = get_settings()
    cutoff = datetime.utcnow() - timedelta(weeks=settings.log_retention_weeks)

    try:
        result = await db.execute(delete(JobLog).where(JobLog.created_at < cutoff))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[LOGS] Failed to delete old logs: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to delete old logs.",
        )

    removed = result.rowcount or 0
    logger.info(f"[LOGS] Purged {removed} log(s) older than {cutoff.isoformat()}")
    return PurgeLogsResponse(removed=removed)


@router.post("/admin/logs/reset-today", response_model=ResetTodayResponse)
async def reset_today_logs(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete every log created since UTC midnight."""
    try:
        result = await db.execute(
            delete(JobLog).where(JobLog.created_at >= start_of_utc_day())
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[LOGS] Failed to reset today logs: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to reset today changes.",
        )

    return ResetTodayResponse(removed=result.rowcount or 0)


@router.post("/admin/logs/undo-latest", response_model=UndoLatestResponse)
async def undo_latest_log(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Delete the newest log created today, if any."""
    try:
        result = await db.execute(
            select(JobLog)
            .where(JobLog.created_at >= start_of_utc_day())
            .order_by(JobLog.created_at.desc(), JobLog.id.desc())
            .limit(1)
        )
        latest = result.scalar_one_or_none()
        if latest is None:
            return UndoLatestResponse(removed=False, message="No changes recorded today to undo.")

        latest_id = latest.id
        await db.delete(latest)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[LOGS] Failed to undo latest log: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to undo the latest change.",
        )

    return UndoLatestResponse(removed=True, removed_id=latest_id)
