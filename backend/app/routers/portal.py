"""Client portal router - shareable links and read-only client views."""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_admin
from app.models.client import ClientProperty
from app.models.job import Job
from app.models.log import JobLog
from app.models.portal_token import ClientPortalToken
from app.schemas.job import JobResponse
from app.schemas.portal import (
    PortalHistoryItem,
    PortalHistoryResponse,
    PortalJobsResponse,
    PortalProperty,
    PortalScopeResponse,
    PortalTokenCreate,
    PortalTokenResponse,
)
from app.services.bin_schedule import get_bin_schedule, normalise_bin_list
from app.services.days import extract_day_names, get_job_generation_day_info, get_operational_date
from app.services.job_generation import BIN_FIELDS
from app.services.job_status import jobs_for_day, normalize_date, normalize_job
from app.services.portal_access import (
    PortalScope,
    PortalTokenExpiredError,
    resolve_portal_scope,
    resolve_portal_token,
)
from app.services.proof_photos import derive_proof_path_from_log
from app.services.weeks import get_custom_week, get_week_info_from_iso, get_week_parity

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/admin/tokens", tags=["portal"])
router = APIRouter(prefix="/portal", tags=["portal"])


def portal_path(token: str) -> str:
    return f"/c/{token}"


@admin_router.get("", response_model=List[PortalTokenResponse])
async def list_portal_tokens(
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """List issued portal links, newest first."""
    result = await db.execute(
        select(ClientPortalToken).order_by(ClientPortalToken.created_at.desc())
    )
    return [
        PortalTokenResponse(
            token=row.token,
            account_id=row.account_id,
            property_id=row.property_id,
            created_at=row.created_at,
            expires_at=row.expires_at,
            portal_path=portal_path(row.token),
        )
        for row in result.scalars().all()
    ]


@admin_router.post("", response_model=PortalTokenResponse, status_code=status.HTTP_201_CREATED)
async def create_portal_token(
    data: PortalTokenCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Issue a portal link for an account or property."""
    target = data.property_id or data.account_id
    scope = await resolve_portal_scope(db, target)
    if not scope:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No client matches that account or property",
        )

    expires_at = None
    if data.expires_in_days:
        expires_at = datetime.utcnow() + timedelta(days=data.expires_in_days)

    token = ClientPortalToken(
        token=secrets.token_urlsafe(24),
        account_id=data.account_id or (None if data.property_id else scope.account_id),
        property_id=data.property_id,
        expires_at=expires_at,
    )
    db.add(token)

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[PORTAL] Failed to create portal token: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to create portal link",
        )
    await db.refresh(token)

    address = None
    if data.property_id:
        address = next(
            (row.address for row in scope.rows if row.property_id == data.property_id),
            None,
        )

    logger.info(f"[PORTAL] Issued portal link for account {scope.account_id}")
    return PortalTokenResponse(
        token=token.token,
        account_id=token.account_id,
        property_id=token.property_id,
        created_at=token.created_at,
        expires_at=token.expires_at,
        account_name=scope.account_name,
        address=address,
        portal_path=portal_path(token.token),
    )


async def get_portal_scope(
    token: str,
    db: AsyncSession = Depends(get_db),
) -> PortalScope:
    """Resolve the portal token in the path to the client's scope."""
    try:
        scope = await resolve_portal_token(db, token)
    except PortalTokenExpiredError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This portal link has expired",
        )
    if not scope:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Portal link not found",
        )
    return scope


@router.get("/{token}", response_model=PortalScopeResponse)
async def get_portal(
    scope: PortalScope = Depends(get_portal_scope),
    db: AsyncSession = Depends(get_db),
):
    """Account overview: properties, service days and this week's bins."""
    result = await db.execute(
        select(ClientProperty).where(ClientProperty.property_id.in_(scope.property_ids))
    )
    clients = {client.property_id: client for client in result.scalars().all()}

    properties = []
    for row in scope.rows:
        client = clients.get(row.property_id)
        if client is None:
            continue
        schedule = get_bin_schedule({name: getattr(client, name) for name in BIN_FIELDS})
        properties.append(
            PortalProperty(
                property_id=row.property_id,
                address=row.address,
                notes=row.notes,
                collection_days=extract_day_names(client.collection_day),
                put_out_days=extract_day_names(client.put_bins_out),
                bins_this_week=schedule.active_colors,
                bin_labels=normalise_bin_list(schedule.active_colors),
            )
        )

    return PortalScopeResponse(
        account_id=scope.account_id,
        account_name=scope.account_name,
        expires_at=scope.expires_at,
        week_label=get_custom_week(get_operational_date()).week,
        parity=get_week_parity(),
        properties=properties,
    )


@router.get("/{token}/jobs", response_model=PortalJobsResponse)
async def get_portal_jobs(
    scope: PortalScope = Depends(get_portal_scope),
    db: AsyncSession = Depends(get_db),
):
    """Today's jobs for the client's properties (live tracker)."""
    day = get_job_generation_day_info()
    result = await db.execute(
        jobs_for_day(day)
        .where(Job.property_id.in_(scope.property_ids))
        .order_by(Job.address, Job.job_type)
    )

    jobs = []
    for row in result.scalars().all():
        job = normalize_job(row)
        jobs.append(JobResponse(**job, bin_labels=normalise_bin_list(job["bins"])))
    return PortalJobsResponse(account_id=scope.account_id, jobs=jobs)


@router.get("/{token}/history", response_model=PortalHistoryResponse)
async def get_portal_history(
    limit: int = Query(50, ge=1, le=200),
    scope: PortalScope = Depends(get_portal_scope),
    db: AsyncSession = Depends(get_db),
):
    """Completed work for the client's properties, newest first."""
    result = await db.execute(
        select(JobLog, Job.property_id)
        .join(Job, JobLog.job_id == Job.id)
        .where(Job.property_id.in_(scope.property_ids))
        .order_by(JobLog.created_at.desc(), JobLog.id.desc())
        .limit(limit)
    )

    history = []
    for log, property_id in result.all():
        week = get_week_info_from_iso(log.done_on or log.created_at)
        history.append(
            PortalHistoryItem(
                id=log.id,
                property_id=property_id,
                address=log.address,
                task_type=log.task_type,
                bins=log.bins,
                done_on=normalize_date(log.done_on or log.created_at),
                week_label=week.label,
                proof_path=derive_proof_path_from_log(log),
            )
        )
    return PortalHistoryResponse(account_id=scope.account_id, history=history)
