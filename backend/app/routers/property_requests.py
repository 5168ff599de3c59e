"""Property requests router - client submissions and admin approval."""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, get_optional_user, require_admin
from app.models.client import ClientProperty
from app.models.enums import PropertyRequestStatus
from app.models.property_request import PropertyRequest
from app.schemas.property_request import (
    PropertyRequestApprove,
    PropertyRequestApproved,
    PropertyRequestCreate,
    PropertyRequestResponse,
    PropertyRequestSubmitted,
)
from app.services.request_forwarder import RequestForwarder, get_request_forwarder

logger = logging.getLogger(__name__)

router = APIRouter(tags=["property-requests"])

FORWARD_FAILED_MESSAGE = (
    "Request captured, but we could not reach our scheduling system. "
    "Our team will follow up shortly."
)


def format_address(parts: list[Optional[str]]) -> str:
    """Join the non-empty, trimmed address parts with ", "."""
    return ", ".join(part.strip() for part in parts if part and part.strip())


@router.post(
    "/property-requests",
    response_model=PropertyRequestSubmitted,
    status_code=status.HTTP_201_CREATED,
)
async def submit_property_request(
    data: PropertyRequestCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    forwarder: RequestForwarder = Depends(get_request_forwarder),
):
    """Capture a request to add a property, then forward it for scheduling."""
    user_email = current_user.email if current_user else None

    property_request = PropertyRequest(
        status=PropertyRequestStatus.PENDING.value,
        account_id=data.account_id,
        account_name=data.account_name,
        requester_email=data.requester_email or user_email,
        address_line1=data.address_line1,
        address_line2=data.address_line2,
        suburb=data.suburb,
        city=data.city,
        state=data.state,
        postal_code=data.postal_code,
        start_date=data.start_date,
        instructions=data.instructions,
        submitted_by_user_id=current_user.uid if current_user else None,
        submitted_by_email=user_email or data.requester_email,
    )
    db.add(property_request)

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[REQUESTS] Failed to persist property request: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="We were unable to save your request. Please try again or contact support.",
        )
    await db.refresh(property_request)

    payload = data.model_dump(by_alias=True, exclude_none=True)
    forwarded = await forwarder.forward(payload, str(property_request.id))
    if not forwarded:
        response.status_code = status.HTTP_202_ACCEPTED
        return PropertyRequestSubmitted(
            message=FORWARD_FAILED_MESSAGE,
            request_id=property_request.id,
            status=property_request.status,
        )

    return PropertyRequestSubmitted(
        message="Property request received.",
        request_id=property_request.id,
        status=property_request.status,
    )


@router.get("/admin/property-requests", response_model=List[PropertyRequestResponse])
async def list_property_requests(
    request_status: Optional[PropertyRequestStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """List property requests, newest first."""
    query = select(PropertyRequest).order_by(PropertyRequest.created_at.desc())
    if request_status:
        query = query.where(PropertyRequest.status == request_status.value)

    result = await db.execute(query)
    return [PropertyRequestResponse.model_validate(row) for row in result.scalars().all()]


@router.post("/property-requests/{request_id}/approve", response_model=PropertyRequestApproved)
async def approve_property_request(
    request_id: uuid.UUID,
    data: Optional[PropertyRequestApprove] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Approve a pending request by adding the address to the client list."""
    result = await db.execute(
        select(PropertyRequest).where(PropertyRequest.id == request_id)
    )
    property_request = result.scalar_one_or_none()

    if not property_request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property request not found.",
        )

    if property_request.status and property_request.status != PropertyRequestStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This property request has already been processed.",
        )

    if not property_request.account_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Property request is missing an account reference.",
        )

    property_id = (
        (data.property_id.strip() if data and data.property_id else None)
        or (property_request.client_property_id or "").strip()
        or str(uuid.uuid4())
    )
    address = format_address([
        property_request.address_line1,
        property_request.address_line2,
        property_request.suburb,
        property_request.city,
        property_request.state,
        property_request.postal_code,
    ])

    client = ClientProperty(
        property_id=property_id,
        account_id=property_request.account_id,
        client_name=property_request.account_name or property_request.account_id,
        company=property_request.account_name,
        address=address or property_request.address_line1,
        notes=property_request.instructions,
        email=property_request.requester_email,
    )
    db.add(client)

    property_request.status = PropertyRequestStatus.APPROVED.value
    property_request.approved_at = datetime.utcnow()
    property_request.approved_by = current_user.uid
    property_request.client_property_id = property_id

    # Client row and status change commit together
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[REQUESTS] Failed to approve property request {request_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="The property was not approved due to an internal error. Please try again.",
        )
    await db.refresh(property_request)

    logger.info(f"[REQUESTS] Approved {request_id} as property {property_id}")
    return PropertyRequestApproved(
        property_id=property_id,
        request=PropertyRequestResponse.model_validate(property_request),
    )
