"""Client list router - admin CRUD over serviced properties."""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_admin
from app.models.client import ClientProperty
from app.schemas.client import ClientCreate, ClientResponse, ClientUpdate
from app.services.bin_schedule import get_bin_schedule
from app.services.days import extract_day_names
from app.services.job_generation import BIN_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/clients", tags=["clients"])


def to_client_response(client: ClientProperty) -> ClientResponse:
    response = ClientResponse.model_validate(client)
    schedule = get_bin_schedule({name: getattr(client, name) for name in BIN_FIELDS})
    response.collection_days = extract_day_names(client.collection_day)
    response.put_out_days = extract_day_names(client.put_bins_out)
    response.bins_this_week = schedule.active_colors
    return response


async def get_client_or_404(db: AsyncSession, property_id: str) -> ClientProperty:
    result = await db.execute(
        select(ClientProperty).where(ClientProperty.property_id == property_id)
    )
    client = result.scalar_one_or_none()
    if not client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client property not found",
        )
    return client


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    account_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None, min_length=1),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """List client properties with this week's bins."""
    query = select(ClientProperty)
    if account_id:
        query = query.where(ClientProperty.account_id == account_id)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                ClientProperty.client_name.ilike(pattern),
                ClientProperty.company.ilike(pattern),
                ClientProperty.address.ilike(pattern),
            )
        )
    query = query.order_by(ClientProperty.client_name, ClientProperty.address)

    result = await db.execute(query)
    return [to_client_response(client) for client in result.scalars().all()]


@router.get("/{property_id}", response_model=ClientResponse)
async def get_client(
    property_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    client = await get_client_or_404(db, property_id)
    return to_client_response(client)


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    data: ClientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Add a property to the client list."""
    property_id = (data.property_id or "").strip() or str(uuid.uuid4())

    existing = await db.execute(
        select(ClientProperty.property_id).where(ClientProperty.property_id == property_id)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A property with this ID already exists",
        )

    lat_lng = None
    if data.latitude is not None and data.longitude is not None:
        lat_lng = f"{data.latitude},{data.longitude}"

    client = ClientProperty(
        property_id=property_id,
        account_id=data.account_id,
        client_name=data.client_name,
        company=data.company,
        email=data.email,
        address=data.address,
        collection_day=data.collection_day,
        put_bins_out=data.put_bins_out,
        notes=data.notes,
        assigned_to=data.assigned_to,
        lat_lng=lat_lng,
        price_per_month=data.price_per_month,
        red_freq=data.red_freq,
        red_flip=data.red_flip,
        yellow_freq=data.yellow_freq,
        yellow_flip=data.yellow_flip,
        green_freq=data.green_freq,
        green_flip=data.green_flip,
    )
    db.add(client)

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[CLIENTS] Failed to create client {property_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save client",
        )
    await db.refresh(client)

    return to_client_response(client)


@router.patch("/{property_id}", response_model=ClientResponse)
async def update_client(
    property_id: str,
    data: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Update a client property. Jobs pick up changes on the next generation."""
    client = await get_client_or_404(db, property_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(client, field, value)

    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[CLIENTS] Failed to update client {property_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save client",
        )
    await db.refresh(client)

    return to_client_response(client)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    property_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    client = await get_client_or_404(db, property_id)
    await db.delete(client)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[CLIENTS] Failed to delete client {property_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to delete client",
        )
