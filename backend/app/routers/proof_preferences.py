"""Proof photo preferences router."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_admin
from app.schemas.proof_preference import (
    ProofPreferenceResponse,
    ProofPreferenceSaved,
    ProofPreferenceUpsert,
)
from app.services.proof_photos import ProofPreferenceService, normalize_proof_preference

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/proof-preferences", tags=["proof-preferences"])


@router.post("", response_model=ProofPreferenceSaved)
async def save_proof_preference(
    data: ProofPreferenceUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """Choose the reference photo for a property, job type and parity."""
    preference = normalize_proof_preference(data.model_dump(mode="json"))
    if not preference or not preference.get("property_id"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A property ID is required.",
        )

    service = ProofPreferenceService(db)
    try:
        saved = await service.upsert(
            property_id=preference["property_id"],
            job_type=preference["job_type"],
            parity=preference["parity"],
            photo_path=preference["photo_path"],
        )
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"[PROOFS] Failed to save proof preference: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save proof preference",
        )
    await db.refresh(saved)

    return ProofPreferenceSaved(preference=ProofPreferenceResponse.model_validate(saved))


@router.get("", response_model=List[ProofPreferenceResponse])
async def list_proof_preferences(
    property_id: Optional[List[str]] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_admin),
):
    """List preferences, optionally for specific properties."""
    service = ProofPreferenceService(db)
    preferences = await service.list_for_properties(property_id)
    return [ProofPreferenceResponse.model_validate(pref) for pref in preferences]
