"""Proof photo preference model."""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, Text, Uuid, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ProofPhotoPreference(Base):
    """Reference photo chosen per property, job type and week parity."""

    __tablename__ = "proof_photo_preferences"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    property_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    job_type: Mapped[str] = mapped_column(String(20), nullable=False)
    parity: Mapped[str] = mapped_column(String(10), nullable=False)
    photo_path: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("property_id", "job_type", "parity", name="uq_proof_pref_scope"),
        CheckConstraint("job_type IN ('put_out', 'bring_in')", name="ck_proof_pref_job_type"),
        CheckConstraint("parity IN ('odd', 'even')", name="ck_proof_pref_parity"),
    )
