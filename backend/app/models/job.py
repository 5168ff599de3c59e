"""Job model for bin put-out/bring-in tasks."""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import String, DateTime, Date, Text, Float, Uuid, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Job(Base):
    """A scheduled or completed bin job for a property.

    Rows with `last_completed_on` unset are regenerated each operational day;
    completed rows are kept as history.
    """

    __tablename__ = "jobs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    account_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    property_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    job_type: Mapped[str] = mapped_column(String(20), nullable=False)
    bins: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    client_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    photo_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    day_of_week: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    last_completed_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Run progress
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    arrived_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_jobs_day_open", "day_of_week", "last_completed_on"),
    )
