"""Completion log model (proof photo + GPS)."""

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import Integer, String, DateTime, Date, Text, Float, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class JobLog(Base):
    """Record written by staff when a job is completed on site."""

    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True, index=True)

    client_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    task_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bins: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    done_on: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Device GPS at time of capture
    gps_lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gps_lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gps_acc: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    gps_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
