"""Property request model."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.enums import PropertyRequestStatus


class PropertyRequest(Base):
    """A client's request to add a new address to their account.

    Approval copies the address into `client_list` and records the new
    property id in `client_property_id`.
    """

    __tablename__ = "property_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PropertyRequestStatus.PENDING.value,
        index=True,
    )

    account_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    account_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    requester_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Address
    address_line1: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    suburb: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    start_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    instructions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Approval
    client_property_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    submitted_by_user_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    submitted_by_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
