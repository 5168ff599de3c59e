"""Client portal token model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ClientPortalToken(Base):
    """Shareable link token granting read access to one client account."""

    __tablename__ = "client_portal_tokens"

    token: Mapped[str] = mapped_column(String(128), primary_key=True)
    account_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    property_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
