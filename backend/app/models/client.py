"""Client property model (the `client_list` table)."""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, Text, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ClientProperty(Base):
    """A serviced address with its bin collection configuration."""

    __tablename__ = "client_list"

    property_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    account_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    client_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Free-text weekday fields, e.g. "Mon, Thurs"
    collection_day: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    put_bins_out: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    lat_lng: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)  # "lat,lng"
    photo_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price_per_month: Mapped[Optional[float]] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Bin rotation: frequency is "Weekly"/"Fortnightly", flip is "Yes"/"No"
    red_freq: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    red_flip: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    yellow_freq: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    yellow_flip: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    green_freq: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    green_flip: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
