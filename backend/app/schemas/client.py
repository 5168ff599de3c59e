"""Client property schemas."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.base import BaseSchema, CreatedAtMixin

FREQUENCIES = ("Weekly", "Fortnightly")
FLIPS = ("Yes", "No")


class _BinFields(BaseSchema):
    red_freq: Optional[str] = None
    red_flip: Optional[str] = None
    yellow_freq: Optional[str] = None
    yellow_flip: Optional[str] = None
    green_freq: Optional[str] = None
    green_flip: Optional[str] = None

    @field_validator("red_freq", "yellow_freq", "green_freq")
    @classmethod
    def validate_frequency(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        for option in FREQUENCIES:
            if value.lower() == option.lower():
                return option
        raise ValueError("Frequency must be Weekly or Fortnightly")

    @field_validator("red_flip", "yellow_flip", "green_flip")
    @classmethod
    def validate_flip(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        for option in FLIPS:
            if value.lower() == option.lower():
                return option
        raise ValueError("Flip must be Yes or No")


class ClientCreate(_BinFields):
    """Create a client property."""

    property_id: Optional[str] = Field(None, max_length=64, alias="propertyId")
    account_id: str = Field(..., min_length=1, max_length=64, alias="accountId")
    client_name: str = Field(..., min_length=1, max_length=255, alias="clientName")
    company: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    address: str = Field(..., min_length=1)
    collection_day: Optional[str] = Field(None, max_length=100, alias="collectionDay")
    put_bins_out: Optional[str] = Field(None, max_length=100, alias="putOutDay")
    notes: Optional[str] = None
    assigned_to: Optional[str] = Field(None, max_length=255, alias="assignedTo")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    price_per_month: Optional[float] = Field(None, ge=0, alias="pricePerMonth")


class ClientUpdate(_BinFields):
    """Update a client property."""

    account_id: Optional[str] = Field(None, min_length=1, max_length=64, alias="accountId")
    client_name: Optional[str] = Field(None, min_length=1, max_length=255, alias="clientName")
    company: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, min_length=1)
    collection_day: Optional[str] = Field(None, max_length=100, alias="collectionDay")
    put_bins_out: Optional[str] = Field(None, max_length=100, alias="putOutDay")
    notes: Optional[str] = None
    assigned_to: Optional[str] = Field(None, max_length=255, alias="assignedTo")
    lat_lng: Optional[str] = Field(None, max_length=64)
    photo_path: Optional[str] = None
    price_per_month: Optional[float] = Field(None, ge=0, alias="pricePerMonth")


class ClientResponse(BaseSchema, CreatedAtMixin):
    """Client property with derived schedule fields.

    Bin fields are reported as stored, including legacy spellings.
    """

    property_id: str
    account_id: Optional[str] = None
    client_name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    collection_day: Optional[str] = None
    put_bins_out: Optional[str] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    lat_lng: Optional[str] = None
    photo_path: Optional[str] = None
    price_per_month: Optional[float] = None
    red_freq: Optional[str] = None
    red_flip: Optional[str] = None
    yellow_freq: Optional[str] = None
    yellow_flip: Optional[str] = None
    green_freq: Optional[str] = None
    green_flip: Optional[str] = None

    # Derived
    collection_days: list[str] = []
    put_out_days: list[str] = []
    bins_this_week: list[str] = []

