"""Property request schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.base import BaseSchema, CreatedAtMixin


class PropertyRequestCreate(BaseSchema):
    """Client-submitted request to add an address."""

    account_id: str = Field(
        ...,
        min_length=1,
        alias="accountId",
        description="An account is required to submit a property request",
    )
    account_name: Optional[str] = Field(None, alias="accountName")
    requester_email: Optional[EmailStr] = Field(None, alias="requesterEmail")
    address_line1: str = Field(..., min_length=1, alias="addressLine1")
    address_line2: Optional[str] = Field(None, alias="addressLine2")
    suburb: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = Field(None, alias="postalCode")
    start_date: Optional[str] = Field(None, alias="startDate")
    instructions: Optional[str] = None


class PropertyRequestSubmitted(BaseSchema):
    message: str
    request_id: Optional[UUID] = None
    status: str = "pending"


class PropertyRequestApprove(BaseSchema):
    """Optional body: reuse a known property id instead of minting one."""

    property_id: Optional[str] = Field(None, min_length=1, alias="propertyId")


class PropertyRequestResponse(BaseSchema, CreatedAtMixin):
    id: UUID
    status: str
    account_id: Optional[str] = None
    account_name: Optional[str] = None
    requester_email: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    start_date: Optional[str] = None
    instructions: Optional[str] = None
    client_property_id: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None


class PropertyRequestApproved(BaseSchema):
    message: str = "Property request approved."
    property_id: str
    request: PropertyRequestResponse
