"""Client portal and portal token schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from app.schemas.base import BaseSchema, CreatedAtMixin
from app.schemas.job import JobResponse


class PortalTokenCreate(BaseSchema):
    """Issue a portal link for an account or a single property."""

    account_id: Optional[str] = Field(None, alias="accountId")
    property_id: Optional[str] = Field(None, alias="propertyId")
    expires_in_days: Optional[int] = Field(None, gt=0, le=3650, alias="expiresInDays")

    @model_validator(mode="after")
    def require_target(self):
        if not self.account_id and not self.property_id:
            raise ValueError("An account or property is required")
        return self


class PortalTokenResponse(BaseSchema, CreatedAtMixin):
    token: str
    account_id: Optional[str] = None
    property_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    account_name: Optional[str] = None
    address: Optional[str] = None
    portal_path: str


class PortalProperty(BaseSchema):
    property_id: str
    address: Optional[str] = None
    notes: Optional[str] = None
    collection_days: list[str] = []
    put_out_days: list[str] = []
    bins_this_week: list[str] = []
    bin_labels: list[str] = []


class PortalScopeResponse(BaseSchema):
    account_id: str
    account_name: str
    expires_at: Optional[datetime] = None
    week_label: str
    parity: str
    properties: list[PortalProperty] = []


class PortalJobsResponse(BaseSchema):
    account_id: str
    jobs: list[JobResponse] = []


class PortalHistoryItem(BaseSchema):
    id: int
    property_id: Optional[str] = None
    address: Optional[str] = None
    task_type: Optional[str] = None
    bins: Optional[str] = None
    done_on: Optional[str] = None
    week_label: Optional[str] = None
    proof_path: Optional[str] = None


class PortalHistoryResponse(BaseSchema):
    account_id: str
    history: list[PortalHistoryItem] = []
