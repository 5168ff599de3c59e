"""SQLAlchemy models for BinDay Operations."""

from app.models.user import UserProfile
from app.models.client import ClientProperty
from app.models.job import Job
from app.models.log import JobLog
from app.models.property_request import PropertyRequest
from app.models.proof_preference import ProofPhotoPreference
from app.models.portal_token import ClientPortalToken

__all__ = [
    "UserProfile",
    "ClientProperty",
    "Job",
    "JobLog",
    "PropertyRequest",
    "ProofPhotoPreference",
    "ClientPortalToken",
]
