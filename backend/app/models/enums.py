"""Enumeration types for the BinDay domain model."""

from enum import Enum


class PortalRole(str, Enum):
    """Portal a signed-in user belongs to."""
    ADMIN = "admin"
    STAFF = "staff"
    CLIENT = "client"


class JobType(str, Enum):
    """Kind of bin job."""
    PUT_OUT = "put_out"      # Wheel bins to the kerb before collection
    BRING_IN = "bring_in"    # Return bins after collection


class JobProgressStatus(str, Enum):
    """Progress of a job during a run."""
    SCHEDULED = "scheduled"
    EN_ROUTE = "en_route"
    ON_SITE = "on_site"
    COMPLETED = "completed"
    SKIPPED = "skipped"


class WeekParity(str, Enum):
    """Odd/even rotation week."""
    ODD = "odd"
    EVEN = "even"


class PropertyRequestStatus(str, Enum):
    """Status of a client-submitted property request."""
    PENDING = "pending"
    APPROVED = "approved"


class BinColor(str, Enum):
    """Bin lid colours tracked per property."""
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
