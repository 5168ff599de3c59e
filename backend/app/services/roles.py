"""Portal role resolution.

Roles arrive from several places with inconsistent spelling: Firebase
custom claims, nested metadata blobs copied over from older accounts, and
the `user_profile.role` column. Everything is normalised to
admin/staff/client before access decisions are made.
"""

from typing import Any, Mapping, Optional

from app.models.enums import PortalRole

ADMIN_ROLES = frozenset({"admin", "ops", "operations"})
STAFF_ROLES = frozenset({"staff", "team"})
CLIENT_ROLES = frozenset({"client", "customer"})

ROLE_PRIORITY = {
    PortalRole.ADMIN: 3,
    PortalRole.STAFF: 2,
    PortalRole.CLIENT: 1,
}

ROLE_KEYS = ("role", "portal_role", "portalRole")
METADATA_KEYS = ("user_metadata", "app_metadata")

HOME_PATHS = {
    PortalRole.ADMIN: "/admin",
    PortalRole.STAFF: "/staff/run",
    PortalRole.CLIENT: "/client/dashboard",
}
SIGN_IN_PATH = "/auth/sign-in"


def normalize_portal_role(role: Any) -> Optional[PortalRole]:
    if not isinstance(role, str):
        return None

    normalized = role.strip().lower()
    if not normalized:
        return None

    if normalized in ADMIN_ROLES:
        return PortalRole.ADMIN
    if normalized in STAFF_ROLES:
        return PortalRole.STAFF
    if normalized in CLIENT_ROLES:
        return PortalRole.CLIENT
    return None


def extract_portal_role(metadata: Optional[Mapping[str, Any]]) -> Optional[PortalRole]:
    """First recognised role under any of ROLE_KEYS."""
    if not metadata:
        return None
    for key in ROLE_KEYS:
        role = normalize_portal_role(metadata.get(key))
        if role:
            return role
    return None


def resolve_portal_role_from_claims(claims: Optional[Mapping[str, Any]]) -> Optional[PortalRole]:
    """Role from top-level token claims, then nested user/app metadata."""
    if not claims:
        return None

    role = extract_portal_role(claims)
    if role:
        return role

    for key in METADATA_KEYS:
        nested = claims.get(key)
        if isinstance(nested, Mapping):
            role = extract_portal_role(nested)
            if role:
                return role
    return None


def resolve_highest_priority_role(*roles: Optional[PortalRole]) -> Optional[PortalRole]:
    """Most privileged of the given roles (admin > staff > client)."""
    resolved: Optional[PortalRole] = None
    for role in roles:
        if not role:
            continue
        if resolved is None or ROLE_PRIORITY[role] > ROLE_PRIORITY[resolved]:
            resolved = role
    return resolved


def home_path_for_role(role: Optional[PortalRole]) -> str:
    """Landing path for a role; unknown roles go back to sign-in."""
    if role is None:
        return SIGN_IN_PATH
    return HOME_PATHS.get(role, SIGN_IN_PATH)
