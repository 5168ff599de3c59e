"""Firebase JWT verification and portal role guards."""

import logging
from typing import Any, Optional

import firebase_admin
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.models.enums import PortalRole
from app.services.roles import (
    normalize_portal_role,
    resolve_highest_priority_role,
    resolve_portal_role_from_claims,
)

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def ensure_firebase_app() -> None:
    """Initialize the Firebase Admin SDK once per process."""
    if firebase_admin._apps:
        return
    settings = get_settings()
    options = {"projectId": settings.firebase_project_id}
    if settings.google_application_credentials:
        cred = credentials.Certificate(settings.google_application_credentials)
        firebase_admin.initialize_app(cred, options)
    else:
        firebase_admin.initialize_app(options=options)


class AuthenticatedUser:
    """Represents an authenticated user from a Firebase ID token."""

    def __init__(
        self,
        uid: str,
        email: Optional[str] = None,
        email_verified: bool = False,
        claims: Optional[dict[str, Any]] = None,
    ):
        self.uid = uid
        self.email = email
        self.email_verified = email_verified
        self.claims = claims or {}
        self.full_name: Optional[str] = None
        self.role: Optional[PortalRole] = None
        self.has_profile: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == PortalRole.ADMIN


def _decode_token(token: str) -> AuthenticatedUser:
    ensure_firebase_app()
    try:
        decoded_token = auth.verify_id_token(token)
    except auth.ExpiredIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except auth.InvalidIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except Exception as e:
        logger.warning(f"[AUTH] Token verification failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification failed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthenticatedUser(
        uid=decoded_token["uid"],
        email=decoded_token.get("email"),
        email_verified=decoded_token.get("email_verified", False),
        claims=decoded_token,
    )


async def verify_firebase_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """Verify a Firebase ID token. Tokens are only verified, never minted."""
    return _decode_token(credentials.credentials)


async def verify_optional_firebase_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[AuthenticatedUser]:
    """Like verify_firebase_token, but anonymous callers get None."""
    if credentials is None:
        return None
    return _decode_token(credentials.credentials)


async def attach_profile(db: AsyncSession, auth_user: AuthenticatedUser) -> AuthenticatedUser:
    """Resolve the portal role from token claims and `user_profile`.

    Claims and profile are both server-controlled, so the more privileged
    of the two wins.
    """
    from app.models.user import UserProfile

    result = await db.execute(
        select(UserProfile).where(UserProfile.user_id == auth_user.uid)
    )
    profile = result.scalar_one_or_none()

    claims_role = resolve_portal_role_from_claims(auth_user.claims)
    profile_role = None
    if profile:
        auth_user.has_profile = True
        auth_user.full_name = profile.full_name
        auth_user.email = auth_user.email or profile.email
        profile_role = normalize_portal_role(profile.role)

    auth_user.role = resolve_highest_priority_role(claims_role, profile_role)
    return auth_user


async def get_current_user(
    auth_user: AuthenticatedUser = Depends(verify_firebase_token),
    db: AsyncSession = Depends(get_db),
) -> AuthenticatedUser:
    """Get current user with portal role attached."""
    return await attach_profile(db, auth_user)


async def get_optional_user(
    auth_user: Optional[AuthenticatedUser] = Depends(verify_optional_firebase_token),
    db: AsyncSession = Depends(get_db),
) -> Optional[AuthenticatedUser]:
    if auth_user is None:
        return None
    return await attach_profile(db, auth_user)


def require_signed_in(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Require a user with a recognised portal role."""
    if current_user.role is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Portal access has not been granted",
        )
    return current_user


def require_staff(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    """Require staff or admin (admins can run routes too)."""
    if current_user.role not in (PortalRole.STAFF, PortalRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff privileges required",
        )
    return current_user


def require_admin(
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> AuthenticatedUser:
    if current_user.role != PortalRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
