"""Auth router - current user and password recovery."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from firebase_admin import auth

from app.core.config import get_settings
from app.core.security import AuthenticatedUser, ensure_firebase_app, get_current_user
from app.schemas.auth import CurrentUserResponse, ResetPasswordRequest, ResetPasswordResponse
from app.services.roles import home_path_for_role

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/reset-password", response_model=ResetPasswordResponse)
async def reset_password(data: ResetPasswordRequest):
    """Generate a password recovery link that lands on the reset confirm page.

    Delivery of the link is handled by Firebase's email templates.
    """
    settings = get_settings()
    ensure_firebase_app()

    action_code_settings = auth.ActionCodeSettings(
        url=f"{settings.site_url.rstrip('/')}/auth/reset/confirm",
    )
    try:
        auth.generate_password_reset_link(data.email, action_code_settings)
    except auth.UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No account exists for that email.",
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except Exception as e:
        logger.error(f"[AUTH] Failed to generate reset link: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected error occurred.",
        )

    return ResetPasswordResponse()


@router.get("/auth/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Get current authenticated user with portal role and landing page."""
    return CurrentUserResponse(
        uid=current_user.uid,
        email=current_user.email,
        email_verified=current_user.email_verified,
        full_name=current_user.full_name,
        role=current_user.role.value if current_user.role else None,
        home_path=home_path_for_role(current_user.role),
    )
