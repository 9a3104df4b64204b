"""
Session routes: who is signed in, expiry status and logout.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel

from ..models.user import CurrentUser
from ..services.session_service import SessionService, SessionCheck
from .dependencies import get_session_service

router = APIRouter(prefix="/session", tags=["Session"])


class SessionStatus(BaseModel):
    status: SessionCheck
    expires_at: Optional[datetime] = None


@router.get("/me", response_model=CurrentUser, response_model_by_alias=False)
async def get_current_user_info(session: SessionService = Depends(get_session_service)):
    """Get the user behind the stored token."""
    user = await session.check_identity()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return user


@router.get("/status", response_model=SessionStatus)
async def session_status(session: SessionService = Depends(get_session_service)):
    """Check the stored session's expiry; an expired session is logged out."""
    expires_at = session.session_expiry()
    check = await session.check_expiry()
    return SessionStatus(status=check, expires_at=expires_at)


@router.post("/logout")
async def logout(session: SessionService = Depends(get_session_service)):
    """Logout; clearing the session closes every open view."""
    await session.logout()
    return {"message": "Logged out successfully"}
