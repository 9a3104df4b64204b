"""
Shared router dependencies and view helpers.
"""

from fastapi import Depends, HTTPException, Request, status

from ..models.user import CurrentUser, UserRole
from ..services.api_client import ApiError, QueueApiClient
from ..services.registry import ViewRegistry
from ..services.session_service import SessionService
from ..services.view import QueueView


def get_registry(request: Request) -> ViewRegistry:
    return request.app.state.registry


def get_api_client(request: Request) -> QueueApiClient:
    return request.app.state.api_client


def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service


async def get_current_user(client: QueueApiClient = Depends(get_api_client)) -> CurrentUser:
    """Resolve the stored token to the signed-in user."""
    try:
        return await client.get_current_user()
    except ApiError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"}
        )


async def require_doctor(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != UserRole.DOCTOR.value or not current_user.doctor:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Doctor account required"
        )
    return current_user


def mounted_view(registry: ViewRegistry, key: str) -> QueueView:
    view = registry.get(key)
    if view is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="View is not mounted"
        )
    return view


async def refresh_view(registry: ViewRegistry, key: str) -> QueueView:
    """Manual refresh; 409 while the previous one is still running."""
    view = mounted_view(registry, key)
    if not await view.refresh():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Refresh already in progress"
        )
    return view


async def retry_view(registry: ViewRegistry, key: str) -> QueueView:
    view = mounted_view(registry, key)
    await view.retry()
    return view


async def unmount_view(registry: ViewRegistry, key: str) -> None:
    if not await registry.unmount(key):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="View is not mounted"
        )
