"""
Doctor dashboard page.
"""

from fastapi import APIRouter, Depends, status

from ..models.user import CurrentUser
from ..models.view import DoctorDashboardPage
from ..services.api_client import QueueApiClient
from ..services.doctor_service import DoctorService
from ..services.registry import ViewRegistry
from .dependencies import get_api_client, get_registry, require_doctor, refresh_view, retry_view, unmount_view

router = APIRouter(prefix="/doctor", tags=["Doctor"])


@router.get("/dashboard", response_model=DoctorDashboardPage)
async def dashboard(
    current_user: CurrentUser = Depends(require_doctor),
    client: QueueApiClient = Depends(get_api_client),
    registry: ViewRegistry = Depends(get_registry)
):
    """Today's appointments for the signed-in doctor."""
    doctor_id = current_user.doctor
    view = await registry.mount(
        DoctorService.dashboard_key(doctor_id),
        lambda: DoctorService.dashboard_view(client, doctor_id)
    )
    return DoctorService.render_dashboard(view)


@router.post("/dashboard/refresh", response_model=DoctorDashboardPage)
async def refresh_dashboard(
    current_user: CurrentUser = Depends(require_doctor),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await refresh_view(registry, DoctorService.dashboard_key(current_user.doctor))
    return DoctorService.render_dashboard(view)


@router.post("/dashboard/retry", response_model=DoctorDashboardPage)
async def retry_dashboard(
    current_user: CurrentUser = Depends(require_doctor),
    registry: ViewRegistry = Depends(get_registry)
):
    view = await retry_view(registry, DoctorService.dashboard_key(current_user.doctor))
    return DoctorService.render_dashboard(view)


@router.delete("/dashboard", status_code=status.HTTP_204_NO_CONTENT)
async def close_dashboard(
    current_user: CurrentUser = Depends(require_doctor),
    registry: ViewRegistry = Depends(get_registry)
):
    await unmount_view(registry, DoctorService.dashboard_key(current_user.doctor))
